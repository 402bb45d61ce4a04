"""Tests for the farmer-share sweep."""

import os

from settlement_sim.sweep import SweepResult, best_result, run_single, sweep


def _result(share, population, buildings):
    return SweepResult(
        farmer_share=share, final_population=population, peak_population=population,
        capacity=population, wood=0, stone=0, food=0, buildings=buildings, houses=1,
        shortage_seconds=0, elapsed_seconds=0,
    )


def test_best_result_prefers_population_then_buildings():
    results = [_result(0.2, 8, 9), _result(0.4, 10, 6), _result(0.6, 10, 7)]
    assert best_result(results).farmer_share == 0.6


def test_run_single_reports_final_state():
    result = run_single(0.5, seconds=30, ticks_per_second=10)
    assert result.farmer_share == 0.5
    assert result.final_population >= 1
    assert result.houses >= 1
    assert result.final_population <= result.capacity


def test_sweep_exports_csv(tmp_path):
    results = sweep(seconds=10, shares=3, ticks_per_second=10, output_dir=str(tmp_path))
    assert [r.farmer_share for r in results] == [0.1, 0.5, 0.9]
    assert os.path.exists(tmp_path / "sweep_results.csv")
