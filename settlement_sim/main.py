"""Entry point for the settlement simulation."""

from __future__ import annotations

import argparse
import os
import time


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Settlement Idle Economy Simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--seconds", type=int, default=600, help="Simulated seconds to run")
    parser.add_argument("--tick-rate", type=int, default=20, help="Ticks per simulated second")
    parser.add_argument("--farmer-share", type=float, default=0.4, help="Fraction of workers the autoplayer keeps farming")
    parser.add_argument("--verbosity", type=int, default=0, choices=[0, 1, 2, 3], help="Log verbosity level")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory for results")
    parser.add_argument("--log-file", type=str, default=None, help="Path to log file")
    parser.add_argument("--load", type=str, default=None, help="Resume from a saved settlement")
    parser.add_argument("--realtime", action="store_true", help="Tick on the wall clock instead of as fast as possible")

    args = parser.parse_args()

    # Import here to allow --help without loading everything
    from settlement_sim.simulation.autoplay import AutoPlayer
    from settlement_sim.simulation.metrics import MetricsCollector
    from settlement_sim.simulation.settlement import Settlement
    from settlement_sim.viz.logger import SimLogger

    print(f"=== Settlement Idle Economy Simulation ===")
    print(f"Seconds: {args.seconds} | Tick rate: {args.tick_rate}/s | Farmer share: {args.farmer_share}")
    print(f"Output: {args.output_dir}")
    print()

    logger = SimLogger(
        verbosity=args.verbosity,
        log_file=args.log_file or os.path.join(args.output_dir, "simulation.log"),
        stdout=(args.verbosity > 0),
    )
    metrics = MetricsCollector(sample_interval=args.tick_rate, ticks_per_second=args.tick_rate)
    settlement = Settlement(ticks_per_second=args.tick_rate, logger=logger, metrics=metrics)

    if args.load and not settlement.load_from_file(args.load):
        print(f"Could not load {args.load}, starting a new settlement")

    player = AutoPlayer(farmer_share=args.farmer_share, decision_interval=args.tick_rate)
    total_ticks = args.seconds * args.tick_rate

    print(f"Running for {args.seconds} simulated seconds...")
    t0 = time.time()
    try:
        if args.realtime:
            _run_realtime(settlement, player, total_ticks)
        else:
            settlement.run(total_ticks, between_ticks=player)
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
    finally:
        settlement.stop()

    elapsed = time.time() - t0
    ticks_run = settlement.state.ticks
    print(f"\nSimulation complete: {ticks_run} ticks in {elapsed:.2f}s ({ticks_run / max(0.01, elapsed):.0f} ticks/sec)")

    # Export results
    os.makedirs(args.output_dir, exist_ok=True)
    csv_path = os.path.join(args.output_dir, "metrics.csv")
    metrics.export_csv(csv_path)
    print(f"Metrics exported to {csv_path}")

    save_path = os.path.join(args.output_dir, "settlement.json")
    settlement.save_to_file(save_path)
    print(f"Settlement saved to {save_path}")

    print()
    print(metrics.summary_report())

    print()
    print("Recent events:")
    for entry in list(settlement.state.events)[:10]:
        print(f"  {entry}")

    # Generate static reports
    try:
        from settlement_sim.viz.report import save_report
        save_report(metrics, args.output_dir)
    except Exception as e:
        print(f"Could not generate plots: {e}")

    logger.export_json(os.path.join(args.output_dir, "events.json"))
    logger.close()

    print(f"\nAll results saved to {args.output_dir}/")


def _run_realtime(settlement, player, total_ticks: int) -> None:
    """Let the ticker drive the settlement; the player acts from this thread."""
    target = settlement.state.ticks + total_ticks
    settlement.start()
    decided = -1
    while settlement.state.ticks < target:
        window = settlement.state.ticks // player.decision_interval
        if window != decided:
            player.step(settlement)
            decided = window
        time.sleep(settlement.clock.tick_interval / 2)
    settlement.stop()


if __name__ == "__main__":
    main()
