"""Serialize a SettlementState to JSON text and validate it on the way back."""

from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any, Mapping, TypeVar

from settlement_sim.core.kinds import BuildingKind, JobKind, ResourceKind, UpgradeKind
from settlement_sim.core.state import SettlementState, create_initial_state
from settlement_sim.economy.capacity import population_capacity
from settlement_sim.economy.catalog import UPGRADES
from settlement_sim.simulation.events import EventLog

K = TypeVar("K", bound=Enum)

FORMAT_VERSION = 1


class StateValidationError(ValueError):
    """Persisted state is malformed and must not be loaded."""


def _encode_map(mapping: Mapping[Enum, Any]) -> dict[str, Any]:
    return {kind.value: value for kind, value in mapping.items()}


def state_to_dict(state: SettlementState) -> dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "resources": _encode_map(state.resources),
        "resourceMax": _encode_map(state.resource_max),
        "resourceBaseMax": _encode_map(state.resource_base_max),
        "buildings": _encode_map(state.buildings),
        "jobsAssigned": _encode_map(state.jobs_assigned),
        "unlockedJobs": _encode_map(state.unlocked_jobs),
        "population": state.population,
        "popAccumulator": state.pop_accumulator,
        "upgradesPurchased": _encode_map(state.upgrades_purchased),
        "events": state.events.to_list(),
        "ticks": state.ticks,
    }


def dumps(state: SettlementState) -> str:
    return json.dumps(state_to_dict(state), indent=2)


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise StateValidationError(f"{name} must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise StateValidationError(f"{name} must be finite, got {value!r}")
    return value


def _decode_map(raw: Any, enum_type: type[K], name: str, default: Mapping[K, Any], cast) -> dict[K, Any]:
    if not isinstance(raw, dict):
        raise StateValidationError(f"{name} must be a mapping")
    decoded = dict(default)
    for key, value in raw.items():
        try:
            kind = enum_type(key)
        except ValueError as e:
            raise StateValidationError(f"{name}: unknown key {key!r}") from e
        decoded[kind] = cast(value, f"{name}.{key}")
    return decoded


def _non_negative_int(value: Any, name: str) -> int:
    number = _number(value, name)
    if number < 0:
        raise StateValidationError(f"{name} must not be negative")
    if number != int(number):
        raise StateValidationError(f"{name} must be a whole number, got {number!r}")
    return int(number)


def _non_negative(value: Any, name: str) -> float:
    number = _number(value, name)
    if number < 0:
        raise StateValidationError(f"{name} must not be negative")
    return float(number)


def _flag(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise StateValidationError(f"{name} must be true or false")
    return value


def state_from_dict(data: Any) -> SettlementState:
    """Build a state from decoded JSON. Raises StateValidationError."""
    if not isinstance(data, dict):
        raise StateValidationError("persisted state must be an object")
    for required in ("resources", "buildings"):
        if not isinstance(data.get(required), dict):
            raise StateValidationError(f"persisted state lacks a {required} mapping")

    seed = create_initial_state()
    state = SettlementState(
        resources=_decode_map(data["resources"], ResourceKind, "resources", seed.resources, _non_negative),
        resource_max=_decode_map(data.get("resourceMax", {}), ResourceKind, "resourceMax", seed.resource_max, _non_negative),
        resource_base_max=_decode_map(
            data.get("resourceBaseMax", {}), ResourceKind, "resourceBaseMax", seed.resource_base_max, _non_negative,
        ),
        buildings=_decode_map(data["buildings"], BuildingKind, "buildings", seed.buildings, _non_negative_int),
        jobs_assigned=_decode_map(data.get("jobsAssigned", {}), JobKind, "jobsAssigned", seed.jobs_assigned, _non_negative_int),
        unlocked_jobs=_decode_map(data.get("unlockedJobs", {}), JobKind, "unlockedJobs", seed.unlocked_jobs, _flag),
        population=_non_negative_int(data.get("population", seed.population), "population"),
        pop_accumulator=float(_number(data.get("popAccumulator", 0.0), "popAccumulator")),
        upgrades_purchased=_decode_map(
            data.get("upgradesPurchased", {}), UpgradeKind, "upgradesPurchased", seed.upgrades_purchased, _non_negative_int,
        ),
        ticks=_non_negative_int(data.get("ticks", 0), "ticks"),
    )

    events = data.get("events", [])
    if not isinstance(events, list):
        raise StateValidationError("events must be a list")
    state.events = EventLog(events)

    for kind, level in state.upgrades_purchased.items():
        if level > UPGRADES[kind].max_purchases:
            raise StateValidationError(f"upgradesPurchased.{kind.value} exceeds its maximum")
    if abs(state.pop_accumulator) >= 1:
        raise StateValidationError("popAccumulator must be within (-1, 1)")
    capacity = population_capacity(state)
    if state.population > capacity:
        raise StateValidationError(f"population {state.population} exceeds housing for {capacity}")
    if state.assigned_workers() > state.population:
        raise StateValidationError("more workers assigned than there are people")
    for job, count in state.jobs_assigned.items():
        if count and not state.is_unlocked(job):
            raise StateValidationError(f"workers assigned to locked job {job.value}")
    state.sync_unemployed()
    return state


def loads(text: str) -> SettlementState:
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise StateValidationError(f"not valid JSON: {e}") from e
    return state_from_dict(data)
