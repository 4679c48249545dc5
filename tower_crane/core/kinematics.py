"""Crane parameters and their per-tick update rule.

The four parameters move by a fixed step per tick while their key is held.
A step is only taken if the previous value has not reached the bound in
that direction (strict comparison); the result is then clamped, so float
accumulation never leaves the range. Opposing keys held together both apply.
"""

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

from tower_crane.config.config import DEFAULT_PARAMETERS, ParameterConfig


@dataclass(frozen=True)
class KinematicState:
    """The four continuous crane parameters."""
    boom_angle: float = 0.0  # rad, [-0.5, 0.3]
    cable_length: float = 5.0  # [1, 15]
    rotation: float = 0.0  # rad, unbounded
    trolley_offset: float = 0.0  # [-8, 8]


def reset_state(params: Mapping[str, ParameterConfig] = DEFAULT_PARAMETERS) -> KinematicState:
    """Create the session-start state."""
    return KinematicState(**{name: p.initial for name, p in params.items()})


def _is_held(keys, key: str) -> bool:
    if hasattr(keys, "is_held"):
        return keys.is_held(key)
    return bool(keys.get(key, False))


def _clamp(value: float, lo: Optional[float], hi: Optional[float]) -> float:
    if lo is not None and value < lo:
        return lo
    if hi is not None and value > hi:
        return hi
    return value


def _increase(value: float, p: ParameterConfig, keys, delta: float) -> float:
    if _is_held(keys, p.increase_key) and (p.max is None or value < p.max):
        return _clamp(value + delta, p.min, p.max)
    return value


def _decrease(value: float, p: ParameterConfig, keys, delta: float) -> float:
    if _is_held(keys, p.decrease_key) and (p.min is None or value > p.min):
        return _clamp(value - delta, p.min, p.max)
    return value


def _advance_parameter(value: float, p: ParameterConfig, keys, dt: float) -> float:
    delta = p.step * dt
    if p.decrease_first:
        return _increase(_decrease(value, p, keys, delta), p, keys, delta)
    return _decrease(_increase(value, p, keys, delta), p, keys, delta)


def advance(state: KinematicState,
            keys,
            dt: float = 1.0,
            params: Mapping[str, ParameterConfig] = DEFAULT_PARAMETERS) -> KinematicState:
    """Advance the crane parameters by one tick.

    Args:
        state: Previous state (already within range)
        keys: InputState or a mapping of lowercase key -> held
        dt: Elapsed time in ticks; scales every step
        params: Step, bounds and key binding per parameter

    Returns:
        New KinematicState; the input state is not modified
    """
    updates: Dict[str, float] = {}
    for name, p in params.items():
        old = getattr(state, name)
        new = _advance_parameter(old, p, keys, dt)
        if new != old:
            updates[name] = new
    if not updates:
        return state
    return replace(state, **updates)
