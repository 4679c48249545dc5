"""Configuration management for the tower crane simulator.

This module loads and parses the crane.yaml configuration file,
providing strongly-typed configuration objects. Every section is
optional; missing values fall back to the defaults below.
"""

import yaml
from dataclasses import dataclass, field, fields, replace
from typing import Dict, Optional


@dataclass(frozen=True)
class ParameterConfig:
    """Configuration for a single crane parameter driven by two keys."""
    initial: float  # Value at session start
    step: float  # Change per tick while a key is held
    min: Optional[float]  # Lower clamp (None = unbounded)
    max: Optional[float]  # Upper clamp (None = unbounded)
    increase_key: str  # Key that adds step
    decrease_key: str  # Key that subtracts step
    decrease_first: bool = False  # Evaluate decrease_key before increase_key


DEFAULT_PARAMETERS: Dict[str, ParameterConfig] = {
    "boom_angle": ParameterConfig(0.0, 0.01, -0.5, 0.3, "q", "e"),
    "cable_length": ParameterConfig(5.0, 0.1, 1.0, 15.0, "s", "w", decrease_first=True),
    "rotation": ParameterConfig(0.0, 0.02, None, None, "a", "d"),
    "trolley_offset": ParameterConfig(0.0, 0.1, -8.0, 8.0, "arrowright", "arrowleft",
                                      decrease_first=True),
}


@dataclass(frozen=True)
class CraneGeometry:
    """Fixed attachment offsets of the crane rig (Y up)."""
    base_height: float = 1.0  # Base origin above ground
    platform_height: float = 2.5  # Platform above base
    boom_height: float = 15.0  # Boom hinge above platform
    boom_tip_offset: float = 10.0  # Boom tip along the boom from the hinge


DEFAULT_GEOMETRY = CraneGeometry()


@dataclass
class SimConfig:
    """Frame loop configuration."""
    frame_rate: float = 60.0  # Ticks per second
    realtime: bool = True  # Whether to pace frames against the wall clock


@dataclass
class SceneConfig:
    """Scene model configuration."""
    model_path: str = "models/tower_crane.xml"


@dataclass
class WindowConfig:
    """Status panel window size."""
    width: int = 900
    height: int = 260


@dataclass
class TelemetryConfig:
    """Snapshot publishing configuration."""
    enabled: bool = False
    endpoint: str = "tcp://*:5555"
    publish_rate_hz: float = 10.0


INPUT_MODES = ("keyboard", "gamepad", "cli")


@dataclass
class InputConfig:
    """Input source configuration."""
    mode: str = "keyboard"  # keyboard, gamepad or cli
    gamepad_deadzone: float = 0.15


class CraneConfig:
    """Main configuration loader for the crane simulator."""

    def __init__(self, path: Optional[str] = None):
        """Load configuration from a YAML file.

        Args:
            path: Path to crane.yaml, or None to use built-in defaults
        """
        cfg = {}
        if path is not None:
            with open(path, "r", encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}

        self.sim = SimConfig(**cfg.get("sim", {}))
        self.scene = SceneConfig(**cfg.get("scene", {}))
        self.window = WindowConfig(**cfg.get("window", {}))
        self.telemetry = TelemetryConfig(**cfg.get("telemetry", {}))
        self.input = InputConfig(**cfg.get("input", {}))
        if self.input.mode not in INPUT_MODES:
            raise ValueError(f"Unknown input mode '{self.input.mode}', expected one of {INPUT_MODES}")
        self.geometry = CraneGeometry(**cfg.get("geometry", {}))
        self.parameters = _load_parameters(cfg.get("parameters", {}))

    @property
    def frame_interval(self) -> float:
        """Get the frame interval in seconds."""
        return 1.0 / self.sim.frame_rate

    @property
    def publish_interval(self) -> float:
        """Get publishing interval in seconds."""
        return 1.0 / self.telemetry.publish_rate_hz


def _load_parameters(overrides: dict) -> Dict[str, ParameterConfig]:
    """Merge per-parameter overrides into the default parameter table."""
    params = dict(DEFAULT_PARAMETERS)
    allowed = {f.name for f in fields(ParameterConfig)}
    for name, data in overrides.items():
        if name not in params:
            raise ValueError(f"Unknown crane parameter '{name}'")
        unknown = set(data or {}) - allowed
        if unknown:
            raise ValueError(f"Unknown fields for '{name}': {sorted(unknown)}")
        params[name] = replace(params[name], **(data or {}))

    boom = params["boom_angle"]
    if boom.min is None or boom.max is None or boom.min >= boom.max:
        raise ValueError("boom_angle needs finite bounds with min < max")
    for name, p in params.items():
        if p.min is not None and p.max is not None and p.min > p.max:
            raise ValueError(f"'{name}' has min > max")
        if (p.min is not None and p.initial < p.min) or (p.max is not None and p.initial > p.max):
            raise ValueError(f"'{name}' initial value {p.initial} is outside its bounds")
    return params
