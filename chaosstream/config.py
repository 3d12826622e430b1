"""Simulation configuration.

A run is described by a plain dict (optionally loaded from YAML and deep
merged onto ``DEFAULT_CONFIG``) and converted to typed dataclasses.
Model choice and front-end toggles are configuration values, so variant
runs never need separate code paths.

Example YAML::

    model: lorenz
    lorenz: {sigma: 10.0, rho: 28.0, beta: 2.6667}
    initial_state: [1.0, 1.0, 1.0]
    step_size: 0.01
    visual:
      vertex_count: 40
      scale: 0.1
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

import yaml

from chaosstream.errors import ConfigError
from chaosstream.integrate.rk4 import RungeKutta4, new_integrator
from chaosstream.systems.fields import ModelVariant, make_field

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_CONFIG",
    "VisualConfig",
    "AudioConfig",
    "SimulationConfig",
    "load_config",
    "build_field",
    "build_integrator",
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "model": "lorenz96",
    "lorenz": {
        "sigma": 10.0,
        "rho": 28.0,
        "beta": 8.0 / 3.0,
    },
    "lorenz96": {
        "dimension": 5,
        "forcing": 8.0,
    },
    "initial_state": None,
    "initial_time": 0.0,
    "step_size": 0.01,
    "visual": {
        "vertex_count": 300_000,
        "scale": 0.1,
        "truncate": True,
        "warmup_steps": 1,
    },
    "audio": {
        "sampling_rate": 48_000,
        "total_time": 2.0,
        "output_dir": ".",
    },
}


@dataclass
class VisualConfig:
    """Settings for the line-geometry path.

    Attributes:
        vertex_count: Samples pulled for one geometry build.
        scale: Factor applied to every position coordinate.
        truncate: Project states of dimension > 3 onto their first 3 coordinates.
        warmup_steps: Steps discarded before the first vertex.
    """

    vertex_count: int = 300_000
    scale: float = 0.1
    truncate: bool = True
    warmup_steps: int = 1


@dataclass
class AudioConfig:
    """Settings for the bounded audio export path."""

    sampling_rate: int = 48_000
    total_time: float = 2.0
    output_dir: str = "."


@dataclass
class SimulationConfig:
    """Everything needed to build one simulation run.

    Attributes:
        model: Which vector field to integrate.
        params: Model parameters (sigma/rho/beta or dimension/forcing).
        initial_state: Starting state; None uses the model's default.
        initial_time: Integrator start time.
        step_size: Fixed RK4 step h.
        visual: Geometry settings.
        audio: Audio export settings.
    """

    model: ModelVariant = ModelVariant.LORENZ96
    params: Dict[str, Any] = field(default_factory=dict)
    initial_state: Optional[List[float]] = None
    initial_time: float = 0.0
    step_size: float = 0.01
    visual: VisualConfig = field(default_factory=VisualConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)

    def validate(self) -> List[str]:
        """Check numeric settings and model parameters.

        Returns:
            List of validation error strings (empty if valid).
        """
        errors: List[str] = []
        if not math.isfinite(self.step_size) or self.step_size <= 0:
            errors.append(f"step_size must be positive, got {self.step_size}")
        if self.visual.vertex_count <= 0:
            errors.append(f"visual.vertex_count must be positive, got {self.visual.vertex_count}")
        if self.visual.warmup_steps < 0:
            errors.append(f"visual.warmup_steps must be non-negative, got {self.visual.warmup_steps}")
        if self.audio.sampling_rate <= 0:
            errors.append(f"audio.sampling_rate must be positive, got {self.audio.sampling_rate}")
        if not math.isfinite(self.audio.total_time) or self.audio.total_time <= 0:
            errors.append(f"audio.total_time must be positive, got {self.audio.total_time}")
        try:
            make_field(self.model, self.params)
        except ConfigError as exc:
            errors.append(str(exc))
        return errors

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SimulationConfig":
        """Build a validated config from a (merged) config dict."""
        try:
            model = ModelVariant(raw.get("model", DEFAULT_CONFIG["model"]))
        except ValueError:
            raise ConfigError(f"Unknown model variant: {raw.get('model')!r}") from None

        initial_state = raw.get("initial_state")
        if initial_state is not None:
            try:
                initial_state = [float(v) for v in initial_state]
            except (TypeError, ValueError):
                raise ConfigError(f"Invalid 'initial_state': expected a list of numbers, got {initial_state!r}") from None
        cfg = cls(
            model=model,
            params=dict(raw.get(model.value) or {}),
            initial_state=initial_state,
            initial_time=_number(raw, "initial_time", 0.0),
            step_size=_number(raw, "step_size", 0.01),
            visual=_section(VisualConfig, raw, "visual"),
            audio=_section(AudioConfig, raw, "audio"),
        )
        errors = cfg.validate()
        if errors:
            raise ConfigError("Invalid configuration: " + "; ".join(errors))
        return cfg


def _as_bool(value):
    if not isinstance(value, bool):
        raise TypeError(f"expected true/false, got {value!r}")
    return value


def _as_int(value):
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    number = int(value)
    if number != value and not isinstance(value, str):
        raise ValueError(f"expected an integer, got {value!r}")
    return number


_COERCE = {"int": _as_int, "float": float, "str": str, "bool": _as_bool}


def _section(section_cls, raw: Dict[str, Any], name: str):
    """Build a section dataclass, coercing each value to its declared type."""
    values = raw.get(name) or {}
    if not isinstance(values, dict):
        raise ConfigError(f"Invalid '{name}' section: expected a mapping, got {values!r}")
    types = {f.name: f.type for f in fields(section_cls)}
    unknown = sorted(set(values) - set(types))
    if unknown:
        raise ConfigError(f"Invalid '{name}' section: unknown keys {unknown}")
    coerced = {}
    for key, value in values.items():
        try:
            coerced[key] = _COERCE[types[key]](value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid '{name}.{key}': {exc}") from exc
    return section_cls(**coerced)


def _number(raw: Dict[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid '{key}': expected a number, got {value!r}") from None


def _deep_update(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Merge nested dictionaries recursively."""
    merged = copy.deepcopy(base)
    for key, value in updates.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_update(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> SimulationConfig:
    """Load YAML config, merge onto defaults, apply overrides and validate."""
    merged = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ConfigError("Simulation config must be a YAML mapping/object")
        merged = _deep_update(merged, loaded)
        logger.debug("Loaded config from %s", config_path)
    if overrides:
        merged = _deep_update(merged, overrides)
    return SimulationConfig.from_dict(merged)


def build_field(config: SimulationConfig):
    return make_field(config.model, config.params)


def build_integrator(config: SimulationConfig, vector_field=None) -> RungeKutta4:
    """Build the run's integrator, defaulting the initial state from the field."""
    if vector_field is None:
        vector_field = build_field(config)
    if config.initial_state is not None:
        state = config.initial_state
        if len(state) != vector_field.dimension:
            raise ConfigError(
                f"initial_state has {len(state)} values, {config.model.value} "
                f"needs {vector_field.dimension}"
            )
    else:
        state = vector_field.default_state()
    return new_integrator(config.initial_time, state, config.step_size)
