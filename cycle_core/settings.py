"""Helpers for loading the viewer settings and deriving timing parameters."""
from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from cycle_core.palette import PALETTE, REST_COLOR

LOG = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    # Grid / canvas
    "rows": 8,
    "cols": 32,
    "width": 1280,
    "height": 720,
    "padding": 40,
    "selection_sensitivity": 0.8,  # 1.0 = full radius, smaller = stricter hit test
    "fps": 60,

    # Colours
    "palette": list(PALETTE),
    "rest_color": REST_COLOR,
    "base_color": (128, 128, 128),

    # Decay / echo
    "decay_rate": 3,
    "echo_grace_ms": 250,
    "echo_period_ms": 4000,
    "echo_decay_factor": 0.6,
    "echo_visibility_floor": 1.0,
    "debug_decay_multiplier": 4,
    "debug_echo_period_divisor": 4,

    # Invalid-selection feedback
    "flash_count": 2,
    "flash_duration_ms": 200,

    # Display / export
    "debug_overlay": False,
    "snapshot_dir": "snapshots",
    "snapshot_scale": 8,
}


def _coerce_value(value, default):
    """Best-effort coercion of JSON-loaded values to match defaults."""

    if isinstance(default, tuple):
        return tuple(value) if isinstance(value, (list, tuple)) else default
    if isinstance(default, list):
        if isinstance(value, list):
            if default and isinstance(default[0], tuple):
                return [tuple(item) if isinstance(item, list) else item for item in value]
            return value
        return default
    if isinstance(default, bool):
        return bool(value)
    if isinstance(default, int) and isinstance(value, (int, float)):
        return int(value)
    if isinstance(default, float) and isinstance(value, (int, float)):
        return float(value)
    return value


def load_settings(settings_path: Path | None = None) -> Dict[str, Any]:
    """Load the settings file if it exists, otherwise return defaults."""
    data: Dict[str, Any] = copy.deepcopy(DEFAULT_SETTINGS)
    if settings_path and settings_path.exists():
        try:
            loaded = json.loads(settings_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Failed to parse settings file {settings_path}: {exc}") from exc
        for key, value in loaded.items():
            if key in data:
                data[key] = _coerce_value(value, data[key])
            else:
                LOG.warning("Unknown settings key %r in %s", key, settings_path)
                data[key] = value
    validate_settings(data)
    return data


def validate_settings(settings: Dict[str, Any]) -> None:
    if int(settings["rows"]) < 3 or int(settings["cols"]) < 3:
        raise ValueError("grid must be at least 3x3")
    sensitivity = float(settings["selection_sensitivity"])
    if not 0.0 < sensitivity <= 1.0:
        raise ValueError("selection_sensitivity must be in (0, 1]")
    if not settings["palette"]:
        raise ValueError("palette must not be empty")
    TimingParams.from_settings(settings)
    TimingParams.from_settings(settings, debug=True)


@dataclass(frozen=True)
class TimingParams:
    """Tunable knobs of the decay/echo scheduler (milliseconds and ticks)."""

    decay_rate: int = DEFAULT_SETTINGS["decay_rate"]
    grace_ms: float = DEFAULT_SETTINGS["echo_grace_ms"]
    echo_period_ms: float = DEFAULT_SETTINGS["echo_period_ms"]
    echo_decay_factor: float = DEFAULT_SETTINGS["echo_decay_factor"]
    visibility_floor: float = DEFAULT_SETTINGS["echo_visibility_floor"]

    def __post_init__(self) -> None:
        if self.decay_rate <= 0:
            raise ValueError("decay_rate must be positive")
        if self.echo_period_ms <= 0:
            raise ValueError("echo_period_ms must be positive")
        if not 0.0 < self.echo_decay_factor < 1.0:
            raise ValueError("echo_decay_factor must be in (0, 1)")
        if self.grace_ms < 0:
            raise ValueError("grace_ms must not be negative")

    @classmethod
    def from_settings(cls, settings: Dict[str, Any], debug: bool = False) -> "TimingParams":
        decay_rate = int(settings["decay_rate"])
        period = float(settings["echo_period_ms"])
        if debug:
            decay_rate *= int(settings["debug_decay_multiplier"])
            period /= float(settings["debug_echo_period_divisor"])
        return cls(
            decay_rate=decay_rate,
            grace_ms=float(settings["echo_grace_ms"]),
            echo_period_ms=period,
            echo_decay_factor=float(settings["echo_decay_factor"]),
            visibility_floor=float(settings["echo_visibility_floor"]),
        )


__all__ = ["DEFAULT_SETTINGS", "TimingParams", "load_settings", "validate_settings"]
