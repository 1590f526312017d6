"""Core of the hex cycle viewer: adjacency, selection, validation and echo timing."""
from __future__ import annotations

from cycle_core.echo import DECAYING, RESTING, CycleEvent, DecayEchoScheduler
from cycle_core.graph import Cell, CoordinateGraph
from cycle_core.selection import SelectionTracker
from cycle_core.session import CellView, HexCycleSession
from cycle_core.settings import DEFAULT_SETTINGS, TimingParams, load_settings
from cycle_core.validator import CycleVerdict, check_cycle, validate

__all__ = [
    "Cell",
    "CellView",
    "CoordinateGraph",
    "CycleEvent",
    "CycleVerdict",
    "DECAYING",
    "DEFAULT_SETTINGS",
    "DecayEchoScheduler",
    "HexCycleSession",
    "RESTING",
    "SelectionTracker",
    "TimingParams",
    "check_cycle",
    "load_settings",
    "validate",
]
