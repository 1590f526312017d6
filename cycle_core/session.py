"""The interactive session: gesture pipeline, cycle ids, highlights and timing.

The viewer feeds resolved cells and clock readings (milliseconds) in and
reads per-cell colour, intensity and highlight state back out. Nothing in
here draws.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from cycle_core.echo import CellState, CycleEvent, DecayEchoScheduler
from cycle_core.graph import Cell, CoordinateGraph
from cycle_core.palette import RGB, RGBA, highlight_for_degree
from cycle_core.selection import SelectionTracker
from cycle_core.settings import DEFAULT_SETTINGS, TimingParams, validate_settings
from cycle_core.validator import CycleVerdict, check_cycle, sequence_degrees

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellView:
    """Everything a renderer needs for one cell."""

    cell: Cell
    color: RGB
    intensity: int
    highlighted: bool
    highlight_color: RGBA
    state: str


@dataclass
class FlashState:
    cells: List[Cell]
    toggles: int
    next_at: float
    lit: bool


class HexCycleSession:
    def __init__(self, settings: Optional[Dict[str, Any]] = None, debug: bool = False):
        self.settings: Dict[str, Any] = copy.deepcopy(settings) if settings else copy.deepcopy(DEFAULT_SETTINGS)
        validate_settings(self.settings)
        self.debug = debug
        self.next_cycle_id = 1
        self.last_verdict: Optional[CycleVerdict] = None
        self._build(int(self.settings["rows"]), int(self.settings["cols"]))

    def _build(self, rows: int, cols: int) -> None:
        self.graph = CoordinateGraph(rows, cols)
        self.tracker = SelectionTracker()
        self.scheduler = DecayEchoScheduler(
            self.graph.size,
            self.settings["palette"],
            TimingParams.from_settings(self.settings, debug=self.debug),
            rest_color=self.settings["rest_color"],
        )
        self.highlights: Dict[Cell, RGBA] = {}
        self._flash: Optional[FlashState] = None

    @property
    def rows(self) -> int:
        return self.graph.rows

    @property
    def cols(self) -> int:
        return self.graph.cols

    # --- gestures -----------------------------------------------------
    def on_gesture_start(self, cell: Optional[Cell] = None) -> None:
        self._end_flash()
        self.tracker.begin()
        self.highlights = {}
        if cell is not None:
            self.on_gesture_extend(cell)

    def on_gesture_extend(self, cell: Cell) -> bool:
        if cell not in self.graph:
            return False
        if not self.tracker.extend(cell):
            return False
        self._refresh_highlights()
        return True

    def on_gesture_end(self, now: float) -> bool:
        """Validate the finished selection; colour it or start the reject flash."""
        if not self.tracker.active:
            return False
        sequence = self.tracker.end()
        verdict = check_cycle(sequence, self.graph)
        self.last_verdict = verdict
        if verdict.ok:
            cycle_id = self.next_cycle_id
            self.next_cycle_id += 1
            self.scheduler.seed([self.graph.index(c) for c in sequence], cycle_id, now)
            self.highlights = {}
            LOG.info("Cycle %d accepted (%d cells)", cycle_id, len(sequence))
        else:
            LOG.debug("Selection of %d cells rejected: %s", len(sequence), verdict.reason)
            if sequence:
                self._start_flash(sequence, now)
        return verdict.ok

    def _refresh_highlights(self) -> None:
        degrees = sequence_degrees(self.tracker.current(), self.graph)
        self.highlights = {cell: highlight_for_degree(d) for cell, d in degrees.items()}

    # --- invalid-selection flash ---------------------------------------
    def _start_flash(self, cells: List[Cell], now: float) -> None:
        duration = float(self.settings["flash_duration_ms"])
        # first toggle happens immediately
        self._flash = FlashState(cells=list(cells), toggles=1, next_at=now + duration, lit=False)

    def _advance_flash(self, now: float) -> None:
        flash = self._flash
        total = 2 * int(self.settings["flash_count"])
        while flash is not None and now >= flash.next_at:
            flash.lit = not flash.lit
            flash.toggles += 1
            if flash.toggles >= total:
                self._end_flash()
                return
            flash.next_at += float(self.settings["flash_duration_ms"])

    def _end_flash(self) -> None:
        if self._flash is not None:
            self.highlights = {}
            self._flash = None

    @property
    def flashing(self) -> bool:
        return self._flash is not None

    # --- time ---------------------------------------------------------
    def tick(self, now: float) -> None:
        """One render tick: due echoes first, then decay, then flash."""
        self.scheduler.poll(now)
        self.scheduler.tick(now)
        self._advance_flash(now)

    def set_debug(self, debug: bool) -> None:
        self.debug = debug
        self.scheduler.set_timing(TimingParams.from_settings(self.settings, debug=debug))
        LOG.info("Debug timing %s", "ON" if debug else "OFF")

    # --- lifecycle ----------------------------------------------------
    def resize(self, rows: int, cols: int) -> bool:
        """Rebuild graph and cell state when the grid dimensions change."""
        if rows == self.rows and cols == self.cols:
            return False
        resized = dict(self.settings, rows=rows, cols=cols)
        validate_settings(resized)
        self.settings = resized
        self._build(rows, cols)
        LOG.info("Grid rebuilt at %dx%d", rows, cols)
        return True

    def reset(self) -> None:
        self.tracker.end()
        self.scheduler.reset()
        self.highlights = {}
        self._flash = None

    # --- read side ----------------------------------------------------
    def cell_state(self, cell: Cell) -> CellState:
        return self.scheduler.cell_state(self.graph.index(cell))

    def history(self, cell: Cell) -> List[CycleEvent]:
        return list(self.scheduler.history[self.graph.index(cell)])

    def is_highlighted(self, cell: Cell) -> bool:
        if cell not in self.highlights:
            return False
        return self._flash is None or self._flash.lit

    def cell_view(self, cell: Cell) -> CellView:
        st = self.cell_state(cell)
        return CellView(
            cell=cell,
            color=st.color,
            intensity=st.intensity,
            highlighted=self.is_highlighted(cell),
            highlight_color=self.highlights.get(cell, highlight_for_degree(2)),
            state=st.state_name,
        )

    def rendered_colors(self, base: Optional[RGB] = None) -> np.ndarray:
        """``(rows, cols, 3)`` uint8 image of every cell composited over ``base``."""
        base_arr = np.array(base if base is not None else self.settings["base_color"], dtype=np.float64)
        sched = self.scheduler
        alpha = sched.opacity()[:, None]
        out = base_arr + (sched.color.astype(np.float64) - base_arr) * alpha
        for cell in self.highlights:
            if self.is_highlighted(cell):
                r, g, b, a = self.highlights[cell]
                idx = self.graph.index(cell)
                out[idx] = out[idx] + (np.array((r, g, b), dtype=np.float64) - out[idx]) * (a / 255.0)
        out = np.clip(np.rint(out), 0, 255).astype(np.uint8)
        return out.reshape(self.rows, self.cols, 3)
