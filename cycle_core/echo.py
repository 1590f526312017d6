"""Per-cell colour decay and the echo timeline of validated cycles.

Every cell of a validated cycle is set to its next palette slot at full
intensity and starts ``DECAYING``: each render tick lowers its colour
channels by ``decay_rate`` until they all reach zero and the cell rests
again. Decay is held for ``grace_ms`` after the most recent seed or echo.

Each cycle event also gets an echo timeline. At every multiple ``n`` of the
echo period after the event the cell is re-lit with the event's colour at
``255 * factor**n``; once that drops to the visibility floor the timeline
ends. All pending echoes live in one heap ordered by fire time and are
drained by :meth:`DecayEchoScheduler.poll`.
"""
from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from cycle_core.palette import MAX_INTENSITY, REST_COLOR, RGB
from cycle_core.settings import TimingParams

LOG = logging.getLogger(__name__)

RESTING = 0
DECAYING = 1
STATE_NAMES = {RESTING: "resting", DECAYING: "decaying"}


@dataclass(frozen=True)
class CycleEvent:
    """One validated cycle touching one cell."""

    created_at: float
    palette_index: int
    cycle_id: int


@dataclass(frozen=True)
class CellState:
    color: RGB
    intensity: int
    state: int
    palette_index: int
    cycle_id: int
    last_echo_at: float

    @property
    def state_name(self) -> str:
        return STATE_NAMES[self.state]


# heap entries: (fire_at, order, cell_index, echo_count, event)
_Entry = Tuple[float, int, int, int, CycleEvent]


class DecayEchoScheduler:
    def __init__(
        self,
        size: int,
        palette: Sequence[Sequence[int]],
        timing: Optional[TimingParams] = None,
        rest_color: Sequence[int] = REST_COLOR,
    ):
        if not palette:
            raise ValueError("palette must not be empty")
        self.size = size
        self.palette: List[RGB] = [tuple(int(v) for v in c) for c in palette]
        self.timing = timing or TimingParams()
        self.rest_color = np.array(rest_color, dtype=np.int16)

        self.color = np.empty((size, 3), dtype=np.int16)
        self.intensity = np.empty(size, dtype=np.int16)
        self.palette_index = np.empty(size, dtype=np.int16)
        self.state = np.empty(size, dtype=np.uint8)
        self.last_echo_at = np.empty(size, dtype=np.float64)
        self.cycle_id = np.empty(size, dtype=np.int64)
        self.history: List[List[CycleEvent]] = []
        self._queue: List[_Entry] = []
        self._order = 0
        self.echo_firings = 0
        self.reset()

    def reset(self) -> None:
        self.color[:] = self.rest_color
        self.intensity[:] = 0
        self.palette_index[:] = -1
        self.state[:] = RESTING
        self.last_echo_at[:] = 0.0
        self.cycle_id[:] = 0
        self.history = [[] for _ in range(self.size)]
        self._queue = []
        self._order = 0
        self.echo_firings = 0

    def set_timing(self, timing: TimingParams) -> None:
        self.timing = timing

    # ------------------------------------------------------------------
    def seed(self, indices: Iterable[int], cycle_id: int, now: float) -> List[CycleEvent]:
        """Colour every cell of a freshly validated cycle in one pass."""
        events = []
        for idx in indices:
            slot = (int(self.palette_index[idx]) + 1) % len(self.palette)
            event = CycleEvent(created_at=float(now), palette_index=slot, cycle_id=cycle_id)
            self.history[idx].append(event)
            self._apply(idx, event, MAX_INTENSITY, now)
            self._push(now + self.timing.echo_period_ms, idx, 1, event)
            events.append(event)
        return events

    def _apply(self, idx: int, event: CycleEvent, intensity: int, now: float) -> None:
        self.color[idx] = self.palette[event.palette_index]
        self.intensity[idx] = intensity
        self.palette_index[idx] = event.palette_index
        self.state[idx] = DECAYING
        self.last_echo_at[idx] = now
        self.cycle_id[idx] = event.cycle_id

    def _push(self, fire_at: float, idx: int, count: int, event: CycleEvent) -> None:
        self._order += 1
        heapq.heappush(self._queue, (float(fire_at), self._order, idx, count, event))

    # ------------------------------------------------------------------
    def poll(self, now: float) -> int:
        """Fire every echo due at ``now``; returns how many fired."""
        fired = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, idx, count, event = heapq.heappop(self._queue)
            self._fire(idx, count, event, now)
            fired += 1
        self.echo_firings += fired
        return fired

    def _fire(self, idx: int, count: int, event: CycleEvent, now: float) -> None:
        period = self.timing.echo_period_ms
        n = max(count, int((now - event.created_at) // period))
        value = MAX_INTENSITY * self.timing.echo_decay_factor ** n
        if value <= self.timing.visibility_floor:
            LOG.debug("Echo chain of cycle %d ended at cell %d after %d echoes", event.cycle_id, idx, n)
            return
        intensity = int(round(value))
        stronger = (
            self.state[idx] == DECAYING
            and self.cycle_id[idx] > event.cycle_id
            and self.intensity[idx] >= intensity
        )
        if not stronger:
            self._apply(idx, event, intensity, now)
        self._push(event.created_at + (n + 1) * period, idx, n + 1, event)

    def tick(self, now: float) -> int:
        """Advance decay by one render tick; returns how many cells came to rest."""
        held = (now - self.last_echo_at) < self.timing.grace_ms
        active = (self.state == DECAYING) & ~held
        if not active.any():
            return 0
        self.color[active] = np.maximum(self.color[active] - self.timing.decay_rate, 0)
        finished = active & (self.color.max(axis=1) == 0)
        if finished.any():
            self.state[finished] = RESTING
            self.color[finished] = self.rest_color
            self.intensity[finished] = 0
        return int(finished.sum())

    def opacity(self) -> np.ndarray:
        """Per-cell opacity in 0..1 for compositing over the background.

        Intensity scaled by how far the channels have decayed from the slot's
        palette colour, so a fading cell reaches zero as it comes to rest.
        """
        slots = np.clip(self.palette_index, 0, len(self.palette) - 1)
        peak = np.array([max(max(c), 1) for c in self.palette], dtype=np.float64)[slots]
        remaining = np.clip(self.color.max(axis=1) / peak, 0.0, 1.0)
        alpha = self.intensity.astype(np.float64) / MAX_INTENSITY
        return np.where(self.state == DECAYING, alpha * remaining, alpha)

    # ------------------------------------------------------------------
    def cell_state(self, idx: int) -> CellState:
        return CellState(
            color=tuple(int(v) for v in self.color[idx]),
            intensity=int(self.intensity[idx]),
            state=int(self.state[idx]),
            palette_index=int(self.palette_index[idx]),
            cycle_id=int(self.cycle_id[idx]),
            last_echo_at=float(self.last_echo_at[idx]),
        )

    def pending(self) -> int:
        return len(self._queue)

    def scheduled_for(self, idx: int) -> List[Tuple[float, int]]:
        """(fire_at, cycle_id) of every pending echo of one cell, soonest first."""
        return sorted((entry[0], entry[4].cycle_id) for entry in self._queue if entry[2] == idx)

    def next_fire_at(self) -> Optional[float]:
        return self._queue[0][0] if self._queue else None

    def decaying_count(self) -> int:
        return int((self.state == DECAYING).sum())
