"""Ordered record of the cells visited by one drag gesture."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from cycle_core.graph import Cell, CoordinateGraph

LOG = logging.getLogger(__name__)


class SelectionTracker:
    """Collects cells for the active gesture.

    Adjacency is not checked while extending; a broken or self-crossing
    path is reported later by the validator as an ordinary rejection.
    """

    def __init__(self) -> None:
        self._cells: List[Cell] = []
        self.active = False

    def begin(self, cell: Optional[Cell] = None) -> None:
        if self.active and self._cells:
            LOG.debug("Discarding unterminated selection of %d cells", len(self._cells))
        self._cells = []
        self.active = True
        if cell is not None:
            self.extend(cell)

    def extend(self, cell: Cell) -> bool:
        """Append ``cell`` unless it repeats the previous entry."""
        if not self.active:
            return False
        cell = (int(cell[0]), int(cell[1]))
        if self._cells and self._cells[-1] == cell:
            return False
        self._cells.append(cell)
        return True

    def current(self) -> Tuple[Cell, ...]:
        return tuple(self._cells)

    def end(self) -> List[Cell]:
        """Finish the gesture and hand the sequence over; the tracker is emptied."""
        finished = self._cells
        self._cells = []
        self.active = False
        LOG.debug("Gesture ended with %d cells", len(finished))
        return finished

    def __len__(self) -> int:
        return len(self._cells)


class SelectionPath:
    """Line segments joining consecutive selected cells, for drawing."""

    @staticmethod
    def segments(cells, graph: CoordinateGraph) -> List[Tuple[Cell, Cell]]:
        cells = list(cells)
        segs = list(zip(cells, cells[1:]))
        if len(cells) > 2 and graph.are_neighbors(cells[-1], cells[0]):
            segs.append((cells[-1], cells[0]))
        return segs
