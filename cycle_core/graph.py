"""Toroidal adjacency over a row-offset hex grid.

Cells are ``(row, col)`` pairs. Odd rows sit half a cell to the right of
even rows, so the two row parities use mirrored neighbour offset tables.
Both axes wrap, which gives every cell exactly six neighbours.

When the row count is odd the last row and row 0 are both even, so the
vertical seam is sheared by half a cell: the last row reaches across it
with the odd-row downward offsets. That keeps the relation symmetric on
every grid of at least 3x3.
"""
from __future__ import annotations

from typing import FrozenSet, Iterator, List, Tuple

import numpy as np

Cell = Tuple[int, int]

# (d_row, d_col) offsets, ordered up-left, up-right, left, right, down-left, down-right
EVEN_ROW_OFFSETS: Tuple[Cell, ...] = ((-1, -1), (-1, 0), (0, -1), (0, 1), (1, -1), (1, 0))
ODD_ROW_OFFSETS: Tuple[Cell, ...] = ((-1, 0), (-1, 1), (0, -1), (0, 1), (1, 0), (1, 1))


class CoordinateGraph:
    """Static neighbour table for an ``rows x cols`` toroidal hex grid."""

    def __init__(self, rows: int, cols: int):
        if rows < 3 or cols < 3:
            raise ValueError(f"grid must be at least 3x3, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.size = rows * cols
        # table[index] holds the six neighbour indices of cell ``index``
        self.table = np.empty((self.size, 6), dtype=np.int32)
        for i in range(rows):
            offsets = self.offsets_for_row(i)
            for j in range(cols):
                idx = i * cols + j
                for k, (di, dj) in enumerate(offsets):
                    self.table[idx, k] = ((i + di) % rows) * cols + (j + dj) % cols
        self._sets: List[FrozenSet[int]] = [frozenset(row) for row in self.table.tolist()]

    def offsets_for_row(self, row: int) -> Tuple[Cell, ...]:
        if row % 2 == 1:
            return ODD_ROW_OFFSETS
        if row == self.rows - 1 and self.rows % 2 == 1:
            return EVEN_ROW_OFFSETS[:4] + ODD_ROW_OFFSETS[4:]
        return EVEN_ROW_OFFSETS

    # ------------------------------------------------------------------
    def index(self, cell: Cell) -> int:
        i, j = cell
        if not (0 <= i < self.rows and 0 <= j < self.cols):
            raise IndexError(f"cell {cell} outside {self.rows}x{self.cols} grid")
        return i * self.cols + j

    def cell_at(self, index: int) -> Cell:
        return divmod(int(index), self.cols)

    def cells(self) -> Iterator[Cell]:
        for i in range(self.rows):
            for j in range(self.cols):
                yield (i, j)

    def neighbors_of(self, cell: Cell) -> FrozenSet[Cell]:
        return frozenset(self.cell_at(n) for n in self._sets[self.index(cell)])

    def are_neighbors(self, a: Cell, b: Cell) -> bool:
        return self.index(b) in self._sets[self.index(a)]

    def __contains__(self, cell) -> bool:
        try:
            self.index(cell)
        except (IndexError, TypeError, ValueError):
            return False
        return True

    def __repr__(self) -> str:
        return f"CoordinateGraph(rows={self.rows}, cols={self.cols})"
