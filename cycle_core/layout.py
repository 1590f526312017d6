"""Pixel geometry of the grid: cell centres, hexagon outlines and hit testing."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from cycle_core.graph import Cell

SQRT3 = math.sqrt(3)


@dataclass
class HexLayout:
    width: float
    height: float
    rows: int
    cols: int
    padding: float = 40.0
    sensitivity: float = 0.8
    diameter: float = field(init=False)

    def __post_init__(self) -> None:
        if not 0.0 < self.sensitivity <= 1.0:
            raise ValueError("sensitivity must be in (0, 1]")
        self.relayout(self.width, self.height)

    def relayout(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        horizontal = (width - 2 * self.padding) / (self.cols + 0.5)
        vertical = (height - 2 * self.padding) / (self.rows * 0.75 + 0.25)
        self.diameter = max(min(horizontal * 2 / SQRT3, vertical), 1.0)

    @property
    def radius(self) -> float:
        return self.diameter / 2

    def center(self, cell: Cell) -> Tuple[float, float]:
        i, j = cell
        d = self.diameter
        x = self.padding + j * d * SQRT3 / 2 + (i % 2) * d * SQRT3 / 4
        y = self.padding + i * d * 3 / 4
        return (x, y)

    def polygon(self, cell: Cell, inset: float = 0.0) -> List[Tuple[float, float]]:
        cx, cy = self.center(cell)
        size = max(self.radius - inset, 0.0)
        pts = []
        for k in range(6):
            angle = math.pi / 3 * k - math.pi / 6
            pts.append((cx + size * math.cos(angle), cy + size * math.sin(angle)))
        return pts

    def cell_at(self, x: float, y: float) -> Optional[Cell]:
        """Cell whose centre lies within ``radius * sensitivity`` of the point."""
        d = self.diameter
        threshold = self.radius * self.sensitivity
        col = math.floor((x - self.padding) / (d * SQRT3 / 2))
        row = math.floor((y - self.padding) / (d * 3 / 4))
        for i in range(max(0, row - 1), min(self.rows - 1, row + 1) + 1):
            for j in range(max(0, col - 1), min(self.cols - 1, col + 1) + 1):
                cx, cy = self.center((i, j))
                if math.hypot(x - cx, y - cy) <= threshold:
                    return (i, j)
        return None
