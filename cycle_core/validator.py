"""Decide whether a finished selection is a simple cycle of the hex graph."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from cycle_core.graph import Cell, CoordinateGraph

LOG = logging.getLogger(__name__)

MIN_CYCLE_LENGTH = 4

ACCEPTED = "accepted"
TOO_SHORT = "too_short"
NOT_ADJACENT = "not_adjacent"
REPEATED_CELL = "repeated_cell"
WRONG_DEGREE = "wrong_degree"


@dataclass(frozen=True)
class CycleVerdict:
    ok: bool
    reason: str
    cell: Optional[Cell] = None  # first offending cell, when there is one

    def __bool__(self) -> bool:
        return self.ok


def sequence_degrees(sequence: Sequence[Cell], graph: CoordinateGraph) -> Dict[Cell, int]:
    """Number of other distinct members adjacent to each member."""
    members = list(dict.fromkeys(sequence))
    degrees: Dict[Cell, int] = {}
    for cell in members:
        degrees[cell] = sum(
            1 for other in members if other != cell and graph.are_neighbors(cell, other)
        )
    return degrees


def check_cycle(sequence: Sequence[Cell], graph: CoordinateGraph) -> CycleVerdict:
    """Run the checks in order and stop at the first failure.

    1. at least ``MIN_CYCLE_LENGTH`` cells
    2. each consecutive pair, and last->first, adjacent
    3. no cell visited twice, and every cell has exactly two neighbours
       among the other members
    """
    n = len(sequence)
    if n < MIN_CYCLE_LENGTH:
        return CycleVerdict(False, TOO_SHORT)

    for k in range(n):
        a, b = sequence[k], sequence[(k + 1) % n]
        if not graph.are_neighbors(a, b):
            return CycleVerdict(False, NOT_ADJACENT, a)

    seen = set()
    for cell in sequence:
        if cell in seen:
            return CycleVerdict(False, REPEATED_CELL, cell)
        seen.add(cell)

    for cell, degree in sequence_degrees(sequence, graph).items():
        if degree != 2:
            return CycleVerdict(False, WRONG_DEGREE, cell)

    return CycleVerdict(True, ACCEPTED)


def validate(sequence: Sequence[Cell], graph: CoordinateGraph) -> bool:
    verdict = check_cycle(sequence, graph)
    if not verdict.ok:
        LOG.debug("Rejected %d-cell selection: %s at %s", len(sequence), verdict.reason, verdict.cell)
    return verdict.ok
