"""Colour constants and small colour helpers shared by the core and the viewer."""
from __future__ import annotations

from typing import List, Tuple

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]

PALETTE: List[RGB] = [
    (64, 224, 208),   # turquoise
    (92, 182, 224),   # sky blue
    (130, 150, 227),  # periwinkle
    (155, 127, 216),  # soft purple
]

REST_COLOR: RGB = (0, 0, 0)
MAX_INTENSITY = 255

HIGHLIGHT_ALPHA = 100
HIGHLIGHT_CORRECT: RGBA = (255, 255, 0, HIGHLIGHT_ALPHA)  # degree == 2
HIGHLIGHT_UNDER: RGBA = (255, 165, 0, HIGHLIGHT_ALPHA)    # degree < 2
HIGHLIGHT_OVER: RGBA = (255, 0, 0, HIGHLIGHT_ALPHA)       # degree > 2


def highlight_for_degree(degree: int) -> RGBA:
    """Map a within-selection degree to its feedback colour."""
    if degree > 2:
        return HIGHLIGHT_OVER
    if degree < 2:
        return HIGHLIGHT_UNDER
    return HIGHLIGHT_CORRECT

