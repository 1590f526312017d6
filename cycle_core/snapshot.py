"""Export the current cell colours as a small PNG, one block per cell."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from PIL import Image

from cycle_core.session import HexCycleSession

LOG = logging.getLogger(__name__)


def state_image(session: HexCycleSession, scale: int = 1, base=None) -> Image.Image:
    img = Image.fromarray(session.rendered_colors(base))
    if scale > 1:
        img = img.resize((session.cols * scale, session.rows * scale), Image.Resampling.NEAREST)
    return img


def save_snapshot(session: HexCycleSession, out_dir: Path, scale: int = 1, name: Optional[str] = None) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    if name is None:
        name = f"cycles_{int(time.time() * 1000)}.png"
    path = out_dir / name
    state_image(session, scale).save(path)
    LOG.info("Saved grid snapshot: %s", path)
    return path
