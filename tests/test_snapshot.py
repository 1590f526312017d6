from PIL import Image

from cycle_core.palette import PALETTE
from cycle_core.session import HexCycleSession
from cycle_core.snapshot import save_snapshot, state_image

RING = [(3, 15), (3, 16), (4, 17), (5, 16), (5, 15), (4, 15)]


def test_state_image_has_one_block_per_cell():
    session = HexCycleSession()
    img = state_image(session, scale=4)
    assert img.size == (32 * 4, 8 * 4)
    assert img.getpixel((0, 0)) == (128, 128, 128)


def test_saved_snapshot_shows_lit_cycle(tmp_path):
    session = HexCycleSession()
    session.on_gesture_start(RING[0])
    for cell in RING[1:]:
        session.on_gesture_extend(cell)
    assert session.on_gesture_end(now=0)
    path = save_snapshot(session, tmp_path / "out", name="shot.png")
    assert path.exists()
    with Image.open(path) as img:
        assert img.getpixel((15, 3)) == PALETTE[0]
        assert img.getpixel((16, 4)) == (128, 128, 128)
