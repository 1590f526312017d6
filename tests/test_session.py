import pytest

from cycle_core.palette import HIGHLIGHT_CORRECT, HIGHLIGHT_OVER, HIGHLIGHT_UNDER, PALETTE
from cycle_core.session import HexCycleSession
from cycle_core.validator import ACCEPTED, TOO_SHORT

RING = [(3, 15), (3, 16), (4, 17), (5, 16), (5, 15), (4, 15)]


def draw(session, cells, now):
    session.on_gesture_start(cells[0])
    for cell in cells[1:]:
        session.on_gesture_extend(cell)
    return session.on_gesture_end(now)


@pytest.fixture
def session():
    return HexCycleSession()


def test_ring_around_cell_lights_and_fades_back_to_rest(session):
    session.on_gesture_start(RING[0])
    for cell in RING[1:]:
        session.on_gesture_extend(cell)
        session.on_gesture_extend(cell)
    assert session.tracker.current() == tuple(RING)
    assert session.on_gesture_end(now=0)
    assert session.last_verdict.reason == ACCEPTED
    assert session.tracker.current() == ()

    states = [session.cell_state(c) for c in RING]
    assert {st.state_name for st in states} == {"decaying"}
    assert {st.cycle_id for st in states} == {1}
    assert {st.color for st in states} == {PALETTE[0]}
    assert {st.intensity for st in states} == {255}
    assert session.cell_state((4, 16)).state_name == "resting"

    for now in range(0, 3000, 16):
        session.tick(now)
    for cell in RING:
        st = session.cell_state(cell)
        assert st.state_name == "resting"
        assert st.color == (0, 0, 0)


def test_cycle_ids_increase_for_overlapping_cycles(session):
    assert draw(session, RING, now=0)
    assert draw(session, RING[1:] + RING[:1], now=50)
    st = session.cell_state(RING[0])
    assert st.cycle_id == 2
    assert st.palette_index == 1
    assert [e.cycle_id for e in session.history(RING[0])] == [1, 2]
    assert session.next_cycle_id == 3


def test_rejected_selection_does_not_consume_an_id(session):
    assert not draw(session, RING[:3], now=0)
    assert draw(session, RING, now=10)
    assert session.cell_state(RING[0]).cycle_id == 1


def test_degree_coded_highlights_during_gesture(session):
    session.on_gesture_start((4, 16))
    assert session.highlights[(4, 16)] == HIGHLIGHT_UNDER
    for cell in [(3, 16), (4, 17)]:
        session.on_gesture_extend(cell)
    assert set(session.highlights.values()) == {HIGHLIGHT_CORRECT}
    session.on_gesture_extend((5, 16))
    assert session.highlights[(4, 16)] == HIGHLIGHT_OVER
    assert session.highlights[(5, 16)] == HIGHLIGHT_CORRECT
    assert session.cell_view((4, 16)).highlighted


def test_invalid_selection_flashes_then_clears(session):
    assert not draw(session, [(4, 16), (4, 17), (3, 16)], now=1000)
    assert session.last_verdict.reason == TOO_SHORT
    assert session.flashing
    assert session.tracker.current() == ()
    assert not session.is_highlighted((4, 16))

    session.tick(1200)
    assert session.is_highlighted((4, 16))
    session.tick(1400)
    assert not session.is_highlighted((4, 16))
    session.tick(1600)
    assert not session.flashing
    assert session.highlights == {}
    assert session.cell_state((4, 16)).state_name == "resting"


def test_new_gesture_cuts_the_flash_short(session):
    draw(session, [(0, 0), (0, 1)], now=0)
    assert session.flashing
    session.on_gesture_start((6, 6))
    assert not session.flashing
    assert list(session.highlights) == [(6, 6)]


def test_end_without_gesture_is_ignored(session):
    assert not session.on_gesture_end(now=0)
    assert session.last_verdict is None


def test_off_grid_cells_are_ignored(session):
    session.on_gesture_start(None)
    assert not session.on_gesture_extend((99, 0))
    assert session.tracker.current() == ()


def test_debug_timing_speeds_up_decay_and_echo(session):
    session.set_debug(True)
    timing = session.scheduler.timing
    assert timing.decay_rate == 12
    assert timing.echo_period_ms == 1000
    session.set_debug(False)
    assert session.scheduler.timing.decay_rate == 3


def test_echo_fires_through_session_tick(session):
    draw(session, RING, now=0)
    for now in range(0, 3000, 16):
        session.tick(now)
    session.tick(4000)
    st = session.cell_state(RING[0])
    assert st.state_name == "decaying"
    assert st.intensity == 153


def test_resize_rebuilds_only_on_new_dimensions(session):
    draw(session, RING, now=0)
    assert not session.resize(8, 32)
    assert session.cell_state(RING[0]).state_name == "decaying"
    assert session.resize(6, 10)
    assert (session.rows, session.cols) == (6, 10)
    assert session.scheduler.pending() == 0
    ring = [(1, 3), (1, 4), (2, 5), (3, 4), (3, 3), (2, 3)]
    assert draw(session, ring, now=0)
    assert session.cell_state(ring[0]).cycle_id == 2


def test_rendered_colors(session):
    rgb = session.rendered_colors()
    assert rgb.shape == (8, 32, 3)
    assert tuple(rgb[0, 0]) == (128, 128, 128)
    draw(session, RING, now=0)
    rgb = session.rendered_colors()
    assert tuple(rgb[3, 15]) == PALETTE[0]


def test_reset_returns_cells_to_rest(session):
    draw(session, RING, now=0)
    session.reset()
    assert session.scheduler.decaying_count() == 0
    assert session.cell_state(RING[0]).palette_index == -1
    assert session.next_cycle_id == 2


def test_fade_blends_smoothly_into_background(session):
    draw(session, RING, now=0)
    frames = []
    now = 0
    while session.cell_state(RING[0]).state_name == "decaying":
        session.tick(now)
        frames.append(session.rendered_colors()[3, 15].astype(int))
        now += 16
    assert now < 4000
    for before, after in zip(frames, frames[1:]):
        assert abs(after - before).max() <= 8
    assert tuple(frames[-1]) == (128, 128, 128)


def test_failed_resize_keeps_previous_grid(session):
    with pytest.raises(ValueError):
        session.resize(2, 5)
    assert (session.settings["rows"], session.settings["cols"]) == (8, 32)
    assert (session.graph.rows, session.graph.cols) == (8, 32)
    assert draw(session, RING, now=0)
