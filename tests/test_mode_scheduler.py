import pytest

from sumstack.components.session import PlayMode, SessionStatus
from sumstack.events.bus import (
    EVENT_GAME_OVER,
    EVENT_ROW_INJECTED,
    EVENT_ROW_INJECTION_BLOCKED,
    EVENT_SELECTION_MATCHED,
    EVENT_SELECTION_OVERSHOOT,
    EVENT_TICK,
    EVENT_TIMER_EXPIRED,
    EVENT_TIMER_RESET,
)
from sumstack.snapshot import build_snapshot
from sumstack.systems.board_ops import value_grid
from sumstack.utils.game_state import current_selection
from sumstack.utils.row_timer import RowTimer
from tests.helpers import build_game, set_grid, start

EMPTY_ROW = [None] * 6
GRID = [EMPTY_ROW] * 3 + [
    [2, 1, None, None, None, None],
    [7, 3, None, None, None, None],
    [8, 8, 5, 6, 1, 2],
]


def _game(**kwargs):
    game = build_game(**kwargs)
    game.record(
        EVENT_ROW_INJECTED,
        EVENT_ROW_INJECTION_BLOCKED,
        EVENT_TIMER_RESET,
        EVENT_TIMER_EXPIRED,
        EVENT_GAME_OVER,
    )
    return game


def _tick(game, dt):
    game.clock.advance(dt)
    game.bus.emit(EVENT_TICK, dt=dt)


def _timer(game) -> RowTimer:
    return game.world.component_for_entity(game.session_entity(), RowTimer)


def test_classic_injects_one_row_after_each_clear():
    game = _game()
    start(game, PlayMode.CLASSIC, target=15)
    set_grid(game.world, GRID)

    game.selection.toggle(4, 0)
    game.selection.toggle(5, 1)

    assert game.events[EVENT_ROW_INJECTED] == [
        {"new_tiles": [(5, c) for c in range(6)], "reason": "clear"}
    ]
    grid = value_grid(game.world)
    assert grid[3] == [2, 1, None, None, None, None]
    assert grid[4] == [8, 3, 5, 6, 1, 2]
    assert all(v is not None for v in grid[5])


def test_classic_never_injects_on_time():
    game = _game()
    start(game, PlayMode.CLASSIC)
    before = value_grid(game.world)

    for _ in range(100):
        _tick(game, 1.0)

    assert game.events[EVENT_ROW_INJECTED] == []
    assert value_grid(game.world) == before


def test_classic_clear_with_blocked_top_row_ends_game():
    game = _game()
    session = start(game, PlayMode.CLASSIC, target=10)
    grid = [[1] * 6 for _ in range(6)]
    grid[5][0] = 9
    set_grid(game.world, grid)

    game.selection.toggle(5, 0)
    game.selection.toggle(5, 1)

    assert session.status == SessionStatus.OVER
    assert game.events[EVENT_ROW_INJECTED] == []
    blocked = game.events[EVENT_ROW_INJECTION_BLOCKED][-1]["blocked"]
    assert blocked == [(0, c) for c in range(2, 6)]
    over = game.events[EVENT_GAME_OVER][-1]
    assert over["score"] == 20
    assert over["new_high_score"] is True
    assert session.new_high_score


def test_timed_session_gets_timer_at_full_period():
    game = _game(period=15.0)
    start(game, PlayMode.TIMED)

    timer = _timer(game)
    assert timer.running
    assert timer.remaining() == pytest.approx(15.0)
    assert game.events[EVENT_TIMER_RESET] == [{"period": 15.0, "reason": "start"}]


def test_classic_session_has_no_timer():
    game = _game()
    start(game, PlayMode.CLASSIC)
    with pytest.raises(KeyError):
        _timer(game)
    assert game.scheduler.remaining() is None


def test_timed_expiry_injects_exactly_once_and_resets_timer():
    game = _game(period=15.0)
    start(game, PlayMode.TIMED)

    _tick(game, 14.0)
    assert game.events[EVENT_ROW_INJECTED] == []
    assert game.scheduler.remaining() == pytest.approx(1.0)

    _tick(game, 1.0)
    assert game.events[EVENT_ROW_INJECTED] == [
        {"new_tiles": [(5, c) for c in range(6)], "reason": "timer"}
    ]
    assert game.events[EVENT_TIMER_EXPIRED] == [{"period": 15.0}]
    assert game.events[EVENT_TIMER_RESET][-1] == {"period": 15.0, "reason": "expired"}
    assert game.scheduler.remaining() == pytest.approx(15.0)

    game.bus.emit(EVENT_TICK, dt=0.0)
    assert len(game.events[EVENT_ROW_INJECTED]) == 1


def test_remaining_time_strictly_decreases_while_active():
    game = _game(period=15.0)
    start(game, PlayMode.TIMED)
    readings = []
    for _ in range(5):
        _tick(game, 1.0)
        readings.append(game.scheduler.remaining())
    assert readings == sorted(readings, reverse=True)
    assert len(set(readings)) == len(readings)


def test_pause_preserves_remaining_time_exactly():
    game = _game(period=15.0)
    start(game, PlayMode.TIMED)
    _tick(game, 5.0)

    game.session.toggle_pause()
    for _ in range(60):
        _tick(game, 1.0)
    assert game.scheduler.remaining() == pytest.approx(10.0)
    assert game.events[EVENT_ROW_INJECTED] == []

    game.session.toggle_pause()
    assert game.scheduler.remaining() == pytest.approx(10.0)
    _tick(game, 9.5)
    assert game.events[EVENT_ROW_INJECTED] == []
    _tick(game, 0.5)
    assert len(game.events[EVENT_ROW_INJECTED]) == 1


def test_timed_clear_resets_timer_without_injecting():
    game = _game(period=15.0)
    start(game, PlayMode.TIMED, target=15)
    set_grid(game.world, GRID)
    _tick(game, 10.0)

    game.selection.toggle(4, 0)
    game.selection.toggle(5, 1)

    assert game.current().score == 20
    assert game.events[EVENT_ROW_INJECTED] == []
    assert game.events[EVENT_TIMER_RESET][-1] == {"period": 15.0, "reason": "clear"}
    assert game.scheduler.remaining() == pytest.approx(15.0)


def test_timed_expiry_into_blocked_top_row_ends_game_and_cancels_timer():
    game = _game(period=15.0)
    session = start(game, PlayMode.TIMED)
    set_grid(game.world, [[4] + [None] * 5] + [EMPTY_ROW] * 5)
    timer = _timer(game)

    _tick(game, 15.0)

    assert session.status == SessionStatus.OVER
    assert not timer.running
    assert game.events[EVENT_ROW_INJECTED] == []
    assert game.events[EVENT_GAME_OVER][-1]["new_high_score"] is False
    # No reset after the injection ended the game.
    assert game.events[EVENT_TIMER_RESET][-1]["reason"] == "start"

    _tick(game, 30.0)
    assert len(game.events[EVENT_TIMER_EXPIRED]) == 1


def test_exit_to_menu_cancels_timer():
    game = _game(period=15.0)
    start(game, PlayMode.TIMED)
    timer = _timer(game)

    game.session.exit_to_menu()

    assert not timer.running
    _tick(game, 20.0)
    assert game.events[EVENT_ROW_INJECTED] == []


def test_restart_arms_a_fresh_timer():
    game = _game(period=15.0)
    start(game, PlayMode.TIMED)
    old_timer = _timer(game)
    _tick(game, 12.0)

    game.session.restart()

    assert not old_timer.running
    assert _timer(game) is not old_timer
    assert game.scheduler.remaining() == pytest.approx(15.0)


def test_injection_rechecks_pending_selection_for_overshoot():
    game = _game(period=15.0)
    game.record(EVENT_SELECTION_OVERSHOOT)
    start(game, PlayMode.TIMED, target=5)
    set_grid(game.world, [EMPTY_ROW] * 4 + [[1] + [None] * 5, [9] + [None] * 5])
    game.selection.toggle(4, 0)
    assert game.selection.evaluate() == "pending"

    _tick(game, 15.0)

    # The row shift put the 9 under the selected cell.
    assert game.events[EVENT_SELECTION_OVERSHOOT] == [
        {"positions": [(4, 0)], "total": 9, "target": 5}
    ]
    snapshot = build_snapshot(game.world)
    assert snapshot.rejecting
    assert snapshot.selection_total > snapshot.target


def test_injection_rechecks_pending_selection_for_exact_match():
    game = _game(period=15.0)
    game.record(EVENT_SELECTION_MATCHED)
    session = start(game, PlayMode.TIMED, target=9)
    set_grid(game.world, [EMPTY_ROW] * 4 + [[1] + [None] * 5, [9] + [None] * 5])
    game.selection.toggle(4, 0)

    _tick(game, 15.0)

    assert game.events[EVENT_SELECTION_MATCHED] == [{"positions": [(4, 0)], "total": 9}]
    assert session.score == 10
    assert current_selection(game.world).positions == []
    column = [row[0] for row in value_grid(game.world)]
    assert column[:4] == [None] * 4
    assert column[4] == 1
