from __future__ import annotations

from esper import World

from sumstack.components.game_state import GameMode, GameState, HighScore
from sumstack.components.selection import Selection
from sumstack.components.session import Session
from sumstack.events.bus import EVENT_GAME_MODE_CHANGED, EventBus


def _sanitize_press_id(value: int | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def get_game_state(world: World) -> GameState | None:
    for _, state in world.get_component(GameState):
        return state
    return None


def set_game_mode(
    world: World,
    event_bus: EventBus,
    mode: GameMode,
    *,
    input_guard_press_id: int | None = None,
) -> None:
    """Update the global screen and emit a change event when it differs."""
    guard_id = _sanitize_press_id(input_guard_press_id)
    previous_mode: GameMode | None = None
    for _, state in world.get_component(GameState):
        previous_mode = state.mode
        changed = state.mode != mode
        if changed:
            state.mode = mode
        if changed or guard_id is not None:
            state.input_guard_press_id = guard_id
            event_bus.emit(
                EVENT_GAME_MODE_CHANGED,
                previous_mode=previous_mode,
                new_mode=mode,
                input_guard_press_id=guard_id,
            )
        return
    # No existing GameState component; create a new one.
    world.create_entity(GameState(mode=mode, input_guard_press_id=guard_id), HighScore())
    event_bus.emit(
        EVENT_GAME_MODE_CHANGED,
        previous_mode=previous_mode,
        new_mode=mode,
        input_guard_press_id=guard_id,
    )


def press_is_guarded(world: World, press_id: int | None) -> bool:
    """True if ``press_id`` already triggered the current screen."""
    if press_id is None:
        return False
    state = get_game_state(world)
    return state is not None and state.input_guard_press_id == _sanitize_press_id(press_id)


def get_high_score(world: World) -> HighScore:
    for _, high in world.get_component(HighScore):
        return high
    high = HighScore()
    world.create_entity(high)
    return high


def current_session(world: World) -> tuple[int, Session] | None:
    for entity, session in world.get_component(Session):
        return entity, session
    return None


def current_selection(world: World) -> Selection | None:
    found = current_session(world)
    if found is None:
        return None
    try:
        return world.component_for_entity(found[0], Selection)
    except KeyError:
        return None
