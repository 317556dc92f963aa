from sumstack.components.game_state import GameMode
from sumstack.components.session import PlayMode
from sumstack.events.bus import EVENT_GAME_START_REQUEST, EVENT_MOUSE_PRESS, EventBus
from sumstack.menu.components import MenuAction, MenuBackground, MenuButton, MenuTag
from sumstack.menu.factory import clear_main_menu, spawn_main_menu
from sumstack.menu.input_system import KEY_1, KEY_2, MenuInputSystem
from sumstack.utils.game_state import set_game_mode
from sumstack.world import create_world


def _menu():
    bus = EventBus()
    world = create_world(bus)
    requests = []
    bus.subscribe(EVENT_GAME_START_REQUEST, lambda sender, **kw: requests.append(kw))
    system = MenuInputSystem(world, bus)
    spawn_main_menu(world, 540, 820)
    return bus, world, system, requests


def _button(world, action):
    for _, button in world.get_component(MenuButton):
        if button.action == action:
            return button
    raise AssertionError(f"no button for {action}")


def test_spawn_creates_one_button_per_mode():
    _, world, _, _ = _menu()

    actions = sorted(button.action.name for _, button in world.get_component(MenuButton))
    assert actions == ["CLASSIC", "TIMED"]
    assert len(list(world.get_component(MenuBackground))) == 1


def test_spawning_twice_does_not_duplicate():
    _, world, _, _ = _menu()
    spawn_main_menu(world, 540, 820)
    assert len(list(world.get_component(MenuButton))) == 2


def test_clear_removes_menu_entities():
    _, world, _, _ = _menu()

    clear_main_menu(world)

    assert list(world.get_component(MenuButton)) == []
    assert list(world.get_component(MenuTag)) == []


def test_clicking_buttons_requests_matching_mode():
    bus, world, _, requests = _menu()
    timed = _button(world, MenuAction.TIMED)

    bus.emit(EVENT_MOUSE_PRESS, x=timed.x, y=timed.y, button=1, press_id=3)

    assert requests == [{"mode": PlayMode.TIMED, "press_id": 3}]


def test_click_outside_buttons_does_nothing():
    bus, _, _, requests = _menu()
    bus.emit(EVENT_MOUSE_PRESS, x=5, y=5, button=1)
    assert requests == []


def test_number_keys_pick_mode():
    _, _, system, requests = _menu()

    system.handle_key_press(KEY_1, 0)
    system.handle_key_press(KEY_2, 0)

    assert [r["mode"] for r in requests] == [PlayMode.CLASSIC, PlayMode.TIMED]


def test_menu_input_ignored_while_playing():
    bus, world, system, requests = _menu()
    set_game_mode(world, bus, GameMode.PLAYING)
    classic = _button(world, MenuAction.CLASSIC)

    bus.emit(EVENT_MOUSE_PRESS, x=classic.x, y=classic.y, button=1)
    system.handle_key_press(KEY_1, 0)

    assert requests == []


def test_disabled_button_is_skipped():
    bus, world, _, requests = _menu()
    classic = _button(world, MenuAction.CLASSIC)
    classic.enabled = False

    bus.emit(EVENT_MOUSE_PRESS, x=classic.x, y=classic.y, button=1)

    assert requests == []
