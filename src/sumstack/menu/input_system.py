"""Input handling for the ECS-driven main menu."""
from esper import World

from sumstack.components.game_state import GameMode
from sumstack.components.session import PlayMode
from sumstack.events.bus import EVENT_GAME_START_REQUEST, EVENT_MOUSE_PRESS, EventBus
from sumstack.menu.components import MenuAction, MenuButton
from sumstack.utils.game_state import get_game_state

# arcade.key codes, duplicated to avoid importing arcade here.
KEY_1 = 49
KEY_2 = 50

_ACTION_MODES = {
    MenuAction.CLASSIC: PlayMode.CLASSIC,
    MenuAction.TIMED: PlayMode.TIMED,
}


class MenuInputSystem:
    """Processes input events while the game is in the menu mode."""

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self._event_bus = event_bus
        event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **payload) -> None:
        x = payload.get("x")
        y = payload.get("y")
        button = payload.get("button")
        if x is None or y is None or button is None:
            return
        press_id = payload.get("press_id")
        try:
            press_id_int = int(press_id) if press_id is not None else None
        except (TypeError, ValueError):
            press_id_int = None
        self.handle_mouse_press(float(x), float(y), int(button), press_id_int)

    def handle_mouse_press(
        self,
        x: float,
        y: float,
        button: int,
        press_id: int | None = None,
    ) -> None:
        """Start a game when a mode button is clicked."""
        if not self._menu_active():
            return
        for _, menu_button in self.world.get_component(MenuButton):
            if not menu_button.enabled:
                continue
            if self._point_inside_button(x, y, menu_button):
                self._activate_action(menu_button.action, press_id=press_id)
                return

    def handle_key_press(self, symbol: int, modifiers: int) -> None:
        """Keys 1 and 2 pick Classic and Timed."""
        if not self._menu_active():
            return
        if symbol == KEY_1:
            self._activate_action(MenuAction.CLASSIC)
        elif symbol == KEY_2:
            self._activate_action(MenuAction.TIMED)

    def _activate_action(self, action: MenuAction, *, press_id: int | None = None) -> None:
        mode = _ACTION_MODES.get(action)
        if mode is not None:
            self._event_bus.emit(EVENT_GAME_START_REQUEST, mode=mode, press_id=press_id)

    def _menu_active(self) -> bool:
        state = get_game_state(self.world)
        return state is not None and state.mode == GameMode.MENU

    @staticmethod
    def _point_inside_button(x: float, y: float, button: MenuButton) -> bool:
        half_w = button.width / 2
        half_h = button.height / 2
        return (button.x - half_w) <= x <= (button.x + half_w) and (button.y - half_h) <= y <= (button.y + half_h)
