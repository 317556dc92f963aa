from esper import World

from sumstack.components.game_state import GameMode
from sumstack.events.bus import (
    EVENT_EXIT_TO_MENU_REQUEST,
    EVENT_KEY_PRESS,
    EVENT_MOUSE_PRESS,
    EVENT_PAUSE_TOGGLE_REQUEST,
    EVENT_RESTART_REQUEST,
    EVENT_TILE_CLICK,
    EventBus,
)
from sumstack.systems.board_ops import board_dimensions
from sumstack.ui.layout import cell_at_point
from sumstack.utils.game_state import get_game_state, press_is_guarded

# arcade.key codes, duplicated to keep this module importable without a window.
KEY_ESCAPE = 65307
KEY_SPACE = 32
KEY_P = 112
KEY_R = 114
LEFT_BUTTON = 1


class InputSystem:
    """Translates raw window input on the play screen into game commands."""

    def __init__(self, event_bus: EventBus, window, world: World):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button')
        if x is None or y is None:
            return
        if button != LEFT_BUTTON or not self._playing():
            return
        if press_is_guarded(self.world, kwargs.get('press_id')):
            return
        dims = board_dimensions(self.world)
        if not dims:
            return
        rows, cols = dims
        cell = cell_at_point(x, y, self.window.width, self.window.height, rows, cols)
        if cell is not None:
            self.event_bus.emit(EVENT_TILE_CLICK, row=cell[0], col=cell[1])

    def on_key_press(self, sender, **kwargs):
        if not self._playing():
            return
        symbol = kwargs.get('symbol')
        if symbol in (KEY_P, KEY_SPACE):
            self.event_bus.emit(EVENT_PAUSE_TOGGLE_REQUEST)
        elif symbol == KEY_R:
            self.event_bus.emit(EVENT_RESTART_REQUEST)
        elif symbol == KEY_ESCAPE:
            self.event_bus.emit(EVENT_EXIT_TO_MENU_REQUEST)

    def _playing(self) -> bool:
        state = get_game_state(self.world)
        return state is not None and state.mode == GameMode.PLAYING
