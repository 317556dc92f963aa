"""Entry point for the SumStack number puzzle.

Sets up ECS world, event bus, systems, and Arcade window.
"""
import logging
import os

from arcade import Window, run, set_background_color

from sumstack.components.game_state import GameMode, GameState
from sumstack.constants import LOG_LEVEL_ENV, WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from sumstack.events.bus import EVENT_GAME_MODE_CHANGED, EVENT_KEY_PRESS, EVENT_MOUSE_PRESS, EVENT_TICK, EventBus
from sumstack.menu.factory import clear_main_menu, spawn_main_menu
from sumstack.menu.input_system import MenuInputSystem
from sumstack.menu.render_system import MenuRenderSystem
from sumstack.systems.board import BoardSystem
from sumstack.systems.cover_image_system import CoverImageSystem
from sumstack.systems.input import InputSystem
from sumstack.systems.match_resolution import MatchResolutionSystem
from sumstack.systems.mode_scheduler_system import ModeSchedulerSystem
from sumstack.systems.render import PAPER, RenderSystem
from sumstack.systems.row_injection_system import RowInjectionSystem
from sumstack.systems.selection_system import SelectionSystem
from sumstack.systems.session_system import SessionSystem
from sumstack.world import create_world

logger = logging.getLogger(__name__)


class SumStackWindow(Window):
    def __init__(self):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE)
        self.set_update_rate(1/60)
        self._press_counter = 0
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus, initial_mode=GameMode.MENU)

        # Menu and cover art
        spawn_main_menu(self.world, self.width, self.height)
        self.menu_input_system = MenuInputSystem(self.world, self.event_bus)
        self.menu_render_system = MenuRenderSystem(self.world, self)
        self.cover_image_system = CoverImageSystem(self.world, self.event_bus)

        # Core game systems
        self.board_system = BoardSystem(self.world, self.event_bus)
        self.selection_system = SelectionSystem(self.world, self.event_bus)
        self.match_resolution_system = MatchResolutionSystem(self.world, self.event_bus)
        self.row_injection_system = RowInjectionSystem(self.world, self.event_bus)
        self.mode_scheduler_system = ModeSchedulerSystem(self.world, self.event_bus)
        self.session_system = SessionSystem(self.world, self.event_bus)

        # Interface systems
        self.input_system = InputSystem(self.event_bus, self, self.world)
        self.render_system = RenderSystem(self.world, self.event_bus, self)
        self.event_bus.subscribe(EVENT_GAME_MODE_CHANGED, self.on_game_mode_changed)

        set_background_color(PAPER)
        self.cover_image_system.start()

    def on_game_mode_changed(self, sender, **kwargs):
        if kwargs.get("new_mode") == GameMode.MENU:
            spawn_main_menu(self.world, self.width, self.height)
        else:
            clear_main_menu(self.world)

    def on_draw(self):
        self.clear()
        state = self._get_game_state()
        if state and state.mode == GameMode.MENU:
            self.menu_render_system.process()
            return
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self._press_counter += 1
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button, press_id=self._press_counter)

    def on_key_press(self, symbol: int, modifiers: int):
        state = self._get_game_state()
        if state and state.mode == GameMode.MENU:
            self.menu_input_system.handle_key_press(symbol, modifiers)
            return
        self.event_bus.emit(EVENT_KEY_PRESS, symbol=symbol, modifiers=modifiers)

    def _get_game_state(self) -> GameState | None:
        for _, state in self.world.get_component(GameState):
            return state
        return None


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    configure_logging()
    logger.info("Starting %s", WINDOW_TITLE)
    SumStackWindow()
    run()


if __name__ == "__main__":
    main()
