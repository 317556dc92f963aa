"""Rendering system responsible for drawing the main menu."""
import arcade
from esper import World

from sumstack.components.cover_art import CoverArt
from sumstack.components.game_state import GameMode
from sumstack.constants import TIME_LIMIT
from sumstack.menu.components import MenuBackground, MenuButton
from sumstack.utils.game_state import get_game_state, get_high_score

RULES = (
    "Tap numbers until they add up to the target.",
    "Tiles may come from any row or column; going over resets the pick.",
    "Cleared tiles score points. Keep the top row empty!",
    f"Classic: a new row after every clear. Timed: a new row every {TIME_LIMIT:.0f}s.",
)
INK = (44, 36, 30)
VERMILION = (194, 54, 22)


class MenuRenderSystem:
    """Renders menu entities when the game is in menu mode."""

    def __init__(self, world: World, window) -> None:
        self.world = world
        self.window = window
        self._cover_texture = None
        self._cover_source = None

    def process(self) -> None:
        """Draw the menu if the current mode is Menu."""
        state = get_game_state(self.world)
        if not state or state.mode != GameMode.MENU:
            return

        for _, background in self.world.get_component(MenuBackground):
            arcade.draw_lrbt_rectangle_filled(
                0,
                self.window.width,
                0,
                self.window.height,
                background.color,
            )

        self._draw_cover()

        center_x = self.window.width / 2
        title_y = self.window.height * 0.55
        arcade.draw_text("SumStack", center_x, title_y, VERMILION, 40, anchor_x="center", bold=True)
        for index, line in enumerate(RULES):
            arcade.draw_text(
                line, center_x, title_y - 40 - index * 22, INK, 11, anchor_x="center",
            )
        high = get_high_score(self.world)
        arcade.draw_text(
            f"Best score: {high.best}", center_x, self.window.height * 0.12, INK, 14, anchor_x="center",
        )

        for _, button in self.world.get_component(MenuButton):
            left = button.x - button.width / 2
            bottom = button.y - button.height / 2
            fill_color = VERMILION if button.enabled else arcade.color.GRAY_BLUE
            text_color = arcade.color.WHITE if button.enabled else arcade.color.SILVER
            arcade.draw_lbwh_rectangle_filled(left, bottom, button.width, button.height, fill_color)
            arcade.draw_lbwh_rectangle_outline(
                left, bottom, button.width, button.height, arcade.color.WHITE, border_width=2,
            )
            arcade.draw_text(
                button.label,
                button.x,
                button.y,
                text_color,
                22,
                anchor_x="center",
                anchor_y="center",
                bold=True,
            )

    def _draw_cover(self) -> None:
        art = None
        for _, art in self.world.get_component(CoverArt):
            break
        width = self.window.width * 0.5
        height = self.window.height * 0.3
        left = (self.window.width - width) / 2
        bottom = self.window.height * 0.62
        if art is None or art.image is None:
            # Placeholder while loading or when the image is unavailable.
            arcade.draw_lbwh_rectangle_outline(left, bottom, width, height, VERMILION, border_width=2)
            label = "..." if art is not None and not art.loaded else "*"
            arcade.draw_text(label, left + width / 2, bottom + height / 2, VERMILION, 24,
                             anchor_x="center", anchor_y="center")
            return
        if self._cover_source is not art.image:
            self._cover_texture = arcade.Texture(art.image)
            self._cover_source = art.image
        arcade.draw_texture_rect(self._cover_texture, arcade.LBWH(left, bottom, width, height))
