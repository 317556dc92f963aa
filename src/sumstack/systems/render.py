from __future__ import annotations

from typing import Dict, Tuple

from esper import World

from sumstack.components.game_state import GameMode
from sumstack.components.session import PlayMode, SessionStatus
from sumstack.events.bus import (
    EVENT_SELECTION_OVERSHOOT,
    EVENT_SELECTION_RESET,
    EVENT_TICK,
    EventBus,
)
from sumstack.snapshot import GameSnapshot, build_snapshot
from sumstack.ui.layout import compute_board_geometry

PADDING = 4
SHAKE_AMPLITUDE = 4.0

# One background per tile value, light to dark.
VALUE_COLORS: Dict[int, Tuple[int, int, int]] = {
    1: (246, 211, 101),
    2: (243, 166, 86),
    3: (236, 112, 99),
    4: (214, 93, 177),
    5: (155, 89, 182),
    6: (84, 153, 199),
    7: (72, 201, 176),
    8: (88, 168, 84),
    9: (52, 73, 94),
}
INK = (44, 36, 30)
PAPER = (245, 236, 215)
VERMILION = (194, 54, 22)
JADE = (0, 135, 104)
GOLD = (212, 175, 55)


class RenderSystem:
    """Draws the play screen from a fresh snapshot each frame."""

    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_SELECTION_OVERSHOOT, self.on_overshoot)
        self.event_bus.subscribe(EVENT_SELECTION_RESET, self.on_selection_reset)
        self.shaking = False
        self._time = 0.0
        self._last_tile_layout: Dict[Tuple[int, int], Tuple[float, float, int]] = {}
        self._last_snapshot: GameSnapshot | None = None

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        try:
            self._time += float(dt)
        except (TypeError, ValueError):
            self._time += 1/60

    def on_overshoot(self, sender, **kwargs):
        self.shaking = True

    def on_selection_reset(self, sender, **kwargs):
        self.shaking = False

    @property
    def last_snapshot(self) -> GameSnapshot | None:
        return self._last_snapshot

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True

        snapshot = build_snapshot(self.world)
        self._last_snapshot = snapshot
        if snapshot.screen != GameMode.PLAYING or not snapshot.in_session:
            self._last_tile_layout = {}
            return

        tile_size, board_left, board_bottom = compute_board_geometry(
            self.window.width, self.window.height, snapshot.rows, snapshot.cols
        )
        if self.shaking:
            board_left += SHAKE_AMPLITUDE * (1 if int(self._time * 40) % 2 == 0 else -1)
        board_width = tile_size * snapshot.cols
        board_height = tile_size * snapshot.rows
        selected = set(snapshot.selection)

        self._last_tile_layout = {}
        for r, row_values in enumerate(snapshot.values):
            for c, value in enumerate(row_values):
                if value is None:
                    continue
                cx = board_left + c * tile_size + tile_size / 2
                cy = board_bottom + (snapshot.rows - 1 - r) * tile_size + tile_size / 2
                self._last_tile_layout[(r, c)] = (cx, cy, value)

        if headless:
            return

        arcade.draw_lbwh_rectangle_filled(
            board_left - PADDING, board_bottom - PADDING,
            board_width + 2 * PADDING, board_height + 2 * PADDING, arcade.color.WHITE,
        )
        for (r, c), (cx, cy, value) in self._last_tile_layout.items():
            half = tile_size / 2 - PADDING
            is_selected = (r, c) in selected
            fill = VERMILION if is_selected else VALUE_COLORS.get(value, INK)
            arcade.draw_lrbt_rectangle_filled(cx - half, cx + half, cy - half, cy + half, fill)
            if is_selected:
                arcade.draw_lrbt_rectangle_outline(cx - half, cx + half, cy - half, cy + half, GOLD, border_width=3)
            arcade.draw_text(
                str(value), cx, cy, PAPER, tile_size * 0.45,
                anchor_x="center", anchor_y="center", bold=True,
            )

        # Danger line under row 0
        danger_y = board_bottom + (snapshot.rows - 1) * tile_size
        danger_color = VERMILION if snapshot.danger else (194, 54, 22, 110)
        arcade.draw_line(board_left, danger_y, board_left + board_width, danger_y, danger_color, 3)

        self._draw_header(arcade, snapshot, board_left, board_bottom + board_height, board_width)

        if snapshot.status == SessionStatus.PAUSED:
            self._draw_overlay(arcade, "Paused", "P to resume   Esc for menu")
        elif snapshot.status == SessionStatus.OVER:
            subtitle = f"Final score {snapshot.score}"
            if snapshot.new_high_score:
                subtitle += "   New record!"
            self._draw_overlay(arcade, "Game Over", subtitle + "\nR to retry   Esc for menu")

    def _draw_header(self, arcade, snapshot: GameSnapshot, left: float, top: float, width: float) -> None:
        base_y = top + 24
        arcade.draw_text("TARGET", left, base_y + 96, VERMILION, 11, bold=True)
        arcade.draw_text(str(snapshot.target), left, base_y + 40, VERMILION, 48, bold=True)
        if snapshot.selection:
            arcade.draw_text(f"({snapshot.selection_total})", left + 110, base_y + 50, JADE, 20, bold=True)
        right = left + width
        arcade.draw_text("SCORE", right, base_y + 96, INK, 11, anchor_x="right")
        arcade.draw_text(str(snapshot.score), right, base_y + 60, INK, 28, anchor_x="right", bold=True)
        arcade.draw_text(f"BEST {snapshot.high_score}", right, base_y + 40, INK, 11, anchor_x="right")
        if snapshot.mode == PlayMode.TIMED and snapshot.time_remaining is not None and snapshot.time_limit:
            fraction = max(0.0, min(1.0, snapshot.time_remaining / snapshot.time_limit))
            arcade.draw_lbwh_rectangle_filled(left, base_y, width, 8, (230, 220, 200))
            arcade.draw_lbwh_rectangle_filled(left, base_y, width * fraction, 8, VERMILION)
            arcade.draw_text(f"{snapshot.time_remaining:.0f}s", right, base_y + 12, VERMILION, 11, anchor_x="right")
        else:
            arcade.draw_text("CLASSIC", left, base_y + 4, VERMILION, 11, bold=True)

    def _draw_overlay(self, arcade, title: str, subtitle: str) -> None:
        arcade.draw_lrbt_rectangle_filled(0, self.window.width, 0, self.window.height, (44, 36, 30, 220))
        cx = self.window.width / 2
        cy = self.window.height / 2
        arcade.draw_text(title, cx, cy + 40, VERMILION, 36, anchor_x="center", bold=True)
        arcade.draw_text(
            subtitle, cx, cy - 20, PAPER, 14,
            anchor_x="center", multiline=True, width=int(self.window.width * 0.8), align="center",
        )
