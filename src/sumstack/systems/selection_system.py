from __future__ import annotations

import logging
from time import monotonic
from typing import Callable

from esper import World

from sumstack.components.selection import Selection
from sumstack.components.session import SessionStatus
from sumstack.constants import OVERSHOOT_FEEDBACK_DELAY
from sumstack.events.bus import (
    EVENT_SELECTION_MATCHED,
    EVENT_SELECTION_OVERSHOOT,
    EVENT_ROW_INJECTED,
    EVENT_SELECTION_RESET,
    EVENT_STATUS_CHANGED,
    EVENT_TICK,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EventBus,
)
from sumstack.systems.board_ops import in_bounds, selection_total, tile_at
from sumstack.utils.game_state import current_session

logger = logging.getLogger(__name__)


class SelectionSystem:
    """Toggles tiles in and out of the selection and judges the running sum.

    * sum == target: emits ``selection_matched`` with the exact positions and
      empties the selection.
    * sum > target: emits ``selection_overshoot`` and keeps the selection
      frozen for ``feedback_delay`` seconds before dropping it.
    * sum < target: keeps accumulating.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        feedback_delay: float = OVERSHOOT_FEEDBACK_DELAY,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.feedback_delay = max(0.0, float(feedback_delay))
        self._clock = clock or monotonic
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_STATUS_CHANGED, self.on_status_changed)
        self.event_bus.subscribe(EVENT_ROW_INJECTED, self.on_row_injected)

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get("row")
        col = kwargs.get("col")
        if row is None or col is None:
            return
        self.toggle(int(row), int(col))

    def on_tick(self, sender, **kwargs):
        selection = self._selection()
        if selection is None or not selection.rejecting:
            return
        if self._clock() >= selection.reject_until:
            self._reset(selection, reason="overshoot")

    def on_status_changed(self, sender, **kwargs):
        if kwargs.get("status") != SessionStatus.OVER:
            return
        selection = self._selection()
        if selection is not None and (selection.positions or selection.rejecting):
            self._reset(selection, reason="game_over")

    def on_row_injected(self, sender, **kwargs):
        # Injection shifts every row up, so the selected cells now hold other tiles.
        selection = self._selection()
        if selection is None or not selection.positions or selection.rejecting:
            return
        self.evaluate()

    def toggle(self, row: int, col: int) -> bool:
        """Select or deselect a tile; returns False when the click was ignored."""
        found = current_session(self.world)
        if found is None:
            return False
        _, session = found
        if not session.accepts_input:
            logger.debug("Ignoring toggle at %s while %s", (row, col), session.status.value)
            return False
        selection = self._selection()
        if selection is None or selection.rejecting:
            return False
        if not in_bounds(self.world, row, col) or tile_at(self.world, row, col) is None:
            logger.debug("Ignoring toggle on empty or invalid cell %s", (row, col))
            return False
        if selection.contains(row, col):
            selection.positions.remove((row, col))
            total = selection_total(self.world, selection.positions)
            self.event_bus.emit(EVENT_TILE_DESELECTED, row=row, col=col, total=total)
        else:
            selection.positions.append((row, col))
            total = selection_total(self.world, selection.positions)
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col, total=total)
        self.evaluate()
        return True

    def evaluate(self) -> str:
        """Judge the current selection; returns 'match', 'overshoot', 'pending' or 'idle'."""
        found = current_session(self.world)
        selection = self._selection()
        if found is None or selection is None or not selection.positions:
            return "idle"
        _, session = found
        total = selection_total(self.world, selection.positions)
        if total == session.target:
            positions = list(selection.positions)
            selection.clear()
            self.event_bus.emit(EVENT_SELECTION_RESET, reason="matched")
            self.event_bus.emit(EVENT_SELECTION_MATCHED, positions=positions, total=total)
            return "match"
        if total > session.target:
            positions = list(selection.positions)
            self.event_bus.emit(
                EVENT_SELECTION_OVERSHOOT,
                positions=positions,
                total=total,
                target=session.target,
            )
            if self.feedback_delay <= 0.0:
                self._reset(selection, reason="overshoot")
            else:
                selection.reject_until = self._clock() + self.feedback_delay
            return "overshoot"
        return "pending"

    def _reset(self, selection: Selection, *, reason: str) -> None:
        selection.clear()
        self.event_bus.emit(EVENT_SELECTION_RESET, reason=reason)

    def _selection(self) -> Selection | None:
        found = current_session(self.world)
        if found is None:
            return None
        try:
            return self.world.component_for_entity(found[0], Selection)
        except KeyError:
            return None
