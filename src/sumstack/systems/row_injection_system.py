import logging
import random

from esper import World

from sumstack.events.bus import (
    EVENT_ROW_INJECT_REQUEST,
    EVENT_ROW_INJECTED,
    EVENT_ROW_INJECTION_BLOCKED,
    EventBus,
)
from sumstack.systems.board_ops import GameOverSignal, inject_row, validate_board
from sumstack.utils.game_state import current_session

logger = logging.getLogger(__name__)


class RowInjectionSystem:
    """Pushes a fresh row in from the bottom whenever the scheduler asks for one."""

    def __init__(self, world: World, event_bus: EventBus, *, rng: random.Random | None = None):
        self.world = world
        self.event_bus = event_bus
        self._rng = rng
        self.event_bus.subscribe(EVENT_ROW_INJECT_REQUEST, self.on_inject_request)

    def on_inject_request(self, sender, **kwargs):
        reason = kwargs.get("reason", "request")
        found = current_session(self.world)
        if found is None:
            return
        _, session = found
        if not session.accepts_input:
            logger.debug("Dropping row injection (%s) while %s", reason, session.status.value)
            return
        result = inject_row(self.world, self._rng)
        if isinstance(result, GameOverSignal):
            logger.info("Row injection blocked by %d tiles in the top row", len(result.blocked))
            self.event_bus.emit(
                EVENT_ROW_INJECTION_BLOCKED,
                blocked=list(result.blocked),
                reason=result.reason,
            )
            return
        validate_board(self.world)
        self.event_bus.emit(EVENT_ROW_INJECTED, new_tiles=result, reason=reason)
