import logging
import random
from typing import List, Tuple

from esper import World

from sumstack.events.bus import (
    EVENT_CLEAR_RESOLVED,
    EVENT_GRAVITY_APPLIED,
    EVENT_SELECTION_MATCHED,
    EVENT_TILES_CLEARED,
    EventBus,
)
from sumstack.systems.board_ops import compact_board, remove_tiles, validate_board
from sumstack.utils.game_state import current_session
from sumstack.utils.scoring import award_points, roll_target

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Turns a matched selection into a clear: remove, compact, score, retarget.

    Emits ``clear_resolved`` last so the mode scheduler only sees a board that
    has already been compacted.
    """

    def __init__(self, world: World, event_bus: EventBus, *, rng: random.Random | None = None):
        self.world = world
        self.event_bus = event_bus
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self.event_bus.subscribe(EVENT_SELECTION_MATCHED, self.on_selection_matched)

    def on_selection_matched(self, sender, **kwargs):
        positions: List[Tuple[int, int]] = list(kwargs.get("positions") or [])
        if not positions:
            return
        found = current_session(self.world)
        if found is None:
            return
        session_entity, session = found
        if not session.accepts_input:
            return
        removed = remove_tiles(self.world, positions)
        self.event_bus.emit(
            EVENT_TILES_CLEARED,
            positions=[pos for pos, _ in removed],
            values=[tile.value for _, tile in removed],
        )
        moves = compact_board(self.world)
        validate_board(self.world)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves)
        award_points(self.world, self.event_bus, session, len(removed))
        roll_target(self.event_bus, session, self._rng)
        logger.debug(
            "Cleared %d tiles, score=%d, next target=%d",
            len(removed),
            session.score,
            session.target,
        )
        self.event_bus.emit(
            EVENT_CLEAR_RESOLVED,
            entity=session_entity,
            cleared=len(removed),
            score=session.score,
            target=session.target,
        )
