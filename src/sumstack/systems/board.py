import logging
import random
from typing import List, Tuple

from esper import World

from sumstack.components.board import Board
from sumstack.constants import GRID_COLS, GRID_ROWS, INITIAL_ROWS
from sumstack.events.bus import EVENT_SESSION_STARTED, EventBus
from sumstack.systems.board_ops import create_board_cells, seed_rows

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns the single board entity and reseeds it for every new session."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        *,
        initial_rows: int = INITIAL_ROWS,
        rng: random.Random | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.initial_rows = initial_rows
        self._rng = rng
        self.board_entity = create_board_cells(world, rows, cols)
        self.event_bus.subscribe(EVENT_SESSION_STARTED, self.on_session_started)

    @property
    def rows(self) -> int:
        return self.world.component_for_entity(self.board_entity, Board).rows

    @property
    def cols(self) -> int:
        return self.world.component_for_entity(self.board_entity, Board).cols

    def on_session_started(self, sender, **kwargs):
        spawned = self.reset_board()
        logger.debug("Board seeded with %d tiles", len(spawned))

    def reset_board(self) -> List[Tuple[int, int]]:
        return seed_rows(self.world, self.initial_rows, self._rng)
