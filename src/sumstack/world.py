import itertools
import random

from esper import World
from .events.bus import EventBus
from sumstack.components.game_state import GameMode, GameState, HighScore


def create_world(
    event_bus: EventBus,
    initial_mode: GameMode = GameMode.MENU,
    *,
    rng: random.Random | None = None,
) -> World:
    """Create the process-wide world.

    The world outlives individual play sessions: the state entity carries the
    current screen and the high score, sessions come and go as entities.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "tile_ids", itertools.count(1))

    state_entity = world.create_entity()
    world.add_component(state_entity, GameState(mode=initial_mode))
    world.add_component(state_entity, HighScore())
    return world
