from __future__ import annotations

import random

from esper import World

from sumstack.components.session import Session
from sumstack.constants import POINTS_PER_TILE, TARGET_MAX, TARGET_MIN
from sumstack.events.bus import (
    EVENT_HIGH_SCORE_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_TARGET_CHANGED,
    EventBus,
)
from sumstack.utils.game_state import get_high_score


def draw_target(rng: random.Random) -> int:
    return rng.randint(TARGET_MIN, TARGET_MAX)


def points_for(cleared: int) -> int:
    return POINTS_PER_TILE * max(0, cleared)


def award_points(world: World, event_bus: EventBus, session: Session, cleared: int) -> int:
    """Add the points for ``cleared`` tiles and raise the high score when beaten."""
    delta = points_for(cleared)
    if delta <= 0:
        return 0
    session.score += delta
    event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, delta=delta)
    high = get_high_score(world)
    if session.score > high.best:
        high.best = session.score
        event_bus.emit(EVENT_HIGH_SCORE_CHANGED, high_score=high.best)
    return delta


def roll_target(event_bus: EventBus, session: Session, rng: random.Random) -> int:
    session.target = draw_target(rng)
    event_bus.emit(EVENT_TARGET_CHANGED, target=session.target)
    return session.target
