from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from esper import World

from sumstack.components.session import PlayMode, Session
from sumstack.components.tile import NumberTile
from sumstack.events.bus import EventBus
from sumstack.systems.board import BoardSystem
from sumstack.systems.board_ops import next_tile_id, set_row
from sumstack.systems.match_resolution import MatchResolutionSystem
from sumstack.systems.mode_scheduler_system import ModeSchedulerSystem
from sumstack.systems.row_injection_system import RowInjectionSystem
from sumstack.systems.selection_system import SelectionSystem
from sumstack.systems.session_system import SessionSystem
from sumstack.utils.game_state import current_session
from sumstack.world import create_world


class FakeClock:
    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def advance(self, amount: float) -> None:
        self.value += amount

    def __call__(self) -> float:
        return self.value


@dataclass
class GameHarness:
    bus: EventBus
    world: World
    clock: FakeClock
    board: BoardSystem
    session: SessionSystem
    selection: SelectionSystem
    resolution: Optional[MatchResolutionSystem] = None
    scheduler: Optional[ModeSchedulerSystem] = None
    injection: Optional[RowInjectionSystem] = None
    events: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)

    def record(self, *names: str) -> None:
        for name in names:
            bucket = self.events.setdefault(name, [])
            self.bus.subscribe(name, lambda sender, _bucket=bucket, **payload: _bucket.append(payload))

    def current(self) -> Session:
        found = current_session(self.world)
        assert found is not None, "Expected an active session"
        return found[1]

    def session_entity(self) -> int:
        found = current_session(self.world)
        assert found is not None, "Expected an active session"
        return found[0]


def build_game(
    *,
    seed: int = 7,
    resolve: bool = True,
    schedule: bool = True,
    feedback_delay: float = 0.4,
    period: float = 15.0,
) -> GameHarness:
    """World plus the core game systems, wired to one bus with a fake clock."""
    bus = EventBus()
    rng = random.Random(seed)
    world = create_world(bus, rng=rng)
    clock = FakeClock()
    harness = GameHarness(
        bus=bus,
        world=world,
        clock=clock,
        board=BoardSystem(world, bus, rng=rng),
        session=SessionSystem(world, bus, rng=rng),
        selection=SelectionSystem(world, bus, feedback_delay=feedback_delay, clock=clock),
    )
    if resolve:
        harness.resolution = MatchResolutionSystem(world, bus, rng=rng)
    if schedule:
        harness.scheduler = ModeSchedulerSystem(world, bus, period=period, clock=clock)
        harness.injection = RowInjectionSystem(world, bus, rng=rng)
    return harness


def set_grid(world: World, grid: Sequence[Sequence[Optional[int]]]) -> None:
    """Overwrite the whole board, row 0 first; None leaves a cell empty."""
    for row, values in enumerate(grid):
        set_row(
            world,
            row,
            [NumberTile(value=v, tile_id=next_tile_id(world)) if v is not None else None for v in values],
        )


def start(harness: GameHarness, mode: PlayMode = PlayMode.CLASSIC, *, target: int | None = None) -> Session:
    harness.session.start_game(mode)
    session = harness.current()
    if target is not None:
        session.target = target
    return session
