"""
State Snapshot
==============

Read-only view of the engine handed to presentation after each transition.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from esper import World

from sumstack.components.game_state import GameMode
from sumstack.components.session import PlayMode, SessionStatus
from sumstack.systems.board_ops import active_tile_map, board_dimensions, selection_total
from sumstack.utils.game_state import current_selection, current_session, get_game_state, get_high_score
from sumstack.utils.row_timer import RowTimer

Cell = Optional[int]


@dataclass(frozen=True)
class GameSnapshot:
    screen: GameMode
    rows: int
    cols: int
    # Row-major; row 0 is the top (danger zone). None marks an empty cell.
    values: Tuple[Tuple[Cell, ...], ...]
    tile_ids: Tuple[Tuple[Cell, ...], ...]
    new_tiles: Tuple[Tuple[int, int], ...]
    selection: Tuple[Tuple[int, int], ...]
    selection_total: int
    rejecting: bool
    target: Optional[int]
    score: int
    high_score: int
    new_high_score: bool
    mode: Optional[PlayMode]
    status: Optional[SessionStatus]
    time_remaining: Optional[float]
    time_limit: Optional[float]

    @property
    def in_session(self) -> bool:
        return self.status is not None

    @property
    def danger(self) -> bool:
        """True when the top row already holds a tile (next injection loses)."""
        return bool(self.values) and any(v is not None for v in self.values[0])


def build_snapshot(world: World) -> GameSnapshot:
    state = get_game_state(world)
    screen = state.mode if state is not None else GameMode.MENU
    high = get_high_score(world)
    dims = board_dimensions(world) or (0, 0)
    rows, cols = dims
    tiles = active_tile_map(world)

    values = tuple(
        tuple(tiles[(r, c)].value if (r, c) in tiles else None for c in range(cols))
        for r in range(rows)
    )
    tile_ids = tuple(
        tuple(tiles[(r, c)].tile_id if (r, c) in tiles else None for c in range(cols))
        for r in range(rows)
    )
    new_tiles = tuple(sorted(pos for pos, tile in tiles.items() if tile.is_new))

    found = current_session(world)
    selection = current_selection(world)
    selected = tuple(selection.positions) if selection is not None else ()
    time_remaining: float | None = None
    time_limit: float | None = None
    if found is not None:
        try:
            timer = world.component_for_entity(found[0], RowTimer)
        except KeyError:
            timer = None
        if timer is not None:
            time_remaining = timer.remaining()
            time_limit = timer.period

    session = found[1] if found is not None else None
    return GameSnapshot(
        screen=screen,
        rows=rows,
        cols=cols,
        values=values,
        tile_ids=tile_ids,
        new_tiles=new_tiles,
        selection=selected,
        selection_total=selection_total(world, selected) if selected else 0,
        rejecting=bool(selection is not None and selection.rejecting),
        target=session.target if session is not None else None,
        score=session.score if session is not None else 0,
        high_score=high.best,
        new_high_score=bool(session is not None and session.new_high_score),
        mode=session.mode if session is not None else None,
        status=session.status if session is not None else None,
        time_remaining=time_remaining,
        time_limit=time_limit,
    )
