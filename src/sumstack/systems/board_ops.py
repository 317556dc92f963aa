from __future__ import annotations

import itertools
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from esper import World

from sumstack.components.active_switch import ActiveSwitch
from sumstack.components.board import Board
from sumstack.components.board_position import BoardPosition
from sumstack.components.tile import NumberTile
from sumstack.constants import NUMBER_MAX, NUMBER_MIN

Position = Tuple[int, int]
TileMap = Dict[Position, NumberTile]


class InvalidCoordinate(ValueError):
    """A board coordinate is out of bounds or does not hold a tile."""


class BoardInvariantError(RuntimeError):
    """The board is missing or malformed; indicates a programming fault."""


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    value: int
    tile_id: int


@dataclass(frozen=True, slots=True)
class GameOverSignal:
    """Returned by ``inject_row`` instead of mutating a board whose top row is occupied."""
    blocked: Tuple[Position, ...]
    reason: str = "top_row_occupied"


# ----------------------------------------------------------------------
# Board lookup
# ----------------------------------------------------------------------

def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, board in world.get_component(Board):
        return board.rows, board.cols
    return None


def in_bounds(world: World, row: int, col: int) -> bool:
    dims = board_dimensions(world)
    if not dims:
        return False
    rows, cols = dims
    return 0 <= row < rows and 0 <= col < cols


def cell_index(world: World) -> Dict[Position, int]:
    return {(pos.row, pos.col): entity for entity, pos in world.get_component(BoardPosition)}


def get_entity_at(world: World, row: int, col: int) -> int | None:
    for entity, position in world.get_component(BoardPosition):
        if position.row == row and position.col == col:
            return entity
    return None


def tile_at(world: World, row: int, col: int) -> NumberTile | None:
    """Return a copy of the tile at (row, col), or None for an empty or unknown cell."""
    entity = get_entity_at(world, row, col)
    if entity is None:
        return None
    if not world.component_for_entity(entity, ActiveSwitch).active:
        return None
    return _copy_tile(world.component_for_entity(entity, NumberTile))


def active_tile_map(world: World) -> TileMap:
    """Return mapping of occupied positions to copies of their tiles."""
    mapping: TileMap = {}
    for entity, position in world.get_component(BoardPosition):
        try:
            switch: ActiveSwitch = world.component_for_entity(entity, ActiveSwitch)
            if not switch.active:
                continue
            tile: NumberTile = world.component_for_entity(entity, NumberTile)
        except KeyError:
            continue
        mapping[(position.row, position.col)] = _copy_tile(tile)
    return mapping


def row_tiles(world: World, row: int) -> List[NumberTile | None]:
    rows, cols = _require_dimensions(world)
    if not 0 <= row < rows:
        raise InvalidCoordinate(f"row {row} outside board of {rows} rows")
    tiles = active_tile_map(world)
    return [tiles.get((row, col)) for col in range(cols)]


def value_grid(world: World) -> List[List[int | None]]:
    """Row-major grid of tile values (None for empty cells)."""
    rows, cols = _require_dimensions(world)
    tiles = active_tile_map(world)
    grid: List[List[int | None]] = []
    for r in range(rows):
        grid.append([tiles[(r, c)].value if (r, c) in tiles else None for c in range(cols)])
    return grid


def selection_total(world: World, positions: Iterable[Position]) -> int:
    tiles = active_tile_map(world)
    return sum(tiles[pos].value for pos in positions if pos in tiles)


# ----------------------------------------------------------------------
# Tile creation
# ----------------------------------------------------------------------

def next_tile_id(world: World) -> int:
    sequence = getattr(world, "tile_ids", None)
    if sequence is None:
        sequence = itertools.count(1)
        setattr(world, "tile_ids", sequence)
    return next(sequence)


def random_tile(world: World, rng: random.Random | None = None, *, is_new: bool = False) -> NumberTile:
    rng = _resolve_rng(world, rng)
    return NumberTile(
        value=rng.randint(NUMBER_MIN, NUMBER_MAX),
        tile_id=next_tile_id(world),
        is_new=is_new,
    )


def create_board_cells(world: World, rows: int, cols: int) -> int:
    """Create the Board entity plus one empty cell entity per slot."""
    if rows <= 0 or cols <= 0:
        raise BoardInvariantError(f"invalid board size {rows}x{cols}")
    board_entity = world.create_entity(Board(rows=rows, cols=cols))
    for r in range(rows):
        for c in range(cols):
            world.create_entity(BoardPosition(row=r, col=c), ActiveSwitch(active=False), NumberTile())
    return board_entity


def clear_board(world: World) -> None:
    for entity, _ in world.get_component(BoardPosition):
        world.component_for_entity(entity, ActiveSwitch).active = False


def seed_rows(world: World, count: int, rng: random.Random | None = None) -> List[Position]:
    """Empty the board, then fill the bottom ``count`` rows with random tiles."""
    rows, cols = _require_dimensions(world)
    count = max(0, min(count, rows))
    clear_board(world)
    spawned: List[Position] = []
    for r in range(rows - count, rows):
        set_row(world, r, [random_tile(world, rng) for _ in range(cols)])
        spawned.extend((r, c) for c in range(cols))
    return spawned


# ----------------------------------------------------------------------
# Mutations
# ----------------------------------------------------------------------

def remove_tiles(world: World, coords: Iterable[Position]) -> List[Tuple[Position, NumberTile]]:
    """Empty every coordinate, returning what was removed.

    All coordinates are validated before any cell changes so a bad request
    leaves the board untouched.
    """
    index = cell_index(world)
    targets: List[Tuple[Position, int]] = []
    seen: set[Position] = set()
    for pos in coords:
        pos = (int(pos[0]), int(pos[1]))
        entity = index.get(pos)
        if entity is None:
            raise InvalidCoordinate(f"{pos} is outside the board")
        if pos in seen or not world.component_for_entity(entity, ActiveSwitch).active:
            raise InvalidCoordinate(f"{pos} holds no tile")
        seen.add(pos)
        targets.append((pos, entity))
    removed: List[Tuple[Position, NumberTile]] = []
    for pos, entity in targets:
        removed.append((pos, _copy_tile(world.component_for_entity(entity, NumberTile))))
        world.component_for_entity(entity, ActiveSwitch).active = False
    return removed


def set_row(world: World, row: int, tiles: Sequence[NumberTile | None]) -> None:
    """Bulk-replace one row; ``None`` entries become empty cells."""
    rows, cols = _require_dimensions(world)
    if not 0 <= row < rows:
        raise InvalidCoordinate(f"row {row} outside board of {rows} rows")
    if len(tiles) != cols:
        raise BoardInvariantError(f"row needs {cols} cells, got {len(tiles)}")
    index = cell_index(world)
    for col, tile in enumerate(tiles):
        entity = index.get((row, col))
        if entity is None:
            raise BoardInvariantError(f"missing cell entity at {(row, col)}")
        if tile is None:
            world.component_for_entity(entity, ActiveSwitch).active = False
            continue
        _check_value(tile.value)
        _write_tile(world, entity, tile)


def compute_gravity_moves(tiles: TileMap, rows: int, cols: int) -> List[GravityMove]:
    """Per column, pack tiles against the bottom row keeping their order.

    Pure: works on a position->tile map and never crosses columns.
    """
    moves: List[GravityMove] = []
    for col in range(cols):
        filled_rows = [row for row in range(rows) if (row, col) in tiles]
        first_target = rows - len(filled_rows)
        for offset, original_row in enumerate(filled_rows):
            target_row = first_target + offset
            if original_row == target_row:
                continue
            tile = tiles[(original_row, col)]
            moves.append(GravityMove(
                source=(original_row, col),
                target=(target_row, col),
                value=tile.value,
                tile_id=tile.tile_id,
            ))
    return moves


def apply_gravity_moves(world: World, moves: List[GravityMove]) -> None:
    if not moves:
        return
    index = cell_index(world)
    # Read every source before writing so chained moves in a column cannot clobber each other.
    carried: List[Tuple[int, NumberTile]] = []
    for move in moves:
        src_entity = index.get(move.source)
        dst_entity = index.get(move.target)
        if src_entity is None or dst_entity is None:
            raise BoardInvariantError(f"gravity move {move.source}->{move.target} leaves the board")
        if not world.component_for_entity(src_entity, ActiveSwitch).active:
            raise BoardInvariantError(f"gravity move from empty cell {move.source}")
        carried.append((dst_entity, _copy_tile(world.component_for_entity(src_entity, NumberTile))))
        world.component_for_entity(src_entity, ActiveSwitch).active = False
    for dst_entity, tile in carried:
        _write_tile(world, dst_entity, tile)


def compact_board(world: World) -> List[GravityMove]:
    rows, cols = _require_dimensions(world)
    moves = compute_gravity_moves(active_tile_map(world), rows, cols)
    apply_gravity_moves(world, moves)
    return moves


def top_row_blockers(world: World) -> List[Position]:
    return sorted(pos for pos in active_tile_map(world) if pos[0] == 0)


def inject_row(world: World, rng: random.Random | None = None) -> List[Position] | GameOverSignal:
    """Shift every row up by one and fill the bottom row with fresh tiles.

    An occupied top row means the shift would push tiles off the board; the
    board is left untouched and a ``GameOverSignal`` is returned instead.
    """
    rows, cols = _require_dimensions(world)
    blockers = top_row_blockers(world)
    if blockers:
        return GameOverSignal(blocked=tuple(blockers))
    previous = [row_tiles(world, r) for r in range(rows)]
    for r in range(rows - 1):
        shifted = previous[r + 1]
        for tile in shifted:
            if tile is not None:
                tile.is_new = False
        set_row(world, r, shifted)
    fresh = [random_tile(world, rng, is_new=True) for _ in range(cols)]
    set_row(world, rows - 1, fresh)
    return [(rows - 1, c) for c in range(cols)]


def validate_board(world: World) -> None:
    """Raise BoardInvariantError if the board breaks its structural invariants."""
    rows, cols = _require_dimensions(world)
    index = cell_index(world)
    if len(index) != rows * cols:
        raise BoardInvariantError(f"expected {rows * cols} cells, found {len(index)}")
    for pos, tile in active_tile_map(world).items():
        if not (0 <= pos[0] < rows and 0 <= pos[1] < cols):
            raise BoardInvariantError(f"cell {pos} outside board")
        _check_value(tile.value)


# ----------------------------------------------------------------------
# Internals
# ----------------------------------------------------------------------

def _require_dimensions(world: World) -> Tuple[int, int]:
    dims = board_dimensions(world)
    if not dims:
        raise BoardInvariantError("Board component not found")
    return dims


def _resolve_rng(world: World, rng: random.Random | None) -> random.Random:
    if rng is not None:
        return rng
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    return random.Random()


def _check_value(value: int) -> None:
    if not NUMBER_MIN <= value <= NUMBER_MAX:
        raise BoardInvariantError(f"tile value {value} outside [{NUMBER_MIN}, {NUMBER_MAX}]")


def _copy_tile(tile: NumberTile) -> NumberTile:
    return NumberTile(value=tile.value, tile_id=tile.tile_id, is_new=tile.is_new)


def _write_tile(world: World, entity: int, tile: NumberTile) -> None:
    target: NumberTile = world.component_for_entity(entity, NumberTile)
    target.value = tile.value
    target.tile_id = tile.tile_id
    target.is_new = tile.is_new
    world.component_for_entity(entity, ActiveSwitch).active = True
