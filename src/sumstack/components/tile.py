from dataclasses import dataclass

@dataclass(slots=True)
class NumberTile:
    """Numbered tile held by a cell entity.

    ``tile_id`` travels with the tile when gravity or injection moves it so
    presentation can follow a tile across cells; game rules only look at
    position and value. Empty cells keep their last data but are inactive.
    """
    value: int = 0
    tile_id: int = 0
    is_new: bool = False
