from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Fixed grid slot of a cell entity. Row 0 is the top (danger zone)."""
    row: int
    col: int
