from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(slots=True)
class Selection:
    """Ordered, duplicate-free list of selected board positions.

    ``reject_until`` holds the clock deadline of a pending overshoot
    feedback window; while it is set the selection is frozen.
    """
    positions: List[Tuple[int, int]] = field(default_factory=list)
    reject_until: Optional[float] = None

    @property
    def rejecting(self) -> bool:
        return self.reject_until is not None

    def contains(self, row: int, col: int) -> bool:
        return (row, col) in self.positions

    def clear(self) -> None:
        self.positions.clear()
        self.reject_until = None
