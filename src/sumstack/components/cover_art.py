from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class CoverArt:
    """Menu cover image. ``image`` stays None when loading failed (placeholder)."""
    image: Any = None
    loaded: bool = False
