"""Game state resource describing the active high-level screen."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class GameMode(Enum):
    """High-level screens that decide which systems accept input."""
    MENU = auto()
    PLAYING = auto()


@dataclass
class GameState:
    """Singleton component storing the currently active screen.

    ``input_guard_press_id`` names the mouse press that caused the last screen
    change so the new screen does not also react to it.
    """
    mode: GameMode = GameMode.MENU
    input_guard_press_id: Optional[int] = None


@dataclass
class HighScore:
    """Best score reached since the process started."""
    best: int = 0
