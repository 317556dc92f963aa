"""Per play-through state. The entity is deleted on restart or exit to menu."""
from dataclasses import dataclass
from enum import Enum


class PlayMode(Enum):
    CLASSIC = "classic"
    TIMED = "timed"


class SessionStatus(Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    OVER = "over"


@dataclass
class Session:
    mode: PlayMode
    target: int
    score: int = 0
    status: SessionStatus = SessionStatus.ACTIVE
    new_high_score: bool = False

    @property
    def accepts_input(self) -> bool:
        return self.status == SessionStatus.ACTIVE
