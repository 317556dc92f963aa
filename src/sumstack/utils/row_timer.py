from __future__ import annotations

from dataclasses import dataclass, field
from time import monotonic
from typing import Callable


@dataclass(slots=True)
class RowTimer:
    """Cancellable repeating deadline used by Timed mode.

    Remaining time is always derived from a stored deadline on ``clock``
    rather than from counting ticks, so tick jitter never accumulates and a
    pause/resume pair preserves the remainder exactly.

    States:

    * running: ``_deadline`` is set; ``poll`` may fire.
    * paused: the remainder is frozen in ``_remaining``; ``resume`` restarts it.
    * stopped: never started or cancelled; ``poll`` never fires.
    """

    period: float
    clock: Callable[[], float] | None = field(default=None, repr=False)

    _clock: Callable[[], float] = field(init=False, repr=False)
    _deadline: float | None = field(init=False, default=None, repr=False)
    _remaining: float = field(init=False, default=0.0, repr=False)
    _paused: bool = field(init=False, default=False, repr=False)
    _fired: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        if self.period <= 0.0:
            raise ValueError(f"timer period must be positive, got {self.period!r}")
        self._clock = self.clock or monotonic
        self._remaining = float(self.period)

    @property
    def running(self) -> bool:
        return self._deadline is not None

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def fired(self) -> int:
        """Number of expiries reported by ``poll`` since creation."""
        return self._fired

    def start(self) -> None:
        """(Re)arm the timer with a full period."""
        self._paused = False
        self._remaining = float(self.period)
        self._deadline = self._clock() + self._remaining

    def reset(self) -> None:
        """Restore a full period without changing running/paused state."""
        if self._paused:
            self._remaining = float(self.period)
            return
        if self._deadline is None:
            self._remaining = float(self.period)
            return
        self.start()

    def pause(self) -> None:
        if self._deadline is None:
            return
        self._remaining = max(0.0, self._deadline - self._clock())
        self._deadline = None
        self._paused = True

    def resume(self) -> None:
        if not self._paused:
            return
        self._paused = False
        self._deadline = self._clock() + self._remaining

    def cancel(self) -> None:
        """Stop without a pending fire; the last remainder stays readable."""
        if self._deadline is not None:
            self._remaining = max(0.0, self._deadline - self._clock())
        self._deadline = None
        self._paused = False

    def remaining(self) -> float:
        if self._deadline is None:
            return self._remaining
        return max(0.0, self._deadline - self._clock())

    def poll(self) -> bool:
        """Return True once when the deadline has passed and re-arm a full period."""
        if self._deadline is None:
            return False
        now = self._clock()
        if now < self._deadline:
            return False
        self._deadline = now + float(self.period)
        self._fired += 1
        return True
