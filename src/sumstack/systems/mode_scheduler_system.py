from __future__ import annotations

import logging
from typing import Callable

from esper import World

from sumstack.components.session import PlayMode, Session, SessionStatus
from sumstack.constants import TIME_LIMIT
from sumstack.events.bus import (
    EVENT_CLEAR_RESOLVED,
    EVENT_ROW_INJECT_REQUEST,
    EVENT_SESSION_ENDED,
    EVENT_SESSION_STARTED,
    EVENT_STATUS_CHANGED,
    EVENT_TICK,
    EVENT_TIMER_EXPIRED,
    EVENT_TIMER_RESET,
    EventBus,
)
from sumstack.utils.game_state import current_session
from sumstack.utils.row_timer import RowTimer

logger = logging.getLogger(__name__)


class ModeSchedulerSystem:
    """Decides when rows are injected.

    Classic: one injection after every resolved clear.
    Timed: a RowTimer on the session entity fires an injection every
    ``period`` seconds while the session is active; a clear re-arms it.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        period: float = TIME_LIMIT,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.period = float(period)
        self._clock = clock
        self.event_bus.subscribe(EVENT_SESSION_STARTED, self.on_session_started)
        self.event_bus.subscribe(EVENT_SESSION_ENDED, self.on_session_ended)
        self.event_bus.subscribe(EVENT_STATUS_CHANGED, self.on_status_changed)
        self.event_bus.subscribe(EVENT_CLEAR_RESOLVED, self.on_clear_resolved)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_session_started(self, sender, **kwargs):
        entity = kwargs.get("entity")
        if entity is None or kwargs.get("mode") != PlayMode.TIMED:
            return
        timer = RowTimer(period=self.period, clock=self._clock)
        timer.start()
        self.world.add_component(entity, timer)
        self.event_bus.emit(EVENT_TIMER_RESET, period=timer.period, reason="start")

    def on_session_ended(self, sender, **kwargs):
        entity = kwargs.get("entity")
        if entity is None:
            return
        timer = self._timer_for(entity)
        if timer is not None:
            timer.cancel()

    def on_status_changed(self, sender, **kwargs):
        entity = kwargs.get("entity")
        status = kwargs.get("status")
        timer = self._timer_for(entity) if entity is not None else None
        if timer is None:
            return
        if status == SessionStatus.PAUSED:
            timer.pause()
        elif status == SessionStatus.ACTIVE:
            timer.resume()
        elif status == SessionStatus.OVER:
            timer.cancel()

    def on_clear_resolved(self, sender, **kwargs):
        found = current_session(self.world)
        if found is None:
            return
        entity, session = found
        if session.mode == PlayMode.CLASSIC:
            self.event_bus.emit(EVENT_ROW_INJECT_REQUEST, reason="clear")
            return
        timer = self._timer_for(entity)
        if timer is not None:
            timer.reset()
            self.event_bus.emit(EVENT_TIMER_RESET, period=timer.period, reason="clear")

    def on_tick(self, sender, **kwargs):
        found = current_session(self.world)
        if found is None:
            return
        entity, session = found
        if session.mode != PlayMode.TIMED or session.status != SessionStatus.ACTIVE:
            return
        timer = self._timer_for(entity)
        if timer is None or not timer.poll():
            return
        logger.debug("Row timer expired after %.1fs", timer.period)
        self.event_bus.emit(EVENT_TIMER_EXPIRED, period=timer.period)
        self.event_bus.emit(EVENT_ROW_INJECT_REQUEST, reason="timer")
        if self._session_active(entity):
            self.event_bus.emit(EVENT_TIMER_RESET, period=timer.period, reason="expired")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def remaining(self) -> float | None:
        found = current_session(self.world)
        if found is None:
            return None
        timer = self._timer_for(found[0])
        return timer.remaining() if timer is not None else None

    def _timer_for(self, entity: int) -> RowTimer | None:
        try:
            return self.world.component_for_entity(entity, RowTimer)
        except KeyError:
            return None

    def _session_active(self, entity: int) -> bool:
        try:
            session = self.world.component_for_entity(entity, Session)
        except KeyError:
            return False
        return session.status == SessionStatus.ACTIVE
