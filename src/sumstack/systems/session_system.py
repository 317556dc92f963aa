"""Session lifecycle: start, restart, pause/resume, game over and exit to menu."""
from __future__ import annotations

import logging
import random

from esper import World

from sumstack.components.game_state import GameMode
from sumstack.components.selection import Selection
from sumstack.components.session import PlayMode, Session, SessionStatus
from sumstack.events.bus import (
    EVENT_EXIT_TO_MENU_REQUEST,
    EVENT_GAME_OVER,
    EVENT_GAME_START_REQUEST,
    EVENT_PAUSE_TOGGLE_REQUEST,
    EVENT_RESTART_REQUEST,
    EVENT_ROW_INJECTION_BLOCKED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_ENDED,
    EVENT_SESSION_STARTED,
    EVENT_STATUS_CHANGED,
    EVENT_TARGET_CHANGED,
    EventBus,
)
from sumstack.utils.game_state import current_session, get_high_score, set_game_mode
from sumstack.utils.scoring import draw_target

logger = logging.getLogger(__name__)


class SessionSystem:
    """Central coordinator for session commands and status transitions.

    A session is one entity carrying ``Session`` and ``Selection``; starting a
    new game or leaving for the menu deletes it outright, so nothing from a
    previous play-through (timer, selection, score) can leak into the next.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self._last_mode: PlayMode | None = None

        self.event_bus.subscribe(EVENT_GAME_START_REQUEST, self._on_start_request)
        self.event_bus.subscribe(EVENT_RESTART_REQUEST, self._on_restart_request)
        self.event_bus.subscribe(EVENT_PAUSE_TOGGLE_REQUEST, self._on_pause_toggle)
        self.event_bus.subscribe(EVENT_EXIT_TO_MENU_REQUEST, self._on_exit_request)
        self.event_bus.subscribe(EVENT_ROW_INJECTION_BLOCKED, self._on_injection_blocked)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_start_request(self, sender, **payload) -> None:
        mode = payload.get("mode")
        if not isinstance(mode, PlayMode):
            logger.debug("Ignoring start request with mode %r", mode)
            return
        self.start_game(mode, press_id=payload.get("press_id"))

    def _on_restart_request(self, sender, **payload) -> None:
        self.restart()

    def _on_pause_toggle(self, sender, **payload) -> None:
        self.toggle_pause()

    def _on_exit_request(self, sender, **payload) -> None:
        self.exit_to_menu()

    def _on_injection_blocked(self, sender, **payload) -> None:
        self._end_game(reason=payload.get("reason", "top_row_occupied"))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start_game(self, mode: PlayMode, *, press_id: int | None = None) -> int:
        self._discard_session(reason="restart")
        set_game_mode(
            self.world, self.event_bus, GameMode.PLAYING, input_guard_press_id=press_id
        )
        session = Session(mode=mode, target=draw_target(self._rng))
        entity = self.world.create_entity(session, Selection())
        self._last_mode = mode
        logger.info("Started %s session (target %d)", mode.value, session.target)
        self.event_bus.emit(EVENT_SESSION_STARTED, entity=entity, mode=mode, target=session.target)
        self.event_bus.emit(EVENT_TARGET_CHANGED, target=session.target)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=0, delta=0)
        return entity

    def restart(self) -> int | None:
        found = current_session(self.world)
        mode = found[1].mode if found is not None else self._last_mode
        if mode is None:
            logger.debug("Restart requested with no previous session")
            return None
        return self.start_game(mode)

    def toggle_pause(self) -> SessionStatus | None:
        found = current_session(self.world)
        if found is None:
            return None
        entity, session = found
        if session.status == SessionStatus.ACTIVE:
            self._set_status(entity, session, SessionStatus.PAUSED)
        elif session.status == SessionStatus.PAUSED:
            self._set_status(entity, session, SessionStatus.ACTIVE)
        else:
            logger.debug("Pause toggle ignored: session is over")
        return session.status

    def exit_to_menu(self) -> None:
        self._discard_session(reason="exit")
        set_game_mode(self.world, self.event_bus, GameMode.MENU)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _end_game(self, *, reason: str) -> None:
        found = current_session(self.world)
        if found is None:
            return
        entity, session = found
        if session.status == SessionStatus.OVER:
            return
        self._set_status(entity, session, SessionStatus.OVER)
        high = get_high_score(self.world)
        session.new_high_score = session.score > 0 and session.score >= high.best
        logger.info(
            "Game over (%s): score=%d high=%d", reason, session.score, high.best
        )
        self.event_bus.emit(
            EVENT_GAME_OVER,
            entity=entity,
            score=session.score,
            high_score=high.best,
            new_high_score=session.new_high_score,
            reason=reason,
        )

    def _set_status(self, entity: int, session: Session, status: SessionStatus) -> None:
        previous = session.status
        if previous == status:
            return
        session.status = status
        logger.debug("Session %d: %s -> %s", entity, previous.value, status.value)
        self.event_bus.emit(EVENT_STATUS_CHANGED, entity=entity, previous=previous, status=status)

    def _discard_session(self, *, reason: str) -> None:
        found = current_session(self.world)
        if found is None:
            return
        entity, session = found
        logger.info("Ending %s session (%s) with score %d", session.mode.value, reason, session.score)
        # Listeners still see the entity (and its timer) while handling the event.
        self.event_bus.emit(EVENT_SESSION_ENDED, entity=entity, reason=reason)
        self.world.delete_entity(entity, immediate=True)
