from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Optional

from esper import World

from sumstack.components.cover_art import CoverArt
from sumstack.events.bus import EVENT_COVER_IMAGE_READY, EVENT_TICK, EventBus
from sumstack.services.cover_image import fetch_cover_image

logger = logging.getLogger(__name__)


class CoverImageSystem:
    """Runs the cover image fetch once, off the main thread.

    The worker only hands its result over through a queue; the world is
    touched exclusively from ``on_tick`` on the main thread. Game sessions
    never wait on it.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        loader: Callable[[], Any] = fetch_cover_image,
        background: bool = True,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._loader = loader
        self._background = background
        self._results: queue.Queue = queue.Queue(maxsize=1)
        self._thread: Optional[threading.Thread] = None
        self._started = False
        self.art_entity = world.create_entity(CoverArt())
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        if not self._background:
            self._run()
            return
        self._thread = threading.Thread(target=self._run, name="cover-image", daemon=True)
        self._thread.start()

    def on_tick(self, sender, **kwargs):
        try:
            image = self._results.get_nowait()
        except queue.Empty:
            return
        art = self.world.component_for_entity(self.art_entity, CoverArt)
        art.image = image
        art.loaded = True
        self.event_bus.emit(EVENT_COVER_IMAGE_READY, image=image)

    @property
    def art(self) -> CoverArt:
        return self.world.component_for_entity(self.art_entity, CoverArt)

    def _run(self) -> None:
        try:
            image = self._loader()
        except Exception:
            logger.warning("Cover image provider failed; using placeholder", exc_info=True)
            image = None
        self._results.put(image)
