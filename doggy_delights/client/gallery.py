import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Set

import httpx

from doggy_delights.gallery.models import GalleryImage, GalleryResponse
from doggy_delights.settings import settings

log = logging.getLogger(__name__)

class GalleryView:
    """
    Gallery page state kept in sync with the API by polling.

    mount() queries once right away and then every `interval` seconds until
    unmount(). Unmounting stops the timer; a query already in flight still
    completes and is applied.
    """

    def __init__(
        self,
        api: httpx.AsyncClient,
        interval: Optional[float] = None,
        on_render: Optional[Callable[[List[GalleryImage]], None]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.api = api
        self.interval = interval if interval is not None else settings.gallery_poll_seconds
        self.on_render = on_render
        self.images: List[GalleryImage] = []
        self._sleep = sleep
        self._timer: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

    @property
    def mounted(self) -> bool:
        return self._timer is not None and not self._timer.done()

    async def refresh(self) -> bool:
        try:
            resp = await self.api.get("/gallery")
            resp.raise_for_status()
            images = GalleryResponse.model_validate(resp.json()).images
        except (httpx.HTTPError, ValueError) as e:
            log.error("Error fetching gallery: %s", e)
            return False

        log.debug("Fetched %d images", len(images))
        self.images = images
        if self.on_render:
            self.on_render(images)
        return True

    def _spawn_refresh(self):
        task = asyncio.create_task(self.refresh())
        self._inflight.add(task)
        task.add_done_callback(self._refresh_done)

    def _refresh_done(self, task: asyncio.Task):
        self._inflight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("Gallery refresh failed: %s", exc, exc_info=exc)

    async def _tick(self):
        while True:
            await self._sleep(self.interval)
            self._spawn_refresh()

    def mount(self):
        if self.mounted:
            return
        self._spawn_refresh()
        self._timer = asyncio.create_task(self._tick())

    async def unmount(self):
        if self._timer is None:
            return
        self._timer.cancel()
        try:
            await self._timer
        except asyncio.CancelledError:
            pass
        self._timer = None
