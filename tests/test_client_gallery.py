import asyncio
import logging
import httpx
import pytest

from doggy_delights.client.gallery import GalleryView

GALLERY = {
    "images": [
        {"id": "dog-gallery/Rex-1700000000000", "imageUrl": "http://store/Rex", "name": "Rex"},
        {"id": "dog-gallery/Nova-1700000000001", "imageUrl": "http://store/Nova", "name": "Nova"},
    ]
}


async def settle():
    """Lets spawned refresh tasks run to completion."""
    for _ in range(5):
        await asyncio.sleep(0.01)


class Ticker:
    """Replaces asyncio.sleep so the test decides when an interval has elapsed."""

    def __init__(self):
        self.intervals = []
        self._ticks = asyncio.Queue()

    async def sleep(self, seconds):
        self.intervals.append(seconds)
        await self._ticks.get()

    def tick(self):
        self._ticks.put_nowait(None)


@pytest.mark.asyncio
async def test_polls_once_on_mount_and_once_per_interval():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json=GALLERY)

    ticker = Ticker()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as api:
        view = GalleryView(api, sleep=ticker.sleep)
        view.mount()
        await settle()
        assert calls == ["/gallery"]
        assert [img.name for img in view.images] == ["Rex", "Nova"]

        ticker.tick()
        await settle()
        assert len(calls) == 2

        ticker.tick()
        await settle()
        assert len(calls) == 3

        await view.unmount()
        assert not view.mounted
        ticker.tick()
        await settle()
        assert len(calls) == 3

    assert set(ticker.intervals) == {5.0}


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_list():
    responses = [httpx.Response(200, json=GALLERY), httpx.Response(500, json={"error": "Failed to fetch images"})]

    def handler(request):
        return responses.pop(0)

    renders = []
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as api:
        view = GalleryView(api, on_render=renders.append)
        assert await view.refresh() is True
        assert await view.refresh() is False

    assert len(view.images) == 2
    assert len(renders) == 1


@pytest.mark.asyncio
async def test_each_refresh_replaces_the_list():
    pages = [GALLERY, {"images": []}]

    def handler(request):
        return httpx.Response(200, json=pages.pop(0))

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as api:
        view = GalleryView(api)
        await view.refresh()
        await view.refresh()

    assert view.images == []


@pytest.mark.asyncio
async def test_mount_twice_keeps_one_timer():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=GALLERY)

    ticker = Ticker()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as api:
        view = GalleryView(api, sleep=ticker.sleep)
        view.mount()
        view.mount()
        await settle()
        assert len(calls) == 1
        await view.unmount()


@pytest.mark.asyncio
async def test_against_running_service(asgi_app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=asgi_app), base_url="http://test") as api:
        view = GalleryView(api)
        assert await view.refresh() is True
    assert view.images == []


@pytest.mark.asyncio
async def test_render_failure_is_logged(caplog):
    def handler(request):
        return httpx.Response(200, json=GALLERY)

    def broken_render(images):
        raise RuntimeError("render blew up")

    ticker = Ticker()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as api:
        view = GalleryView(api, on_render=broken_render, sleep=ticker.sleep)
        with caplog.at_level(logging.ERROR, logger="doggy_delights.client.gallery"):
            view.mount()
            await settle()
        await view.unmount()

    assert any(
        "Gallery refresh failed" in r.getMessage() and "render blew up" in r.getMessage()
        for r in caplog.records
    )
