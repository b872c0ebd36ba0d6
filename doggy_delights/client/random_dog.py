import logging
from typing import Optional

import httpx

from doggy_delights.settings import settings

log = logging.getLogger(__name__)

async def fetch_random_dog_url(http: httpx.AsyncClient, url: Optional[str] = None) -> str:
    """Asks the public dog API for a random image URL."""
    resp = await http.get(url or settings.random_dog_url)
    resp.raise_for_status()
    image_url = resp.json()["message"]
    log.debug("Random dog image %s", image_url)
    return image_url

async def download_image(http: httpx.AsyncClient, url: str) -> bytes:
    resp = await http.get(url, follow_redirects=True)
    resp.raise_for_status()
    return resp.content
