"""
    Upload page state: staging a photo, uploading it with progress, clearing the gallery.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional
import logging
import mimetypes

import httpx

from doggy_delights.client.random_dog import fetch_random_dog_url, download_image
from doggy_delights.gallery.models import GalleryImage, UploadResponse, DeleteResponse, display_name

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
RANDOM_DOG_FILENAME = "DogImage.jpg"

class UploadStatus(str, Enum):
    IDLE = "Idle"
    UPLOADING = "Uploading"
    SUCCESS = "Success"
    ERROR = "Error"

@dataclass
class StagedFile:
    filename: str
    data: bytes
    content_type: str

@dataclass
class UploadTask:
    file: Optional[StagedFile] = None
    progress: int = 0
    status: UploadStatus = UploadStatus.IDLE

def upload_progress(sent: int, total: Optional[int]) -> int:
    if not total:
        return 0
    return round(sent * 100 / total)

class UploadFlow:
    """
    Drives one upload page session against the API.

    `api` talks to the gallery service, `web` fetches from the public dog API.
    `notify` receives the messages a user would see in an alert.
    """

    def __init__(
        self,
        api: httpx.AsyncClient,
        web: Optional[httpx.AsyncClient] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.api = api
        self.web = web or api
        self.notify = notify or (lambda message: log.warning("%s", message))
        self.task = UploadTask()
        self.uploaded: List[GalleryImage] = []
        self.preview_url: Optional[str] = None

    def stage(self, filename: str, data: bytes, content_type: str):
        self.task.file = StagedFile(filename=filename, data=data, content_type=content_type)

    def select_file(self, path):
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        self.stage(path.name, path.read_bytes(), content_type)

    async def fetch_random_dog(self) -> Optional[str]:
        """Stages a random dog photo for a later upload() and returns its URL."""
        try:
            image_url = await fetch_random_dog_url(self.web)
            data = await download_image(self.web, image_url)
        except (httpx.HTTPError, KeyError, ValueError) as e:
            log.error("Error fetching random image: %s", e)
            return None

        self.stage(RANDOM_DOG_FILENAME, data, "image/jpeg")
        self.preview_url = image_url
        return image_url

    def _set_progress(self, sent: int, total: Optional[int]):
        self.task.progress = upload_progress(sent, total)

    async def upload(self) -> Optional[GalleryImage]:
        staged = self.task.file
        if staged is None:
            self.notify("No file selected!")
            return None

        self.task.status = UploadStatus.UPLOADING
        self.task.progress = 0

        # Encode the multipart body up front so its size is known for progress.
        request = self.api.build_request(
            "POST", "/upload", files={"file": (staged.filename, staged.data, staged.content_type)}
        )
        body = request.read()
        total = len(body)

        async def body_chunks():
            sent = 0
            for start in range(0, total, CHUNK_SIZE):
                chunk = body[start:start + CHUNK_SIZE]
                sent += len(chunk)
                self._set_progress(sent, total)
                yield chunk

        try:
            resp = await self.api.post(
                "/upload",
                content=body_chunks(),
                headers={"Content-Type": request.headers["Content-Type"]},
            )
            resp.raise_for_status()
            result = UploadResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            log.error("Upload error: %s", e)
            self.task.status = UploadStatus.ERROR
            self.task.progress = 0
            return None

        self.task.status = UploadStatus.SUCCESS
        self.task.progress = 100
        image = GalleryImage(id=result.name, image_url=result.image_url, name=display_name(result.name))
        self.uploaded.append(image)
        return image

    async def delete_all(self) -> Optional[str]:
        """Clears the remote gallery and resets the page."""
        try:
            resp = await self.api.delete("/delete-all")
            resp.raise_for_status()
            message = DeleteResponse.model_validate(resp.json()).message
        except (httpx.HTTPError, ValueError) as e:
            log.error("Error deleting images: %s", e)
            self.notify("Failed to delete images")
            return None

        self.notify(message)
        self.uploaded = []
        self.preview_url = None
        self.task = UploadTask()
        return message
