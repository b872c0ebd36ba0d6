import asyncio
import logging
import time
from io import BytesIO
from typing import List, Optional

from PIL import Image, UnidentifiedImageError
from botocore.exceptions import BotoCoreError, ClientError

from doggy_delights.storage.s3 import S3Service
from doggy_delights.gallery.models import GalleryImage, StoredImage, display_name
from doggy_delights.gallery.names import generate_dog_name
from doggy_delights.exceptions import InvalidImageException, StorageException
from doggy_delights.settings import settings

log = logging.getLogger(__name__)

# Modes Pillow can write to PNG/WEBP without conversion
_KEEP_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}

def normalize_image(data: bytes, image_format: Optional[str] = None) -> BytesIO:
    """Re-encodes raw image bytes to the configured output format."""
    fmt = (image_format or settings.image_format).upper()
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageException(f"Invalid image file: {e}")

    if img.mode not in _KEEP_MODES or (fmt == "JPEG" and img.mode != "RGB"):
        img = img.convert("RGB" if fmt == "JPEG" else "RGBA")

    out = BytesIO()
    img.save(out, format=fmt)
    out.seek(0)
    return out

def content_type_for(image_format: str) -> str:
    Image.init()
    return Image.MIME.get(image_format.upper(), "application/octet-stream")

def new_identifier(name: Optional[str] = None, now_ms: Optional[int] = None) -> str:
    """Builds <name>-<epoch ms>. Two uploads in the same millisecond with the same name collide."""
    name = name or generate_dog_name()
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{name}-{now_ms}"

def store_image(s3: S3Service, data: bytes, folder: Optional[str] = None) -> StoredImage:
    """Normalizes an uploaded image and writes it under <folder>/<identifier>."""
    folder = folder or settings.gallery_folder
    fileobj = normalize_image(data)
    identifier = new_identifier()
    key = f"{folder}/{identifier}"

    try:
        url = s3.store(fileobj=fileobj, key=key, content_type=content_type_for(settings.image_format))
    except (BotoCoreError, ClientError) as e:
        log.error("S3 upload failed: %s", e)
        raise StorageException("Failed to upload image")

    log.info("Uploaded image: %s with identifier: %s", url, identifier)
    return StoredImage(identifier=identifier, url=url, asset_id=key)

def list_gallery(s3: S3Service, folder: Optional[str] = None) -> List[GalleryImage]:
    """Lists the newest gallery page in the store's own order."""
    folder = folder or settings.gallery_folder
    try:
        objects = s3.list(prefix=f"{folder}/", max_results=settings.gallery_max_results)
    except (BotoCoreError, ClientError) as e:
        log.error("Error fetching gallery: %s", e)
        raise StorageException("Failed to fetch images")

    return [
        GalleryImage(id=obj["asset_id"], image_url=obj["url"], name=display_name(obj["key"]))
        for obj in objects[:settings.gallery_max_results]
    ]

def chunked(items: List[str], size: int) -> List[List[str]]:
    return [items[i:i + size] for i in range(0, len(items), size)]

async def delete_all_images(s3: S3Service, folder: Optional[str] = None) -> int:
    """
    Deletes every listed gallery object in concurrent batches.

    Returns the number of keys whose deletion was requested. Batches that
    finished before a failing one stay deleted.
    """
    folder = folder or settings.gallery_folder
    try:
        objects = await asyncio.to_thread(
            s3.list, prefix=f"{folder}/", max_results=settings.delete_max_results
        )
        if not objects:
            return 0

        keys = [obj["key"] for obj in objects]
        results = await asyncio.gather(
            *(asyncio.to_thread(s3.delete_batch, batch) for batch in chunked(keys, settings.delete_batch_size))
        )
    except (BotoCoreError, ClientError) as e:
        log.error("Error deleting images: %s", e)
        raise StorageException("Failed to delete images")

    failed = sum(len(errors or []) for errors in results)
    if failed:
        log.warning("Store reported %d keys it could not delete", failed)
    log.info("Deleted %d images", len(keys))
    return len(keys)
