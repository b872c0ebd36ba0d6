from fastapi import APIRouter, Depends, UploadFile, File
import asyncio
from typing import Optional
import logging

from doggy_delights.storage.s3 import S3Service
from doggy_delights.dependencies import get_s3_service
from doggy_delights.gallery.service import store_image, list_gallery, delete_all_images
from doggy_delights.gallery.models import UploadResponse, GalleryResponse, DeleteResponse
from doggy_delights.exceptions import MissingFileException

log = logging.getLogger(__name__)

router = APIRouter(tags=["doggy-delights"])

@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    file: Optional[UploadFile] = File(None),
    s3: S3Service = Depends(get_s3_service)
):
    """Stores one uploaded dog photo under a generated name."""
    if file is None:
        raise MissingFileException()

    contents = await file.read()
    image = await asyncio.to_thread(store_image, s3, contents)
    return UploadResponse(name=image.identifier, image_url=image.url)

@router.get("/gallery", response_model=GalleryResponse)
def gallery(s3: S3Service = Depends(get_s3_service)):
    """Lists the gallery page."""
    return GalleryResponse(images=list_gallery(s3))

@router.delete("/delete-all", response_model=DeleteResponse)
async def delete_all(s3: S3Service = Depends(get_s3_service)):
    """Deletes every image in the gallery folder."""
    deleted = await delete_all_images(s3)
    if not deleted:
        return DeleteResponse(message="No images to delete")
    return DeleteResponse(message=f"Deleted {deleted} images")
