from typing import List
from pydantic import BaseModel, ConfigDict, Field

def display_name(identifier: str) -> str:
    """Strips the folder and the trailing -<timestamp> from an object identifier."""
    file_name = identifier.split("/")[-1]
    return "-".join(file_name.split("-")[:-1])

class StoredImage(BaseModel):
    identifier: str
    url: str
    asset_id: str

    @property
    def name(self) -> str:
        return display_name(self.identifier)

class GalleryImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    image_url: str = Field(alias="imageUrl")
    name: str

class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    image_url: str = Field(alias="imageUrl")

class GalleryResponse(BaseModel):
    images: List[GalleryImage]

class DeleteResponse(BaseModel):
    message: str
