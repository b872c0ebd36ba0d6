from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing import Annotated, List, Optional
import json

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow",  # tolerate unknown vars if needed
    )

    # Object store
    aws_region: str = "us-east-1"
    s3_bucket: str = "doggy-delights"
    aws_endpoint_url: Optional[str] = None
    external_endpoint: Optional[str] = None
    public_base_url: Optional[str] = None
    presign_expire_seconds: int = 3600

    aws_access_key_id: str = "test"
    aws_secret_access_key: str = "test"

    # Gallery
    gallery_folder: str = "dog-gallery"
    image_format: str = "PNG"
    gallery_max_results: int = 20
    delete_max_results: int = 500
    delete_batch_size: int = 100

    # Server
    app_title: str = "Doggy Delights"
    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: Annotated[List[str], NoDecode] = ["http://localhost:5173"]
    log_level: str = "INFO"

    # Client
    api_base_url: str = "http://localhost:3000"
    random_dog_url: str = "https://dog.ceo/api/breeds/image/random"
    gallery_poll_seconds: float = 5.0

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        """Accepts a JSON list or a comma separated string."""
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

settings = Settings()
