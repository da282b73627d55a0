from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Centralized application settings leveraging environment overrides.
    """

    app_name: str = "Profile Directory"
    environment: str = Field("local", validation_alias="ENVIRONMENT")
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(8000, ge=1, le=65535)

    # Storage
    storage_backend: Literal["file", "memory"] = "file"
    storage_dir: str = "data"
    storage_slot: str = "profiles"
    media_dir: str = "data/media"
    max_payload_bytes: int = Field(1024 * 1024, ge=1024)  # 1 MB for JSON bodies
    max_image_bytes: int = Field(5 * 1024 * 1024, ge=1024)  # 5 MB
    max_pending_images: int = Field(64, ge=1)
    max_pending_image_bytes: int = Field(64 * 1024 * 1024, ge=1024)
    seed_file: Optional[str] = Field(
        None, description="YAML file of sample profiles loaded into an empty store"
    )

    # Geocoding and tiles
    geocoder_url: str = "https://nominatim.openstreetmap.org/search"
    geocoder_user_agent: str = "profile-directory/1.0"
    geocoder_timeout_seconds: Optional[float] = Field(None, gt=0)
    tile_url_template: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    map_max_zoom: int = Field(19, ge=1, le=22)
    map_default_lat: float = Field(51.505, ge=-90, le=90)
    map_default_lon: float = Field(-0.09, ge=-180, le=180)
    map_default_zoom: int = Field(13, ge=0, le=22)

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
