# Path: config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for the image store, hashing, thumbnails, fetch pipeline, and logging.

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "PHOTOFLOW_"


class HashSettings(BaseModel):
    """Settings describing how perceptual hashes are computed and compared."""

    hash_size: int = Field(default=8, ge=2, description="Side length of the pHash bit matrix (8 gives 64 bits).")
    similarity_threshold: int = Field(
        default=10, ge=0, description="Maximum Hamming distance at which two hashes count as similar."
    )


class ThumbnailSettings(BaseModel):
    """Settings controlling thumbnail generation during import."""

    max_size: int = Field(default=256, ge=16, description="Longest edge of generated thumbnails in pixels.")
    format: str = Field(default="JPEG", description="Pillow format name used to encode thumbnails.")
    quality: int = Field(default=85, ge=1, le=100, description="Encoder quality for lossy thumbnail formats.")


class FetchSettings(BaseModel):
    """Settings for the asynchronous fetch pipeline."""

    lane_name: str = Field(default="image-rendering", description="Thread name prefix of the decode lane.")
    result_timeout: Optional[float] = Field(
        default=None, description="Seconds scripts wait on a fetch result; None waits indefinitely."
    )


class AppSettings(BaseSettings):
    """Top-level application settings shared across services and scripts.

    Every field can be overridden from the environment with the PHOTOFLOW_
    prefix; nested fields use a double underscore, for example
    ``PHOTOFLOW_HASHING__SIMILARITY_THRESHOLD=4``. Explicit keyword arguments
    take precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    image_folder: Path = Field(default=Path("storage/images"), description="Root folder scanned for imports.")
    database_path: Path = Field(default=Path("storage/db/photoflow.sqlite3"), description="Path to the image store.")
    flush_trailing_group: bool = Field(
        default=True, description="Emit the last accumulated group when building the image list."
    )
    hashing: HashSettings = Field(default_factory=HashSettings)
    thumbnails: ThumbnailSettings = Field(default_factory=ThumbnailSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Instantiate settings from PHOTOFLOW_* environment variables and defaults."""

        return cls()


__all__ = ["AppSettings", "FetchSettings", "HashSettings", "ThumbnailSettings"]
