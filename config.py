# config.py
# Runtime settings resolved from the environment (and .env) once at startup.

import os
from pathlib import Path
from typing import List, Literal

from fastapi import Request
from pydantic import BaseModel, Field


CorruptPolicy = Literal["fallback", "quarantine", "raise"]

VIDEO_MIME_TYPES = [
    "video/mp4",
    "video/webm",
    "video/ogg",
    "video/x-matroska",
    "video/quicktime",
]


class Settings(BaseModel):
    # Storage locations
    data_dir: Path = Path("data")
    upload_dir: Path = Path("uploads")
    static_dir: Path = Path("public")

    # What to do with a JSON document that no longer parses
    corrupt_policy: CorruptPolicy = "fallback"

    # Uploads
    max_upload_bytes: int = 1024 * 1024 * 1024  # 1 GB
    video_mime_types: List[str] = Field(default_factory=lambda: list(VIDEO_MIME_TYPES))

    # HTTP
    front_origins: List[str] = Field(default_factory=lambda: ["*"])
    port: int = 4000
    log_level: str = "INFO"

    @property
    def video_dir(self) -> Path:
        return self.upload_dir / "videos"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables; unset ones keep their default."""
        env = {
            "data_dir": os.getenv("DATA_DIR"),
            "upload_dir": os.getenv("UPLOAD_DIR"),
            "static_dir": os.getenv("STATIC_DIR"),
            "corrupt_policy": os.getenv("CORRUPT_POLICY"),
            "max_upload_bytes": os.getenv("MAX_UPLOAD_BYTES"),
            "port": os.getenv("PORT"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        values = {k: v for k, v in env.items() if v}
        origins = os.getenv("FRONT_ORIGIN")
        if origins:
            values["front_origins"] = [o.strip() for o in origins.split(",") if o.strip()]
        return cls.model_validate(values)


def get_settings(request: Request) -> Settings:
    """FastAPI dependency: the settings the app was started with."""
    return request.app.state.settings
