"""Application configuration."""

import os
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Relative directories are resolved against ``root_dir``; unset ones fall
    back to the ``data/`` and ``uploads/photos/`` layout under it.
    """

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    root_dir: Path = Field(default_factory=Path.cwd)
    data_dir: Path = Path("data")
    uploads_dir: Path = Path("uploads")
    photo_dir: Path | None = None
    db_file: Path | None = None
    static_dir: Path | None = None
    landing_page: str = "/tree.html"
    max_files_per_upload: int = Field(default=20, ge=1)
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def resolve_paths(self) -> "Settings":
        root = self.root_dir.resolve()
        self.root_dir = root
        self.data_dir = (root / self.data_dir).resolve()
        self.uploads_dir = (root / self.uploads_dir).resolve()
        self.photo_dir = (root / (self.photo_dir or self.uploads_dir / "photos")).resolve()
        self.db_file = (root / (self.db_file or self.data_dir / "photos.json")).resolve()
        self.static_dir = (root / (self.static_dir or "public")).resolve()
        if self.uploads_dir == root or not self.uploads_dir.is_relative_to(root):
            raise ValueError("uploads_dir must be inside root_dir")
        if not self.photo_dir.is_relative_to(self.uploads_dir):
            raise ValueError("photo_dir must be inside uploads_dir")
        return self

    @property
    def uploads_url_path(self) -> str:
        """URL prefix under which ``uploads_dir`` is served."""
        return "/" + self.uploads_dir.relative_to(self.root_dir).as_posix()
