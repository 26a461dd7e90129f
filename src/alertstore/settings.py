"""Configuration settings for the alertstore service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    snapshot_path: str = "data.json"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_values(self) -> "Settings":
        if not self.snapshot_path or not str(self.snapshot_path).strip():
            raise ValueError("snapshot_path must be configured")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        self.snapshot_path = str(Path(self.snapshot_path))
        self.log_level = self.log_level.upper()
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
