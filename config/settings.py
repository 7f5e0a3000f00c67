"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interviews.db")
    STORE_TIMEOUT_S: float = Field(default=5.0, gt=0)

    DEFAULT_DURATION_MINUTES: int = Field(default=10, ge=1)
    MAX_DURATION_MINUTES: int = Field(default=240, ge=1)

    SWEEP_ENABLED: bool = True
    SWEEP_INTERVAL_SECONDS: float = Field(default=60.0, gt=0)

    ADMIN_ROLES: List[str] = Field(default_factory=lambda: ["hr", "admin"])

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
