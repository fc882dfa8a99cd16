from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    # Runtime
    environment: str = Field(default="development", validation_alias="REFLECTKIT_ENV")

    # Logging
    log_level: str = Field(default="WARNING", validation_alias="REFLECTKIT_LOG_LEVEL")
    # "json" for structured output, "console" for human-readable dev output.
    log_format: str = Field(default="json", validation_alias="REFLECTKIT_LOG_FORMAT")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return str(v or "WARNING").strip().upper() or "WARNING"

    @field_validator("log_format")
    @classmethod
    def _normalize_format(cls, v: str) -> str:
        fmt = str(v or "json").strip().lower()
        if fmt not in ("json", "console"):
            raise ValueError("REFLECTKIT_LOG_FORMAT must be 'json' or 'console'")
        return fmt

    def to_log_safe_dict(self) -> dict[str, Any]:
        return {
            "environment": self.environment,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# Module-level singleton.
settings = get_settings()
