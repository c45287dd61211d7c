"""
Process settings loaded from environment variables.
Only values shared by the whole process live here: the environment label, the log level,
and the connection string for the book store. API-specific knobs live in `api.api_config`.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

REQUIRED_ENV_VARS: Final[tuple[str, ...]] = ("DATABASE_URL",)


class Settings(BaseModel):
    """Typed process configuration."""

    model_config = ConfigDict(extra="ignore")

    ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str


def load_settings(*, load_env: bool = True) -> Settings:
    """Load and validate settings from `.env` and the process environment."""

    if load_env:
        load_dotenv()

    missing = [key for key in REQUIRED_ENV_VARS if not os.getenv(key)]
    if missing:
        raise RuntimeError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Set them in `.env` or the process environment before starting the service."
        )

    present = {key: value for key, value in os.environ.items() if value.strip()}
    try:
        return Settings.model_validate(present)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached accessor for process settings."""

    return load_settings()
