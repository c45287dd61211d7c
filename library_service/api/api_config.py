# This file defines runtime settings for the book records API.
# Environment label and database URL come from the process `Settings`; the rest is read from
# `API_*` variables and coerced by pydantic. Table names are checked as safe SQL identifiers
# because the service interpolates them into its queries.

from __future__ import annotations

import os
import re
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from library_service.common.settings import load_settings

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# ApiConfig field -> environment variable.
_ENV_FIELDS: dict[str, str] = {
    "api_name": "API_NAME",
    "api_version_path": "API_VERSION_PATH",
    "schema_version": "API_SCHEMA_VERSION",
    "host": "API_HOST",
    "port": "API_PORT",
    "enable_request_logging": "API_ENABLE_REQUEST_LOGGING",
    "create_tables_on_startup": "API_CREATE_TABLES_ON_STARTUP",
    "books_table_name": "API_BOOKS_TABLE_NAME",
    "request_log_table_name": "API_REQUEST_LOG_TABLE_NAME",
    "app_version": "APP_VERSION",
}


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Library Book Records API"
    api_version_path: str = "/api/v1"
    schema_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = Field(default=8000, gt=0, lt=65536)
    environment: str = "local"
    database_url: str
    enable_request_logging: bool = False
    create_tables_on_startup: bool = False
    allowed_origins: list[str] = Field(default_factory=list)
    books_table_name: str = "books"
    request_log_table_name: str = "api_request_log"
    app_version: str = "0.1.0"

    @field_validator("api_version_path")
    @classmethod
    def validate_api_version_path(cls, value: str) -> str:
        parts = [part for part in value.split("/") if part]
        if not value.startswith("/") or len(parts) < 2 or not parts[-1].startswith("v"):
            raise ValueError("api_version_path must look like '/api/v1'.")
        return value.rstrip("/")

    @field_validator("books_table_name", "request_log_table_name")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Unsafe SQL identifier: {value!r}")
        return value

    def api_version_label(self) -> str:
        return self.api_version_path.rsplit("/", 1)[-1]


def _split_origins(raw: str | None) -> list[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Build API configuration from process settings and `API_*` environment variables."""

    settings = load_settings(load_env=load_env)

    values: dict[str, object] = {
        field: os.environ[name]
        for field, name in _ENV_FIELDS.items()
        if os.getenv(name, "").strip()
    }
    values["environment"] = settings.ENV
    values["database_url"] = settings.DATABASE_URL
    values["allowed_origins"] = _split_origins(os.getenv("API_ALLOWED_ORIGINS"))

    try:
        return ApiConfig.model_validate(values)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid API configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
