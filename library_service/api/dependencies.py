# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the database client and book service are created once and shared through injection.
# Tests replace these factories through `app.dependency_overrides`.

from __future__ import annotations

from functools import lru_cache

from library_service.api.api_config import ApiConfig, get_api_config
from library_service.api.db_access import DatabaseClient
from library_service.api.services.book_service import BookService


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    return DatabaseClient(database_url=config.database_url)


@lru_cache(maxsize=1)
def get_book_service() -> BookService:
    config = get_api_config()
    db_client = get_database_client()
    return BookService(config=config, db=db_client)


def get_config() -> ApiConfig:
    return get_api_config()
