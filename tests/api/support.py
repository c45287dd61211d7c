# This file provides shared helpers for API endpoint tests.
# It exists so tests can override service dependencies without touching a shared database.
# The helpers build consistent config objects, fake clients, and scoped TestClient contexts.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from library_service.api.api_config import ApiConfig
from library_service.api.app import app
from library_service.api.dependencies import get_book_service, get_config, get_database_client


def build_test_config() -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Library API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        host="0.0.0.0",
        port=8000,
        environment="test",
        database_url="sqlite://",
        enable_request_logging=False,
        create_tables_on_startup=False,
        allowed_origins=[],
        books_table_name="books",
        request_log_table_name="api_request_log",
        app_version="0.1.0",
    )


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, existing_tables: set[str] | None = None) -> None:
        self._connected = connected
        self._tables = existing_tables if existing_tables is not None else {"books"}

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name in self._tables

    def log_request(self, **_: Any) -> None:
        return None


class FailingDBClient:
    """DB dependency whose every call fails the way a broken store would."""

    def __init__(self, *, integrity_error: bool = False) -> None:
        self.integrity_error = integrity_error
        self.calls: list[str] = []

    def _fail(self, name: str) -> None:
        self.calls.append(name)
        if self.integrity_error:
            raise IntegrityError("INSERT", {}, Exception("constraint violated"))
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    def fetch_all(self, query: str, params: Any = None) -> list[dict[str, Any]]:
        self._fail("fetch_all")
        return []

    def fetch_one(self, query: str, params: Any = None) -> dict[str, Any] | None:
        self._fail("fetch_one")
        return None

    def execute(self, query: str, params: Any = None) -> int:
        self._fail("execute")
        return 0

    def execute_returning(self, query: str, params: Any = None) -> dict[str, Any] | None:
        self._fail("execute_returning")
        return None


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    book_service: Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client
    if book_service is not None:
        app.dependency_overrides[get_book_service] = lambda: book_service

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
