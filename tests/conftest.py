"""
Shared test configuration.
Required environment variables are seeded at import time because the API app is built on import.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_DEFAULTS = {
    "ENV": "test",
    "LOG_LEVEL": "INFO",
    "DATABASE_URL": "sqlite://",
}

for _key, _value in TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _value)

from library_service.api.db_access import DatabaseClient  # noqa: E402
from library_service.common.ddl import apply_books_ddl  # noqa: E402


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    for key, value in TEST_ENV_DEFAULTS.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Iterator[DatabaseClient]:
    """A real database client on a throwaway SQLite file with the books table created."""

    db = DatabaseClient(database_url=f"sqlite:///{tmp_path / 'books.db'}")
    apply_books_ddl(db.engine)
    try:
        yield db
    finally:
        db.engine.dispose()
