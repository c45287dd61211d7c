# This file wraps database access so the book service can run parameterized SQL.
# Reads use a plain connection; writes run in their own transaction and report affected rows.
# Request log rows are written through a Core insert once the log table is known to exist.

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from sqlalchemy import MetaData, create_engine, insert, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from library_service.common.ddl import request_log_table

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class DatabaseClient:
    """SQLAlchemy engine plus the handful of query shapes the API needs."""

    def __init__(self, *, database_url: str) -> None:
        self._engine: Engine = create_engine(database_url, pool_pre_ping=True)
        self._request_log_ready = False

    @property
    def engine(self) -> Engine:
        return self._engine

    def can_connect(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def table_exists(self, table_name: str) -> bool:
        if not _IDENTIFIER_RE.match(table_name):
            raise ValueError(f"Unsafe SQL identifier: {table_name!r}")
        return inspect(self._engine).has_table(table_name)

    def fetch_all(self, query: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        with self._engine.connect() as connection:
            result = connection.execute(text(query), dict(params or {}))
            return [dict(row) for row in result.mappings()]

    def fetch_one(self, query: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        with self._engine.connect() as connection:
            row = connection.execute(text(query), dict(params or {})).mappings().first()
        return None if row is None else dict(row)

    def execute(self, query: str, params: Mapping[str, Any] | None = None) -> int:
        """Run a write statement in its own transaction and return the affected row count."""

        with self._engine.begin() as connection:
            return connection.execute(text(query), dict(params or {})).rowcount

    def execute_returning(
        self, query: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Run a write statement with a RETURNING clause and return the first row."""

        with self._engine.begin() as connection:
            row = connection.execute(text(query), dict(params or {})).mappings().first()
            return None if row is None else dict(row)

    def log_request(
        self,
        *,
        table_name: str,
        request_id: str,
        path: str,
        method: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        """Append one request log row; a missing log table turns this into a no-op."""

        if not self._request_log_ready:
            if not self.table_exists(table_name):
                return
            self._request_log_ready = True

        table = request_log_table(MetaData(), table_name)
        statement = insert(table).values(
            request_id=request_id,
            path=path,
            method=method,
            status_code=status_code,
            duration_ms=duration_ms,
        )
        with self._engine.begin() as connection:
            connection.execute(statement)
