"""DDL helpers for the book record table and the optional request log table."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, Integer, MetaData, String, Table, func
from sqlalchemy.engine import Engine


def books_table(metadata: MetaData, table_name: str = "books") -> Table:
    """Describe the book record table on the given metadata."""

    return Table(
        table_name,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("title", String, nullable=False),
        Column("author", String, nullable=False),
        Column("year", Integer, nullable=False),
        Column("genre", String, nullable=False),
    )


def request_log_table(metadata: MetaData, table_name: str = "api_request_log") -> Table:
    """One row per handled HTTP request, written when request logging is enabled."""

    return Table(
        table_name,
        metadata,
        Column("request_id", String, nullable=False),
        Column("path", String, nullable=False),
        Column("method", String, nullable=False),
        Column("status_code", Integer, nullable=False),
        Column("duration_ms", Float, nullable=False),
        Column("created_at", DateTime, server_default=func.current_timestamp()),
    )


def apply_books_ddl(engine: Engine, table_name: str = "books") -> None:
    """Create the book record table if it does not exist yet."""

    metadata = MetaData()
    books_table(metadata, table_name)
    metadata.create_all(engine, checkfirst=True)


def apply_request_log_ddl(engine: Engine, table_name: str = "api_request_log") -> None:
    metadata = MetaData()
    request_log_table(metadata, table_name)
    metadata.create_all(engine, checkfirst=True)
