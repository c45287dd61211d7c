# This file implements the book record operations behind the `/books` routes.
# It exists so routers stay transport-focused while SQL and outcome mapping live in one layer.
# Every operation returns a `ServiceResult`; store failures are logged and reported as values.
# Filtering and ordering are pushed into parameterized SQL rather than done in Python.

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from library_service.api.api_config import ApiConfig
from library_service.api.db_access import DatabaseClient
from library_service.api.schemas.book_schemas import BookCreate, BookUpdate
from library_service.api.service_result import ServiceResult
from library_service.api.sorting import SortSpec

LOGGER = logging.getLogger("books")

BOOK_NOT_FOUND = "Book not found"
NO_BOOKS_FOUND = "No books found"
INVALID_BOOK_DATA = "Invalid book data"
ID_MISMATCH = "ID mismatch"

_LIKE_ESCAPE = "\\"


def _like_pattern(value: str) -> str:
    escaped = (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


class BookService:
    """Create, read, update, delete, search, and sort book records."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db
        self.books_table = self.config.books_table_name

    def list_books(self) -> ServiceResult[list[dict[str, Any]]]:
        query = f"""
        SELECT b.id, b.title, b.author, b.year, b.genre
        FROM {self.books_table} b
        ORDER BY b.id ASC
        """
        try:
            rows = self.db.fetch_all(query)
        except SQLAlchemyError as exc:
            LOGGER.error("Error retrieving books: %s", exc)
            return ServiceResult.internal_error()
        return ServiceResult.ok(rows)

    def get_book(self, book_id: int) -> ServiceResult[dict[str, Any]]:
        try:
            row = self._fetch_by_id(book_id)
        except SQLAlchemyError as exc:
            LOGGER.error("Error retrieving book id=%s: %s", book_id, exc)
            return ServiceResult.internal_error()
        if row is None:
            return ServiceResult.not_found(BOOK_NOT_FOUND)
        return ServiceResult.ok(row)

    def create_book(self, payload: BookCreate | None) -> ServiceResult[dict[str, Any]]:
        if payload is None:
            return ServiceResult.validation_error(INVALID_BOOK_DATA)

        query = f"""
        INSERT INTO {self.books_table} (title, author, year, genre)
        VALUES (:title, :author, :year, :genre)
        RETURNING id, title, author, year, genre
        """
        try:
            row = self.db.execute_returning(query, self._field_params(payload))
        except IntegrityError as exc:
            LOGGER.error("Database error while adding book: %s", exc)
            return ServiceResult.internal_error("Database error occurred", error_code="DATABASE_ERROR")
        except SQLAlchemyError as exc:
            LOGGER.error("Error adding book: %s", exc)
            return ServiceResult.internal_error()
        if row is None:
            LOGGER.error("Insert into %s returned no row", self.books_table)
            return ServiceResult.internal_error()
        LOGGER.info("Created book id=%s", row["id"])
        return ServiceResult.ok(row)

    def replace_book(self, book_id: int, payload: BookUpdate) -> ServiceResult[None]:
        if payload.id != book_id:
            return ServiceResult.validation_error(ID_MISMATCH)

        query = f"""
        UPDATE {self.books_table}
        SET title = :title, author = :author, year = :year, genre = :genre
        WHERE id = :book_id
        """
        params = {**self._field_params(payload), "book_id": book_id}
        try:
            updated = self.db.execute(query, params)
            if updated == 1:
                return ServiceResult.ok()
            # Nothing was written: the record is gone or the store refused the write.
            if self._fetch_by_id(book_id) is None:
                return ServiceResult.not_found(BOOK_NOT_FOUND)
        except SQLAlchemyError as exc:
            LOGGER.error("Error updating book id=%s: %s", book_id, exc)
            return ServiceResult.internal_error()

        LOGGER.error("Concurrent modification while updating book id=%s", book_id)
        return ServiceResult.internal_error(
            "Concurrency error occurred", error_code="CONCURRENCY_ERROR"
        )

    def delete_book(self, book_id: int) -> ServiceResult[None]:
        query = f"DELETE FROM {self.books_table} WHERE id = :book_id"
        try:
            deleted = self.db.execute(query, {"book_id": book_id})
        except SQLAlchemyError as exc:
            LOGGER.error("Error deleting book id=%s: %s", book_id, exc)
            return ServiceResult.internal_error()
        if deleted == 0:
            return ServiceResult.not_found(BOOK_NOT_FOUND)
        LOGGER.info("Deleted book id=%s", book_id)
        return ServiceResult.ok()

    def search_books(
        self,
        *,
        author: str | None,
        year: int | None,
    ) -> ServiceResult[list[dict[str, Any]]]:
        where_clauses: list[str] = ["1 = 1"]
        params: dict[str, Any] = {}

        if author:
            where_clauses.append(f"b.author LIKE :author_pattern ESCAPE '{_LIKE_ESCAPE}'")
            params["author_pattern"] = _like_pattern(author)
        if year is not None:
            where_clauses.append("b.year = :year")
            params["year"] = year

        where_sql = " AND ".join(where_clauses)
        query = f"""
        SELECT b.id, b.title, b.author, b.year, b.genre
        FROM {self.books_table} b
        WHERE {where_sql}
        ORDER BY b.id ASC
        """
        try:
            rows = self.db.fetch_all(query, params)
        except SQLAlchemyError as exc:
            LOGGER.error("Error searching books author=%r year=%s: %s", author, year, exc)
            return ServiceResult.internal_error()
        if not rows:
            return ServiceResult.not_found(NO_BOOKS_FOUND)
        return ServiceResult.ok(rows)

    def sort_books(self, sort: SortSpec) -> ServiceResult[list[dict[str, Any]]]:
        query = f"""
        SELECT b.id, b.title, b.author, b.year, b.genre
        FROM {self.books_table} b
        ORDER BY {sort.order_by_clause}, b.id ASC
        """
        try:
            rows = self.db.fetch_all(query)
        except SQLAlchemyError as exc:
            LOGGER.error("Error sorting books by %s: %s", sort.as_text, exc)
            return ServiceResult.internal_error()
        return ServiceResult.ok(rows)

    def _fetch_by_id(self, book_id: int) -> dict[str, Any] | None:
        query = f"""
        SELECT b.id, b.title, b.author, b.year, b.genre
        FROM {self.books_table} b
        WHERE b.id = :book_id
        """
        return self.db.fetch_one(query, {"book_id": book_id})

    @staticmethod
    def _field_params(payload: BookCreate | BookUpdate) -> dict[str, Any]:
        return {
            "title": payload.title,
            "author": payload.author,
            "year": payload.year,
            "genre": payload.genre,
        }
