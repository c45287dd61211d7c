# This file defines the book record endpoints under the versioned API path.
# It exists so clients can list, read, create, replace, delete, search, and sort books.
# Service results are unwrapped at this boundary into status codes and JSON bodies.
# The static `/search` and `/sort` routes are declared before `/{book_id}` so they match first.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path, Query, Request, Response, status

from library_service.api.dependencies import get_book_service
from library_service.api.error_handlers import APIError, unwrap_result
from library_service.api.schemas.book_schemas import (
    INT32_MAX,
    INT32_MIN,
    BookCreate,
    BookRead,
    BookUpdate,
)
from library_service.api.schemas.common import ErrorResponse
from library_service.api.services.book_service import BookService
from library_service.api.sorting import parse_sort

router = APIRouter(
    prefix="/books",
    tags=["books"],
    responses={500: {"model": ErrorResponse}},
)
BookServiceDep = Annotated[BookService, Depends(get_book_service)]
BookId = Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)]


@router.get("", response_model=list[BookRead])
def list_books(service: BookServiceDep) -> list[dict[str, Any]]:
    return unwrap_result(service.list_books()) or []


@router.get(
    "/search",
    response_model=list[BookRead],
    responses={404: {"model": ErrorResponse}},
)
def search_books(
    service: BookServiceDep,
    author: str | None = Query(default=None),
    year: int | None = Query(default=None, ge=INT32_MIN, le=INT32_MAX),
) -> list[dict[str, Any]]:
    """Filter by author substring and/or exact year; an empty match is a 404."""

    return unwrap_result(service.search_books(author=author, year=year)) or []


@router.get(
    "/sort",
    response_model=list[BookRead],
    responses={400: {"model": ErrorResponse}},
)
def sort_books(
    service: BookServiceDep,
    field: str | None = Query(default=None),
    order: str = Query(default="asc"),
) -> list[dict[str, Any]]:
    try:
        sort_spec = parse_sort(field=field, order=order)
    except ValueError as exc:
        raise APIError(
            status_code=400,
            error_code="INVALID_SORT_FIELD",
            message=str(exc),
        ) from exc

    return unwrap_result(service.sort_books(sort_spec)) or []


@router.get(
    "/{book_id}",
    response_model=BookRead,
    responses={404: {"model": ErrorResponse}},
)
def get_book(book_id: BookId, service: BookServiceDep) -> dict[str, Any] | None:
    return unwrap_result(service.get_book(book_id))


@router.post(
    "",
    response_model=BookRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_book(
    request: Request,
    response: Response,
    service: BookServiceDep,
    payload: Annotated[BookCreate | None, Body()] = None,
) -> dict[str, Any] | None:
    created = unwrap_result(service.create_book(payload))
    if created is not None:
        response.headers["Location"] = str(request.url_for("get_book", book_id=created["id"]))
    return created


@router.put(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def replace_book(book_id: BookId, payload: BookUpdate, service: BookServiceDep) -> Response:
    unwrap_result(service.replace_book(book_id, payload))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
def delete_book(book_id: BookId, service: BookServiceDep) -> Response:
    unwrap_result(service.delete_book(book_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
