# This file handles sort parsing for the book listing endpoint.
# Sortable fields form a closed enumeration, and every member maps to exactly one column.
# Unknown fields are rejected here, before any query is built.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SortField(str, Enum):
    ID = "id"
    TITLE = "title"
    AUTHOR = "author"
    YEAR = "year"
    GENRE = "genre"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


BOOK_SORT_FIELD_MAP: dict[SortField, str] = {
    SortField.ID: "b.id",
    SortField.TITLE: "b.title",
    SortField.AUTHOR: "b.author",
    SortField.YEAR: "b.year",
    SortField.GENRE: "b.genre",
}

INVALID_SORT_FIELD_MESSAGE = "Invalid sort field"


@dataclass(frozen=True)
class SortSpec:
    field: SortField
    order: SortOrder

    @property
    def as_text(self) -> str:
        return f"{self.field.value}:{self.order.value}"

    @property
    def order_by_clause(self) -> str:
        return f"{BOOK_SORT_FIELD_MAP[self.field]} {self.order.value.upper()}"


def parse_sort(*, field: str | None, order: str | None = SortOrder.ASC.value) -> SortSpec:
    """Parse a sort field (case-insensitive) and order.

    The order is descending only when it is exactly ``"desc"``; any other value sorts ascending.
    """

    normalized_field = (field or "").lower()
    try:
        sort_field = SortField(normalized_field)
    except ValueError as exc:
        raise ValueError(INVALID_SORT_FIELD_MESSAGE) from exc

    sort_order = SortOrder.DESC if order == SortOrder.DESC.value else SortOrder.ASC
    return SortSpec(field=sort_field, order=sort_order)
