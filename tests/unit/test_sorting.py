"""
Unit tests for sort parsing.
Every sortable field must map to a column, and unknown fields must be rejected.
"""

import pytest

from library_service.api.sorting import (
    BOOK_SORT_FIELD_MAP,
    SortField,
    SortOrder,
    parse_sort,
)


def test_every_sort_field_has_a_column() -> None:
    assert set(BOOK_SORT_FIELD_MAP) == set(SortField)


@pytest.mark.parametrize("raw_field", ["id", "Title", "AUTHOR", "year", "genre"])
def test_parse_sort_accepts_known_fields_case_insensitively(raw_field: str) -> None:
    parsed = parse_sort(field=raw_field)
    assert parsed.field.value == raw_field.lower()
    assert parsed.order is SortOrder.ASC


def test_parse_sort_descending_only_for_exact_desc() -> None:
    assert parse_sort(field="title", order="desc").order is SortOrder.DESC
    assert parse_sort(field="title", order="DESC").order is SortOrder.ASC
    assert parse_sort(field="title", order="sideways").order is SortOrder.ASC


def test_parse_sort_builds_order_by_clause() -> None:
    parsed = parse_sort(field="title", order="desc")
    assert parsed.order_by_clause == "b.title DESC"
    assert parsed.as_text == "title:desc"


@pytest.mark.parametrize(
    "raw_field",
    ["bogus", "", None, " year ", "title ", "title; DROP TABLE books"],
)
def test_parse_sort_rejects_unknown_fields(raw_field: str | None) -> None:
    with pytest.raises(ValueError, match="Invalid sort field"):
        parse_sort(field=raw_field)
