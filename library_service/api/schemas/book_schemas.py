# This file defines book request and response schemas.
# It exists so the JSON shape of a book record is explicit for clients and tests.
# Create payloads may carry an id, which is ignored; update payloads must repeat the path id.
# Integers are bounded to the 32-bit range of the `Integer` columns in `common/ddl.py`.

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

StoreInt = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


class BookFields(BaseModel):
    title: str
    author: str
    year: StoreInt
    genre: str


class BookCreate(BookFields):
    id: StoreInt | None = None


class BookUpdate(BookFields):
    id: StoreInt | None = None


class BookRead(BookFields):
    id: int
