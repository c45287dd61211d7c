# This file defines the tagged result returned by book service operations.
# Services report validation, not-found, and store failures as values instead of raising.
# The router boundary turns each kind into an HTTP status through `unwrap_result`.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ResultKind(str, Enum):
    OK = "ok"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    kind: ResultKind
    value: T | None = None
    error_code: str | None = None
    message: str | None = None

    @property
    def is_ok(self) -> bool:
        return self.kind is ResultKind.OK

    @classmethod
    def ok(cls, value: T | None = None) -> ServiceResult[T]:
        return cls(kind=ResultKind.OK, value=value)

    @classmethod
    def validation_error(cls, message: str, *, error_code: str = "INVALID_REQUEST") -> ServiceResult[T]:
        return cls(kind=ResultKind.VALIDATION_ERROR, error_code=error_code, message=message)

    @classmethod
    def not_found(cls, message: str, *, error_code: str = "NOT_FOUND") -> ServiceResult[T]:
        return cls(kind=ResultKind.NOT_FOUND, error_code=error_code, message=message)

    @classmethod
    def internal_error(
        cls,
        message: str = "Internal server error",
        *,
        error_code: str = "INTERNAL_SERVER_ERROR",
    ) -> ServiceResult[T]:
        return cls(kind=ResultKind.INTERNAL_ERROR, error_code=error_code, message=message)
