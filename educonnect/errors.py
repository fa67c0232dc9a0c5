"""Service result type and error taxonomy."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure categories returned by services."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTH = "auth"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    DEPENDENCY = "dependency"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 400,
    ErrorKind.AUTH: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DEPENDENCY: 500,
}


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of a service operation."""

    success: bool
    value: T | None = None
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, value: Any = None) -> "ServiceResult":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str) -> "ServiceResult":
        return cls(success=False, error=error, kind=kind)


def http_error(result: ServiceResult) -> HTTPException:
    """Convert a failed result into the HTTPException a router raises."""
    kind = result.kind or ErrorKind.DEPENDENCY
    return HTTPException(status_code=kind.status_code, detail=result.error or "Request failed")
