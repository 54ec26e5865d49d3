from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Any, Generic, TypeVar, Optional

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    UPSTREAM = "upstream"
    PARTIAL_FAILURE = "partial_failure"
    INTERNAL = "internal"


# The single place an error kind becomes an HTTP status.
STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.UPSTREAM: 503,
    ErrorKind.PARTIAL_FAILURE: 207,
    ErrorKind.INTERNAL: 500,
}


class Result(BaseModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None
    code: Optional[str] = None
    details: Optional[Any] = None

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def successful(cls, data: Optional[T] = None):
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        kind: ErrorKind,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        data: Optional[Any] = None,
    ):
        return cls(
            success=False,
            error=error,
            kind=kind,
            code=code,
            details=details,
            data=data,
        )
