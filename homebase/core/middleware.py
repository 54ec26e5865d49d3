from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import time
import uuid
from typing import Sequence, Any, Dict, List

from homebase.schemas.result import ErrorKind, Result
from homebase.core.exception import CustomException, PartialFailureException
from homebase.core.observability import (
    log_structured,
    reset_active_request_id,
    set_active_request_id,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}


def custom_exception_response(ex: CustomException) -> JSONResponse:
    """Render an application exception into the standard envelope"""
    data = ex.data if isinstance(ex, PartialFailureException) else None
    result = Result.failure(
        error=ex.detail,
        kind=ex.kind,
        code=ex.code,
        details=ex.details,
        data=data,
    )
    return JSONResponse(
        status_code=ex.status_code,
        content=result.model_dump(mode="json"),
        headers=ex.headers,
    )


def validation_error_response(
    ex: ValidationError | RequestValidationError | ResponseValidationError,
) -> JSONResponse:
    result = Result.failure(
        error="Invalid input",
        kind=ErrorKind.VALIDATION,
        details=format_validation_errors(ex.errors()),
    )
    return JSONResponse(status_code=400, content=result.model_dump(mode="json"))


def http_exception_response(ex: StarletteHTTPException) -> JSONResponse:
    """Handle plain HTTP exceptions raised by the framework (404 route, 405 ...)"""
    result = Result.failure(
        error=ex.detail if isinstance(ex.detail, str) else str(ex.detail),
        kind=infer_kind_from_status(ex.status_code),
    )
    return JSONResponse(
        status_code=ex.status_code,
        content=result.model_dump(mode="json"),
        headers=getattr(ex, "headers", None),
    )


def internal_error_response() -> JSONResponse:
    # Don't expose internal error details
    result = Result.failure(error=GENERIC_ERROR_MESSAGE, kind=ErrorKind.INTERNAL)
    return JSONResponse(status_code=500, content=result.model_dump(mode="json"))


def format_validation_errors(errors: Sequence[Any]) -> List[Dict[str, Any]]:
    """Reduce pydantic error entries to location/message pairs"""
    return [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown error"),
            "type": error.get("type", "unknown"),
        }
        for error in errors
    ]


def infer_kind_from_status(status_code: int) -> ErrorKind:
    """Infer error kind from HTTP status code"""
    status_kind_map = {
        400: ErrorKind.VALIDATION,
        401: ErrorKind.AUTHENTICATION,
        403: ErrorKind.AUTHORIZATION,
        404: ErrorKind.NOT_FOUND,
        405: ErrorKind.VALIDATION,
        409: ErrorKind.CONFLICT,
        422: ErrorKind.VALIDATION,
        429: ErrorKind.RATE_LIMITED,
    }
    if status_code in status_kind_map:
        return status_kind_map[status_code]
    elif status_code in (502, 503, 504):
        return ErrorKind.UPSTREAM
    elif 400 <= status_code < 500:
        return ErrorKind.VALIDATION
    return ErrorKind.INTERNAL


class ExceptionHandlingMiddleware(BaseHTTPMiddleware):
    """
    Centralized exception handling middleware for consistent API responses.
    Catches whatever escapes the routing layer and renders it as a Result
    envelope. Exceptions are mapped to a status in exactly one place.
    """

    def __init__(self, app, log_internal_errors: bool = True):
        super().__init__(app)
        self.log_internal_errors = log_internal_errors

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except CustomException as ex:
            return custom_exception_response(ex)
        except (ValidationError, RequestValidationError, ResponseValidationError) as ex:
            return validation_error_response(ex)
        except StarletteHTTPException as ex:
            return http_exception_response(ex)
        except Exception as ex:
            if self.log_internal_errors:
                logger.error(
                    f"Unhandled exception on {request.method} {request.url.path}",
                    exc_info=ex,
                    extra={
                        "path": request.url.path,
                        "method": request.method,
                        "client": request.client.host if request.client else None,
                    },
                )
            return internal_error_response()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id, expose it to log records, echo it back."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-Id", "")[:64] or uuid.uuid4().hex
        request.state.request_id = request_id
        token = set_active_request_id(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            log_structured(
                logging.INFO,
                "request.completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        finally:
            reset_active_request_id(token)
        response.headers["X-Request-Id"] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


def register_exception_handlers(app: FastAPI) -> None:
    """
    Exceptions raised inside routes and dependencies are handled by the
    framework before they reach middleware, so the same renderers are
    registered as exception handlers too.
    """

    @app.exception_handler(CustomException)
    async def _custom(request: Request, ex: CustomException):
        return custom_exception_response(ex)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, ex: RequestValidationError):
        return validation_error_response(ex)

    @app.exception_handler(ValidationError)
    async def _validation(request: Request, ex: ValidationError):
        return validation_error_response(ex)

    @app.exception_handler(StarletteHTTPException)
    async def _http(request: Request, ex: StarletteHTTPException):
        return http_exception_response(ex)
