from fastapi import HTTPException
from typing import Any, Dict, Optional

from homebase.schemas.result import ErrorKind, STATUS_BY_KIND


class CustomException(HTTPException):
    """Base exception class for all custom application exceptions"""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=status_code or STATUS_BY_KIND[kind],
            detail=message,
            headers=headers,
        )
        self.kind = kind
        self.code = code
        self.details = details


class ValidationException(CustomException):
    """Exception raised for malformed or missing input"""

    def __init__(self, message: str = "Invalid input", details: Optional[Any] = None):
        super().__init__(message=message, kind=ErrorKind.VALIDATION, details=details)


class AuthenticationException(CustomException):
    """Exception raised when no verified identity is present"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            kind=ErrorKind.AUTHENTICATION,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationException(CustomException):
    """Exception raised when an authenticated caller lacks access"""

    def __init__(
        self,
        message: str = "You do not have permission to perform this action.",
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(
            message=message,
            kind=ErrorKind.AUTHORIZATION,
            code=code,
            details=details,
        )


class CSRFException(AuthorizationException):
    """Exception raised when the CSRF token is missing or invalid"""

    def __init__(self, message: str = "Invalid or expired CSRF token"):
        super().__init__(message=message, code="CSRF_INVALID")


class UpgradeRequiredException(AuthorizationException):
    """Exception raised when the household plan does not include a feature"""

    def __init__(self, feature: str, required_plan: Optional[str], current_plan: str):
        super().__init__(
            message=f"Your plan does not include '{feature}'. Upgrade required.",
            code="UPGRADE_REQUIRED",
            details={
                "feature": feature,
                "required_plan": required_plan,
                "current_plan": current_plan,
            },
        )


class QuotaExceededException(AuthorizationException):
    """Exception raised when the monthly action quota is used up"""

    def __init__(self, message: str = "Monthly action quota exceeded"):
        super().__init__(message=message, code="QUOTA_EXCEEDED")


class ResourceNotFoundException(CustomException):
    """
    Exception raised when a resource is missing or belongs to another
    household. Both cases share one message so that existence is not leaked.
    """

    def __init__(self, resource_name: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"{resource_name} not found",
            kind=ErrorKind.NOT_FOUND,
        )


class DuplicateResourceException(CustomException):
    """Exception raised when attempting to create a resource that already exists"""

    def __init__(self, resource_name: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"{resource_name} already exists.",
            kind=ErrorKind.CONFLICT,
        )


class RateLimitException(CustomException):
    """Exception raised when a caller exceeds its request window"""

    def __init__(self, limit: int, reset_at: int, retry_after: int):
        super().__init__(
            message="Too many requests. Please try again later.",
            kind=ErrorKind.RATE_LIMITED,
            code="RATE_LIMITED",
            details={"retry_after": retry_after},
            headers={
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(reset_at),
                "Retry-After": str(retry_after),
            },
        )


class UpstreamException(CustomException):
    """Exception raised when the database or a provider fails"""

    def __init__(
        self,
        message: str = "A dependent service is unavailable. Please try again later.",
        status_code: int = 503,
    ):
        super().__init__(message=message, kind=ErrorKind.UPSTREAM, status_code=status_code)


class PartialFailureException(CustomException):
    """
    Raised when the first step of a multi-step operation was applied and a
    later step failed. Carries the partial result back to the caller.
    """

    def __init__(self, message: str, data: Any, details: Optional[Any] = None):
        super().__init__(
            message=message,
            kind=ErrorKind.PARTIAL_FAILURE,
            code="PARTIAL_FAILURE",
            details=details,
        )
        self.data = data


class InternalServerException(CustomException):
    """Exception raised for internal server errors"""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message=message, kind=ErrorKind.INTERNAL)
