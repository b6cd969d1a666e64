"""App-wide exception hierarchy.

This module provides a unified exception system with automatic HTTP status code
mapping and consistent error response formatting.

Every exception carries a coarse ``error_type`` (the error class), a stable
machine-readable ``code`` and a human ``message``. Domain modules subclass the
classes below and override ``code`` where a more specific reason exists.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class and define their own
    status_code and error_type for consistent API responses.
    """

    status_code: int = 500
    error_type: str = "internal_error"
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        *,
        code: str | None = None,
        details: list[Any] | None = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the public error body."""
        body: dict[str, Any] = {
            "type": self.error_type,
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


# Not found errors (404)
class NotFoundError(AppException):
    """Base class for resource not found errors."""

    status_code = 404
    error_type = "not_found"
    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found", **kwargs: Any):
        super().__init__(message, **kwargs)


# Conflict errors (409)
class ConflictError(AppException):
    """Base class for uniqueness and state-precondition violations."""

    status_code = 409
    error_type = "conflict"
    code = "CONFLICT"

    def __init__(self, message: str = "Resource conflict", **kwargs: Any):
        super().__init__(message, **kwargs)


# Validation errors (400)
class ValidationError(AppException):
    """Base class for malformed or policy-violating input."""

    status_code = 400
    error_type = "validation_error"
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed", **kwargs: Any):
        super().__init__(message, **kwargs)


# Internal errors (500)
class InternalError(AppException):
    """Raised for internal server errors."""

    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str = "An internal error occurred", **kwargs: Any):
        super().__init__(message, **kwargs)
