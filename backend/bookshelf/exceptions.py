"""
Bookshelf Backend — Error Taxonomy
====================================

What:  The closed set of error categories the API can answer with, the single
       category → HTTP status mapping, and the typed exceptions that carry them.
Why:   Handlers never pick status codes for failures themselves. They raise a
       typed error and the centralized handlers in main.py translate it.
How:   Every exception carries an `ErrorType`, a user-facing message and an
       optional context dict (logged; only echoed back for client errors).
Who:   Raised by controllers, services and middleware; caught by main.py.

Exception Hierarchy:
    BookshelfError (base)
    ├── ValidationError            → VALIDATION_ERROR      400
    ├── InvalidPasswordError       → INVALID_PASSWORD      403
    ├── NotFoundError              → NOT_FOUND             404
    ├── EmailAlreadyTakenError     → EMAIL_ALREADY_TAKEN   422
    ├── UnprocessableEntityError   → UNPROCESSABLE_ENTITY  422
    ├── RateLimitExceededError     → RATE_LIMIT_EXCEEDED   429
    ├── DatabaseError              → DATABASE_ERROR        500
    └── NotImplementedFeatureError → NOT_IMPLEMENTED       501

    Anything that is not a BookshelfError is answered as SERVER_ERROR (500).
"""

from enum import Enum
from typing import Any, Dict, Optional, Type


class ErrorType(str, Enum):
    """Closed enumeration of failure categories. The value is the wire code."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    NOT_FOUND = "NOT_FOUND"
    EMAIL_ALREADY_TAKEN = "EMAIL_ALREADY_TAKEN"
    UNPROCESSABLE_ENTITY = "UNPROCESSABLE_ENTITY"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    DATABASE_ERROR = "DATABASE_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


_STATUS_BY_TYPE: Dict[ErrorType, int] = {
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.INVALID_PASSWORD: 403,
    ErrorType.NOT_FOUND: 404,
    ErrorType.EMAIL_ALREADY_TAKEN: 422,
    ErrorType.UNPROCESSABLE_ENTITY: 422,
    ErrorType.RATE_LIMIT_EXCEEDED: 429,
    ErrorType.DATABASE_ERROR: 500,
    ErrorType.SERVER_ERROR: 500,
    ErrorType.NOT_IMPLEMENTED: 501,
}

_DEFAULT_MESSAGES: Dict[ErrorType, str] = {
    ErrorType.VALIDATION_ERROR: "Validation failed",
    ErrorType.INVALID_PASSWORD: "INVALID_PASSWORD",
    ErrorType.NOT_FOUND: "The requested resource was not found",
    ErrorType.EMAIL_ALREADY_TAKEN: "Email already exists",
    ErrorType.UNPROCESSABLE_ENTITY: "The request could not be processed",
    ErrorType.RATE_LIMIT_EXCEEDED: "Rate limit exceeded",
    ErrorType.DATABASE_ERROR: "A database error occurred. Please try again later.",
    ErrorType.SERVER_ERROR: "An unexpected error occurred. Please try again or contact support.",
    ErrorType.NOT_IMPLEMENTED: "This feature is not implemented yet",
}


def status_for(error_type: ErrorType) -> int:
    """The one place where an error category becomes an HTTP status code."""
    return _STATUS_BY_TYPE.get(error_type, 500)


def is_server_error(error_type: ErrorType) -> bool:
    return status_for(error_type) >= 500


class BookshelfError(Exception):
    """
    Base exception for all Bookshelf application errors.

    Attributes:
        error_type: Category from the closed ErrorType enumeration
        message:    User-facing error description (safe to return in API response)
        context:    Additional debug info (logged; returned only for 4xx errors)
    """

    error_type: ErrorType = ErrorType.SERVER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or _DEFAULT_MESSAGES[self.error_type]
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return status_for(self.error_type)


class ValidationError(BookshelfError):
    """
    Raised when client input fails a business validation rule.

    Schema-level problems (malformed JSON, wrong field types) are caught by
    FastAPI first and translated into this same category by main.py, so the
    client sees one error shape for every kind of bad input.
    """

    error_type = ErrorType.VALIDATION_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidPasswordError(BookshelfError):
    """Supplied password does not match the stored hash (login, password change)."""

    error_type = ErrorType.INVALID_PASSWORD


class NotFoundError(BookshelfError):
    """
    Raised when a lookup by a natural key (e.g. email at login) finds nothing.

    Lookups by id report UNPROCESSABLE_ENTITY instead; see controllers.
    """

    error_type = ErrorType.NOT_FOUND


class EmailAlreadyTakenError(BookshelfError):
    """Registration or update would give two users the same email."""

    error_type = ErrorType.EMAIL_ALREADY_TAKEN


class UnprocessableEntityError(BookshelfError):
    """
    The request was well-formed but could not be applied.

    When: the target user does not exist, or the service layer reported that
    a create/update/delete did not happen.
    """

    error_type = ErrorType.UNPROCESSABLE_ENTITY


class NotImplementedFeatureError(BookshelfError):
    """Route exists but the behaviour behind it is switched off or not built."""

    error_type = ErrorType.NOT_IMPLEMENTED


class DatabaseError(BookshelfError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. Driver errors
        (SQL text, constraint names) are kept in `context` and logged only.
    """

    error_type = ErrorType.DATABASE_ERROR


class RateLimitExceededError(BookshelfError):
    """Client exceeded the per-IP request rate limit."""

    error_type = ErrorType.RATE_LIMIT_EXCEEDED

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


_ERROR_CLASSES: Dict[ErrorType, Type[BookshelfError]] = {
    ErrorType.VALIDATION_ERROR: ValidationError,
    ErrorType.INVALID_PASSWORD: InvalidPasswordError,
    ErrorType.NOT_FOUND: NotFoundError,
    ErrorType.EMAIL_ALREADY_TAKEN: EmailAlreadyTakenError,
    ErrorType.UNPROCESSABLE_ENTITY: UnprocessableEntityError,
    ErrorType.DATABASE_ERROR: DatabaseError,
    ErrorType.NOT_IMPLEMENTED: NotImplementedFeatureError,
}


def error_responder(
    error_type: ErrorType,
    message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> BookshelfError:
    """
    Build the typed exception for a category.

    Never raises. Categories without a dedicated class fall back to the base
    class with the category attached, so the mapping in status_for still holds.

    Usage:
        raise error_responder(ErrorType.VALIDATION_ERROR, "Email is required")
    """
    error_class = _ERROR_CLASSES.get(error_type)
    if error_class is not None:
        return error_class(message=message, context=context)

    error = BookshelfError(message=message or _DEFAULT_MESSAGES[error_type], context=context)
    error.error_type = error_type
    return error
