"""
Casework Backend: Exception Hierarchy
=======================================

What:  Application-specific exceptions, each mapped to one HTTP status.
How:   Every exception carries a user-facing message and a context dict.
       Global handlers registered in main.py turn them into JSON error bodies;
       the context is returned as `details` for client errors and only logged
       for server errors.
Who:   Raised by services and core validators; caught by the global handlers.

Exception Hierarchy:
    CaseworkError (base)
    ├── ValidationError             → 400 Bad Request
    │   └── VacationValidationError
    │       ├── DateOrderError      → end date not after / before start date
    │       ├── PastDateError       → vacation would start in the past
    │       └── OverlapError        → collides with another vacation of the helper
    ├── NotFoundError               → 404 Not Found
    ├── RateLimitExceededError      → 429 Too Many Requests
    ├── FileStorageError            → 500 Internal Server Error
    └── DatabaseError               → 500 Internal Server Error
"""

from datetime import date
from typing import Any, Dict, List, Optional


class CaseworkError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CaseworkError):
    """
    Raised when client input fails a business rule.

    HTTP: 400 Bad Request. Schema-level problems (wrong types, missing
    fields) are still reported by FastAPI as 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class VacationValidationError(ValidationError):
    """Base for the three ways a vacation period can be rejected."""

    code = "vacation_invalid"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["code"] = self.code
        super().__init__(message=message, field="from_date", context=ctx)


class DateOrderError(VacationValidationError):
    code = "date_order"

    def __init__(self, from_date: date, to_date: date):
        super().__init__(
            message="End date must be after start date",
            context={"from_date": from_date.isoformat(), "to_date": to_date.isoformat()},
        )


class PastDateError(VacationValidationError):
    code = "past_date"

    def __init__(self, from_date: date, today: date):
        super().__init__(
            message="Vacation cannot start in the past",
            context={"from_date": from_date.isoformat(), "today": today.isoformat()},
        )


class OverlapError(VacationValidationError):
    code = "overlap"

    def __init__(self, conflicting_ids: List[Any]):
        super().__init__(
            message="Vacation period overlaps with existing vacation",
            context={"conflicting_ids": list(conflicting_ids)},
        )
        self.conflicting_ids = list(conflicting_ids)


class NotFoundError(CaseworkError):
    """
    Raised when a requested resource does not exist.

    The service layer converts SQLAlchemy's `None` result into this exception
    so that routes never have to check for missing rows themselves.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(CaseworkError):
    """Raised when a helper document cannot be written, read or removed."""

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(CaseworkError):
    """
    Raised when a query fails unexpectedly.

    The response message is always generic; the context is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(CaseworkError):
    """Raised when a client exceeds the per-IP request budget."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
