"""
Notes API: Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the error kinds the API reports.
Why:   Services raise these; the exception handlers registered in main.py turn
       each one into the uniform error envelope with the right status code.
How:   Each exception class carries a message, an optional context dict and the
       machine-readable `code` it is reported under.

Exception Hierarchy:
    NotesApiError (base)
    ├── BadRequestError     → 400 BAD_REQUEST (malformed input, missing body)
    ├── ValidationError     → 400 VALIDATION_ERROR (a field breaks a rule)
    ├── NotFoundError       → 404 NOT_FOUND
    └── StorageError        → 500 INTERNAL_SERVER_ERROR (generic message only)

METHOD_NOT_ALLOWED has no exception class: the router raises Starlette's
HTTPException(405) and main.py converts it.
"""

import json
from typing import Any, Dict, Optional


def _json_encodable(value: Any) -> bool:
    try:
        json.dumps(value, allow_nan=False)
    except (TypeError, ValueError):
        return False
    return True


class NotesApiError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned unless a subclass says so)
    """

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(NotesApiError):
    """
    Raised when the request itself is unusable.

    When:    Missing body, body that is not a JSON object, empty path id,
             missing search query.
    HTTP:    400 Bad Request
    """

    code = "BAD_REQUEST"
    status_code = 400

    def __init__(
        self,
        message: str = "Bad request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(NotesApiError):
    """
    Raised when a single field fails a stated rule.

    Attributes:
        field:   Name of the offending field ("title", "content")
        reason:  Short rule identifier: "required", "too_long", "invalid_type"
        value:   The rejected value, echoed back in the response details when
                 it is not None and JSON can represent it

    Example response:
        {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Title must be 200 characters or less",
                "details": {"field": "title", "value": "aaaa..."}
            }
        }
    """

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        reason: Optional[str] = None,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        if reason:
            ctx["reason"] = reason
        super().__init__(message=message, context=ctx)
        self.field = field
        self.reason = reason
        self.value = value

    @property
    def details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {}
        if self.field is not None:
            details["field"] = self.field
        if self.value is not None and _json_encodable(self.value):
            details["value"] = self.value
        return details


class NotFoundError(NotesApiError):
    """
    Raised when a referenced note id does not exist.

    HTTP:    404 Not Found, details carry the id.

    The storage layer signals absence with None (absence is a valid outcome
    there); the service layer converts it into this exception.
    """

    code = "NOT_FOUND"
    status_code = 404

    def __init__(
        self,
        resource: str = "Note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource_id = resource_id


class StorageError(NotesApiError):
    """
    Raised when the storage collaborator cannot complete an operation.

    What:    Connectivity loss, integrity violation or any driver failure
             inside a database-backed store.
    HTTP:    500 Internal Server Error

    Security Note:
        The client always sees the generic "Database operation failed".
        The original error type and operation are kept in `context` and
        logged server-side only.
    """

    def __init__(
        self,
        message: str = "Database operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
