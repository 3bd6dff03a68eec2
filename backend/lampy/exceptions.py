"""
LAMPY Backend - Custom Exception Hierarchy
==========================================

What:  Application exceptions, one per error class the API reports.
How:   Services raise them; global handlers registered in main.py turn each
       into a JSON body with the matching HTTP status.

Exception Hierarchy:
    LampyError (base)                → 500
    ├── ValidationError              → 400 Bad Request
    ├── AuthenticationError          → 401 Unauthorized
    ├── NotFoundError                → 404 Not Found
    ├── ConflictError                → 409 Conflict
    ├── FileStorageError             → 500 Internal Server Error
    └── DatabaseError                → 500 Internal Server Error

Every error body carries a category and a human-readable message. There are
no codes for sub-causes: an expired token and a forged one look identical.
"""

from typing import Any, Dict, Optional


class LampyError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing description (safe to return in a response)
        context:  Debug details; logged, never returned to the client
    """

    status_code = 500
    category = "internal_server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(LampyError):
    """
    Client input is malformed or missing a required field.

    Raised by services for business-rule checks (bad date format, empty
    rejection reason, empty upload). Pydantic's own request validation
    failures are mapped to the same 400 response in main.py.
    """

    status_code = 400
    category = "validation_error"

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


class AuthenticationError(LampyError):
    """
    Missing, malformed, expired or forged bearer token, or bad credentials.

    The message is deliberately generic. Login uses "Invalid credentials"
    for both an unknown email and a wrong password.
    """

    status_code = 401
    category = "unauthorized"

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(LampyError):
    """
    A user, counsellor, session or verification request does not exist,
    or (for sessions) belongs to somebody else.
    """

    status_code = 404
    category = "not_found"

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ConflictError(LampyError):
    """The request clashes with existing state (duplicate email, already adjudicated)."""

    status_code = 409
    category = "conflict"

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(LampyError):
    """
    Writing or reading an upload failed (disk full, permissions, I/O error).

    The response message stays generic; the path and OS error go to the log.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(LampyError):
    """
    A query or write failed unexpectedly.

    Security Note:
        Clients always get a generic message; SQL, constraint names and
        driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
