"""
BizTime Backend — Custom Exception Hierarchy
=============================================

What:  Defines application-specific exceptions for the error scenarios of
       the companies and invoices API.
Why:   Custom exceptions carry both a client-safe message and the HTTP status
       that answers them, so the centralized handlers in main.py can translate
       any of them into the same `{"error": {"message", "status"}}` body.
How:   Each exception class carries a message, a status code and an optional
       context dict (logged, never returned).
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    BizTimeError (base)        → 500
    ├── ValidationError        → 400 Bad Request (missing/blank body field)
    ├── NotFoundError          → 404 Not Found (code/id absent)
    ├── ConflictError          → 409 Conflict (unique/foreign key violation)
    └── DatabaseError          → 500 Internal Server Error (store fault)

Design Decision:
    Services raise; they never return error values. The status code lives on
    the exception class, so the boundary matches a single base type and reads
    `exc.status_code` instead of keeping a per-type table.
"""

from typing import Any, Dict, Optional


class BizTimeError(Exception):
    """
    Base exception for all BizTime application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        status_code:  HTTP status the global handler answers with
        context:      Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BizTimeError):
    """
    Raised when client input fails a presence check.

    When:    Blank company name, a name with nothing slugifiable in it.
    HTTP:    400 Bad Request

    Pydantic's RequestValidationError (missing body fields, non-integer
    invoice ids) is answered with the same status by main.py.
    """

    status_code = 400

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


class NotFoundError(BizTimeError):
    """
    Raised when a requested company or invoice does not exist.

    Why a custom exception:
        A query returning zero rows is not an error to SQLAlchemy.
        Services convert the empty result into NotFoundError so the
        global handler can answer 404.

    Message format: "No such company: acme", "No such invoice: 999"
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"No such {resource}"
        if resource_id is not None:
            message = f"No such {resource}: {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(BizTimeError):
    """
    Raised when a write violates a unique or foreign key constraint.

    When:    Creating a company whose slug or name already exists; inserting
             an invoice for a company deleted concurrently.
    HTTP:    409 Conflict
    """

    status_code = 409

    def __init__(
        self,
        message: str = "The request conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BizTimeError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, deadlock, syntax/driver errors.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        The original exception type is kept in context and logged server-side.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
