"""
Bloglist Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by auth helpers and services; caught by global handlers.

Exception Hierarchy:
    BloglistError (base)
    ├── ConfigurationError         → fatal at startup, never served
    ├── ValidationError            → 400 Bad Request
    ├── MalformedIdentifierError   → 400 Bad Request ("malformatted id")
    ├── InvalidCredentialsError    → 401 Unauthorized (login failed)
    ├── InvalidTokenError          → 401 Unauthorized (forged/garbled token)
    ├── UnauthenticatedError       → 401 Unauthorized (no identity)
    ├── ForbiddenError             → 403 Forbidden (not the owner)
    ├── NotFoundError              → 404 Not Found
    ├── ConflictError              → 409 Conflict (duplicate unique field)
    └── DatabaseError              → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class BloglistError(Exception):
    """
    Base exception for all Bloglist application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(BloglistError):
    """
    Raised while wiring the application when required configuration is absent.

    Never reaches a request: `create_app()` lets it propagate so the process
    fails to start.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(BloglistError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, values below minimum length.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "password must be at least 3 characters long",
            "details": {"field": "password"}
        }
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


class MalformedIdentifierError(BloglistError):
    """
    Raised when a path identifier is not a canonical UUID.

    Kept apart from NotFoundError: a garbled id is a client bug, an absent
    id is a normal outcome.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        raw_id: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["raw_id"] = raw_id
        super().__init__(message="malformatted id", context=ctx)
        self.raw_id = raw_id


class InvalidCredentialsError(BloglistError):
    """
    Raised when login fails.

    The message is identical for an unknown username and a wrong password,
    so the response cannot be used to enumerate accounts.
    HTTP:    401 Unauthorized
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="invalid username or password", context=context)


class InvalidTokenError(BloglistError):
    """
    Raised when a presented bearer token fails verification.

    When:    Bad signature, malformed structure, expired, or no account id claim.
    HTTP:    401 Unauthorized; the request never reaches its handler.
    """

    def __init__(
        self,
        reason: str = "token invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason
        super().__init__(message="token invalid", context=ctx)
        self.reason = reason


class UnauthenticatedError(BloglistError):
    """
    Raised when an operation needs an identity and the request has none.
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(BloglistError):
    """
    Raised when an authenticated identity mutates a resource it does not own.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "only the owner may modify this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BloglistError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services turn that None into
    this exception where absence is an error (GET, PUT). DELETE treats absence
    as success and never raises it.
    HTTP:    404 Not Found
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


class ConflictError(BloglistError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Registering a username that is already taken.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        field: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["field"] = field
        super().__init__(message=f"expected `{field}` to be unique", context=ctx)
        self.field = field


class DatabaseError(BloglistError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the underlying
    error type goes into context and the server log only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
