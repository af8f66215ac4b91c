"""
DevCamper API - Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions, one per error kind the API reports.
How:   Each exception carries a client-safe message, an HTTP status code and
       an optional context dict. The global handler registered in main.py
       turns them into `{"success": false, "error": message}`.
Who:   Raised by services, the query pipeline, dependencies and middleware.

Exception Hierarchy:
    DevCamperError (base)           → 500
    ├── ValidationError             → 400 Bad Request
    ├── UnauthorizedError           → 401 Unauthorized
    ├── NotFoundError               → 404 Not Found
    ├── RateLimitExceededError      → 429 Too Many Requests
    └── UpstreamError               → 500 Internal Server Error
        ├── DatabaseError
        ├── FileStorageError
        └── GeocodingError

The context dict is logged server-side and never returned to the client.
"""

from typing import Any, Dict, Optional


class DevCamperError(Exception):
    """
    Base exception for all DevCamper application errors.

    Attributes:
        message:     User-facing error description (safe to return in API response)
        context:     Additional debug info (logged but NOT returned to client)
        status_code: HTTP status the global handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DevCamperError):
    """
    Raised when client input fails validation.

    When:  Missing credentials, duplicate unique values, bad upload type or
           size, filter values that cannot be cast to the field type.
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


class UnauthorizedError(DevCamperError):
    """
    Raised when credentials or a bearer token are rejected.

    The message is the same whether the email is unknown or the password is
    wrong, so responses do not reveal which accounts exist.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Not authorized to access this route",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(DevCamperError):
    """
    Raised when a requested resource does not exist.

    When:  Lookup by id returns nothing, or the id is not a valid identifier.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} not found with id of {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(DevCamperError):
    """Raised when a client exceeds the per-IP request rate limit."""

    status_code = 429

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


class UpstreamError(DevCamperError):
    """
    Raised when a collaborator (database, file store, geocoder) fails.

    The request fails as a whole; nothing is retried.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An upstream service failed. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(UpstreamError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the SQL error is
    only logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(UpstreamError):
    """Raised when writing an uploaded file to the upload directory fails."""

    def __init__(
        self,
        message: str = "Problem with file upload",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class GeocodingError(UpstreamError):
    """Raised when the geocoding provider is unreachable or answers with an error."""

    def __init__(
        self,
        message: str = "Geocoding service is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
