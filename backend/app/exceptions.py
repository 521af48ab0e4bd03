"""
Letter Writer Backend — Custom Exception Hierarchy
====================================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a user-safe message and an optional context dict.
       Global exception handlers (registered in main.py) map them to HTTP
       status codes and a consistent JSON error body.
Who:   Raised by services and dependencies; caught by the global handlers.

Exception Hierarchy:
    LetterWriterError (base)
    ├── ValidationError            → 400 Bad Request
    ├── AuthenticationError        → 401 / 403
    │   ├── MissingTokenError      → 401 (no bearer credential)
    │   └── InvalidTokenError      → 403 (tampered, wrong secret, expired)
    ├── AuthProviderError          → 400 / 401 (Google sign-in failed)
    ├── ForbiddenError             → 403 (ownership mismatch)
    ├── NotFoundError              → 404
    ├── CredentialError            → 401 + redirectUrl (Google access lost)
    │   ├── MissingCredentialError → error="missing_token"
    │   └── ExpiredCredentialError → error="expired_token"
    ├── ServiceUnavailableError    → 503 (Google API disabled)
    ├── RemoteError                → 500 (other Google API failure)
    └── DatabaseError              → 500
"""

from typing import Any, Dict, Optional


class LetterWriterError(Exception):
    """
    Base exception for all Letter Writer application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(LetterWriterError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request. FastAPI's own request validation failures are
             mapped to the same status by the handler in main.py.
    """

    status_code = 400
    error_code = "validation_error"

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


class AuthenticationError(LetterWriterError):
    """Base for session token failures. Raised before any store access."""

    status_code = 401
    error_code = "authentication_error"


class MissingTokenError(AuthenticationError):
    """No `Authorization: Bearer` credential was presented."""

    status_code = 401
    error_code = "missing_session"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(AuthenticationError):
    """
    The bearer credential could not be verified.

    When:    Bad signature, wrong secret, malformed token, missing claims,
             or the token's expiry instant has passed.
    HTTP:    403 Forbidden
    """

    status_code = 403
    error_code = "invalid_session"

    def __init__(
        self,
        message: str = "Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthProviderError(LetterWriterError):
    """
    Google sign-in could not be completed.

    When:    Authorization code missing (400), rejected by Google (401),
             or the profile lacks an email address (400).
    Contract: No User record is created or modified when this is raised.
    """

    error_code = "auth_provider_error"

    def __init__(
        self,
        message: str = "Google authentication failed",
        status_code: int = 401,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class ForbiddenError(LetterWriterError):
    """
    The authenticated user does not own the requested resource.

    HTTP:    403 Forbidden. The response never includes the resource body.
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Not authorized to access this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(LetterWriterError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

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


class CredentialError(LetterWriterError):
    """
    Stored Google credentials cannot be used; the user must reconnect.

    HTTP:    401 with a machine-readable `error` code and a `redirectUrl`
             pointing at the consent endpoint.
    """

    status_code = 401
    error_code = "credential_error"

    def __init__(
        self,
        message: str = "Google access is not available. Please reconnect your Google account.",
        redirect_url: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.redirect_url = redirect_url


class MissingCredentialError(CredentialError):
    """The user has no stored Google access token."""

    error_code = "missing_token"

    def __init__(
        self,
        message: str = (
            "Google Drive access is not available. Please reconnect your Google account."
        ),
        redirect_url: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, redirect_url=redirect_url, context=context)


class ExpiredCredentialError(CredentialError):
    """The access token expired and could not be refreshed, or Google returned invalid_grant."""

    error_code = "expired_token"

    def __init__(
        self,
        message: str = (
            "Your Google authorization has expired. Please reconnect your Google account."
        ),
        redirect_url: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, redirect_url=redirect_url, context=context)


class ServiceUnavailableError(LetterWriterError):
    """
    A Google API needed for the operation is not enabled for the project.

    HTTP:    503 Service Unavailable
    """

    status_code = 503
    error_code = "api_not_enabled"

    def __init__(
        self,
        message: str = "Google Docs API is not enabled",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RemoteError(LetterWriterError):
    """
    Any other Google API failure.

    HTTP:    500. The upstream error text is kept in context and only
             returned to clients in development mode.
    """

    status_code = 500
    error_code = "remote_error"

    def __init__(
        self,
        message: str = "Error creating Google Doc",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(LetterWriterError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500. The message returned to the client is always generic;
             details are logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
