"""
Base exception classes for application-wide error handling.

Every domain failure raised by a service is a BaseApplicationError subclass.
Each class carries the HTTP status it maps to, so the API layer
(core.exception_handlers) can render it without a lookup table.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError        400 - bad or missing input
    ├── AuthenticationError    401 - credential missing or rejected
    ├── PermissionDeniedError  403 - authenticated but not allowed
    ├── NotFoundError          404 - resource absent
    ├── ConflictError          409 - state conflicts
    ├── StorageError           500 - backing store failure
    └── ExternalServiceError   502 - third-party failures

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError("User not found", error_code="USER_NOT_FOUND")

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.http_status)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, etc.)
        http_status: Status code used when the error reaches the API layer
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Chat not found",
                "error_code": "THREAD_NOT_FOUND",
                "details": {"chat_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails in the service layer.

    Note:
        For request-shape validation use DRF serializers. Use this for
        rules that need the database or business context.
    """

    default_error_code: str = "VALIDATION_ERROR"
    http_status: int = 400


class AuthenticationError(BaseApplicationError):
    """Raised when a credential is missing, malformed, expired or revoked."""

    default_error_code: str = "AUTHENTICATION_FAILED"
    http_status: int = 401


class PermissionDeniedError(BaseApplicationError):
    """Raised when an authenticated caller may not act on a resource."""

    default_error_code: str = "PERMISSION_DENIED"
    http_status: int = 403


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        user = User.objects.filter(firebase_uid=uid).first()
        if not user:
            raise NotFoundError(
                "User not found",
                error_code="USER_NOT_FOUND",
                details={"uid": uid},
            )
    """

    default_error_code: str = "NOT_FOUND"
    http_status: int = 404


class ConflictError(BaseApplicationError):
    """Raised when an operation conflicts with current resource state."""

    default_error_code: str = "CONFLICT"
    http_status: int = 409


class StorageError(BaseApplicationError):
    """
    Raised when the database fails underneath a service operation.

    Wraps django.db.DatabaseError (timeouts, lost connections, lock
    failures). The original exception is chained as __cause__; its text
    is logged but never returned to clients.
    """

    default_error_code: str = "STORAGE_ERROR"
    http_status: int = 500


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Log the original error for debugging but don't expose internal
    details to clients.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    http_status: int = 502
