"""
Chat-specific exceptions.

All extend core.exceptions so the API exception handler renders them with
their declared status. FanoutError never reaches a client: ChatService
catches and logs it.
"""

from core.exceptions import (
    ExternalServiceError,
    PermissionDeniedError,
    ValidationError,
)


class InvalidIdError(ValidationError):
    """A thread id that is not well formed."""

    default_error_code = "INVALID_ID"


class MissingListingError(ValidationError):
    """A new thread was requested without a listing to attach it to."""

    default_error_code = "LISTING_REQUIRED"


class ForbiddenError(PermissionDeniedError):
    """The caller is authenticated but not a participant of the thread."""

    default_error_code = "NOT_A_PARTICIPANT"


class FanoutError(ExternalServiceError):
    """The channel layer failed to deliver a realtime event."""

    default_error_code = "FANOUT_FAILED"
