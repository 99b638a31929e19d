"""
DRF exception handler that renders domain errors.

Wired through REST_FRAMEWORK["EXCEPTION_HANDLER"]. DRF's own exceptions
(authentication, throttling, parse errors) keep their default rendering;
BaseApplicationError subclasses render as their to_dict() payload with the
status they declare; an unhandled DatabaseError renders as a StorageError.
"""

import logging

from django.db import DatabaseError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError, StorageError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Translate exceptions raised by API views into HTTP responses."""
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    view_name = view.__class__.__name__ if view else "unknown"

    if isinstance(exc, DatabaseError):
        logger.exception(f"Database failure in {view_name}: {exc}")
        exc = StorageError("A storage error occurred. Please try again.")

    if isinstance(exc, BaseApplicationError):
        if exc.http_status >= 500:
            logger.error(f"{view_name} failed: {exc}")
        else:
            logger.info(f"{view_name} rejected request: {exc}")
        return Response(exc.to_dict(), status=exc.http_status)

    return None
