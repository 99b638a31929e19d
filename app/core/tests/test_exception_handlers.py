"""
Tests for the API exception handler and error payloads.
"""

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from core.exception_handlers import api_exception_handler
from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    StorageError,
    ValidationError,
)


class ThreadDetailView:
    """Stand-in view; the handler only reads its class name."""


def handle(exc):
    return api_exception_handler(exc, {"view": ThreadDetailView()})


# =============================================================================
# TestErrorPayload
# =============================================================================


class TestErrorPayload:
    def test_to_dict_includes_details_when_present(self):
        error = NotFoundError(
            "Chat not found", error_code="THREAD_NOT_FOUND", details={"chat_id": "abc"}
        )

        assert error.to_dict() == {
            "error": "Chat not found",
            "error_code": "THREAD_NOT_FOUND",
            "details": {"chat_id": "abc"},
        }

    def test_to_dict_omits_empty_details(self):
        assert ConflictError("Already exists").to_dict() == {
            "error": "Already exists",
            "error_code": "CONFLICT",
        }

    def test_str_carries_code(self):
        assert str(ValidationError("Bad input")) == "[VALIDATION_ERROR] Bad input"

    def test_default_status_per_class(self):
        assert BaseApplicationError("x").http_status == 500
        assert ValidationError("x").http_status == 400
        assert NotFoundError("x").http_status == 404
        assert StorageError("x").http_status == 500
        assert ExternalServiceError("x").http_status == 502


# =============================================================================
# TestApiExceptionHandler
# =============================================================================


class TestApiExceptionHandler:
    def test_application_error_uses_its_status(self):
        response = handle(NotFoundError("Chat not found", error_code="THREAD_NOT_FOUND"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {"error": "Chat not found", "error_code": "THREAD_NOT_FOUND"}

    def test_database_error_becomes_storage_error(self, caplog):
        """
        Unexpected database failures reach clients as a stable 500 body.

        Why it matters: Driver messages can leak schema details and are
        useless to the mobile client.
        """
        response = handle(DatabaseError("relation chat_thread does not exist"))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data["error_code"] == "STORAGE_ERROR"
        assert "chat_thread" not in response.data["error"]
        assert "Database failure in ThreadDetailView" in caplog.text

    def test_drf_exceptions_keep_default_rendering(self):
        response = handle(NotAuthenticated())

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "detail" in response.data

    def test_unrelated_exceptions_are_left_to_django(self):
        assert handle(RuntimeError("boom")) is None
