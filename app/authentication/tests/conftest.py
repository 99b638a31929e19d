"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(user, user_client):
        response = user_client.get('/api/v1/auth/profile/')
        assert response.status_code == 200
"""

from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import (
    FirebasePrincipalFactory,
    UserFactory,
    principal_for,
)


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a basic active user."""
    return UserFactory()


@pytest.fixture
def inactive_user(db):
    """Create a deactivated user."""
    return UserFactory(is_active=False)


@pytest.fixture
def unknown_principal():
    """A verified principal with no User row behind it."""
    return FirebasePrincipalFactory()


# =============================================================================
# Firebase Fixtures
# =============================================================================


@pytest.fixture
def firebase_app():
    """Stand in for the initialized Firebase app."""
    with patch("authentication.firebase.get_firebase_app") as mock_get_app:
        mock_get_app.return_value = object()
        yield mock_get_app


@pytest.fixture
def verify_id_token(firebase_app):
    """Patch firebase_admin's ID token verification."""
    with patch("authentication.firebase.firebase_auth.verify_id_token") as mock_verify:
        yield mock_verify


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user_client(user):
    """API client authenticated as ``user``'s Firebase principal."""
    client = APIClient()
    client.force_authenticate(user=principal_for(user))
    return client


@pytest.fixture
def unknown_principal_client(db, unknown_principal):
    """API client whose principal has not been synced yet."""
    client = APIClient()
    client.force_authenticate(user=unknown_principal)
    return client
