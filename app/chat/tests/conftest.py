"""
Test configuration and fixtures for chat tests.

The standard cast is a renter writing to the owner of a listing, plus a
stranger who belongs to neither side.

Usage:
    def test_example(thread, renter_client):
        response = renter_client.get(f"/api/v1/chat/{thread.pk}/messages/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory, principal_for
from chat.tests.factories import ThreadFactory
from listings.tests.factories import ListingFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def owner(db):
    """User who posted the listing."""
    return UserFactory(name="Olivia Owner")


@pytest.fixture
def renter(db):
    """User asking about the listing."""
    return UserFactory(name="Ravi Renter")


@pytest.fixture
def stranger(db):
    """User outside every conversation in these tests."""
    return UserFactory(name="Sam Stranger")


# =============================================================================
# Listing and Thread Fixtures
# =============================================================================


@pytest.fixture
def listing(owner):
    return ListingFactory(owner=owner, title="Sunny room near campus")


@pytest.fixture
def other_listing(owner):
    return ListingFactory(owner=owner, title="Studio with balcony")


@pytest.fixture
def thread(renter, owner, listing):
    """Active thread between renter and owner, no messages yet."""
    return ThreadFactory(user_a=renter, user_b=owner, listing=listing)


# =============================================================================
# API Client Fixtures
# =============================================================================


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=principal_for(user))
    return client


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def renter_client(renter):
    return _client_for(renter)


@pytest.fixture
def owner_client(owner):
    return _client_for(owner)


@pytest.fixture
def stranger_client(stranger):
    return _client_for(stranger)
