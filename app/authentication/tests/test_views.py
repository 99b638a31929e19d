"""
Tests for authentication API views.
"""

from rest_framework import status

from authentication.models import User


SYNC_USER_URL = "/api/v1/auth/sync-user/"
PROFILE_URL = "/api/v1/auth/profile/"


# =============================================================================
# TestSyncUserView
# =============================================================================


class TestSyncUserView:
    """Tests for POST /api/v1/auth/sync-user/."""

    def test_creates_user_and_returns_201(self, unknown_principal_client, unknown_principal):
        """
        Syncing an unknown principal creates its User.

        Why it matters: This is the first call the client makes after sign-up.
        """
        response = unknown_principal_client.post(SYNC_USER_URL)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["firebaseUID"] == unknown_principal.uid
        assert User.objects.filter(firebase_uid=unknown_principal.uid).exists()

    def test_existing_user_returns_200(self, user_client, user):
        """Re-syncing an existing user is not a creation."""
        response = user_client.post(SYNC_USER_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == user.pk

    def test_requires_authentication(self, api_client, db):
        """Anonymous callers are refused."""
        response = api_client.post(SYNC_USER_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# TestProfileView
# =============================================================================


class TestProfileView:
    """Tests for GET/PATCH /api/v1/auth/profile/."""

    def test_get_returns_current_user(self, user_client, user):
        """The profile endpoint returns the caller's record."""
        response = user_client.get(PROFILE_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["email"] == user.email
        assert response.data["profileImageUrl"] == user.profile_image_url

    def test_get_for_unsynced_principal_is_404(self, unknown_principal_client):
        """
        A principal without a User row gets 404.

        Why it matters: The client uses this to trigger sync-user.
        """
        response = unknown_principal_client.get(PROFILE_URL)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "USER_NOT_FOUND"

    def test_patch_updates_push_token_and_name(self, user_client, user):
        """Users can register a device push token and rename themselves."""
        response = user_client.patch(
            PROFILE_URL,
            {"name": "Landlord Lee", "pushToken": "ExponentPushToken[abc]"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.name == "Landlord Lee"
        assert user.push_token == "ExponentPushToken[abc]"

    def test_patch_rejects_invalid_avatar_url(self, user_client):
        """Avatar must be a URL."""
        response = user_client.patch(
            PROFILE_URL, {"profileImageUrl": "not a url"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
