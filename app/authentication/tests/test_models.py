"""
Tests for the User model and its manager.
"""

import pytest
from django.db import IntegrityError

from authentication.models import User
from authentication.tests.factories import UserFactory


class TestUserManager:
    """Tests for UserManager.create_user() / create_superuser()."""

    def test_create_user_sets_unusable_password(self, db):
        """
        Firebase users never log in with a local password.

        Why it matters: A usable empty password would open the admin login.
        """
        user = User.objects.create_user(firebase_uid="uid-1", email="a@example.com")

        assert user.has_usable_password() is False
        assert user.is_staff is False

    def test_create_user_requires_uid(self, db):
        """The Firebase UID is the identity; it cannot be blank."""
        with pytest.raises(ValueError):
            User.objects.create_user(firebase_uid="", email="a@example.com")

    def test_create_superuser_sets_flags(self, db):
        """Superusers get staff access and a usable password."""
        admin = User.objects.create_superuser(
            firebase_uid="admin-uid", email="admin@example.com", password="s3cret-pass"
        )

        assert admin.is_staff is True
        assert admin.is_superuser is True
        assert admin.check_password("s3cret-pass")

    def test_firebase_uid_is_unique(self, db):
        """Two users cannot share one Firebase identity."""
        UserFactory(firebase_uid="dup")

        with pytest.raises(IntegrityError):
            UserFactory(firebase_uid="dup")


class TestUserDisplayName:
    """Tests for User.display_name."""

    def test_prefers_name(self, db):
        assert UserFactory(name="Ana").display_name == "Ana"

    def test_falls_back_to_email_local_part(self, db):
        user = UserFactory(name="", email="ana.lopez@example.com")

        assert user.display_name == "ana.lopez"

    def test_falls_back_to_unknown_user(self, db, settings):
        """
        A user with neither name nor email shows the generic label.

        Why it matters: Thread lists must always render a name.
        """
        settings.CHAT_UNKNOWN_USER_NAME = "Unknown User"
        user = UserFactory(name="", email="")

        assert user.display_name == "Unknown User"
