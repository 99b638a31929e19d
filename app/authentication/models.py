"""
Authentication models.

User is the identity record behind every chat participant. The mobile
client signs in with Firebase; the backend stores one User per Firebase
UID, created or refreshed through the sync-user endpoint.

Related files:
    - managers.py: UserManager keyed on firebase_uid
    - firebase.py: ID token verification
    - services.py: PrincipalService (principal -> User)
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Marketplace user.

    Fields:
        firebase_uid: Firebase Authentication UID, the login identifier
        email: Email copied from the Firebase token
        name: Display name
        profile_image_url: Avatar URL (uploaded elsewhere)
        push_token: Device push token, consumed by the notification sender
        is_active: Whether this account may use the API
        is_staff: Whether the user can access Django admin
    """

    firebase_uid = models.CharField(
        max_length=128,
        unique=True,
        help_text="Firebase Authentication UID",
    )
    email = models.EmailField(
        max_length=254,
        blank=True,
        db_index=True,
        help_text="Email address reported by Firebase",
    )
    name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Display name shown to other users",
    )
    profile_image_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Public URL of the user's avatar",
    )
    push_token = models.CharField(
        max_length=255,
        blank=True,
        help_text="Device push notification token",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "firebase_uid"
    REQUIRED_FIELDS = ["email"]

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.name or self.email or self.firebase_uid

    @property
    def display_name(self) -> str:
        """Name shown to the other side of a conversation."""
        if self.name:
            return self.name
        if self.email:
            return self.email.split("@")[0]
        return settings.CHAT_UNKNOWN_USER_NAME

    def get_full_name(self):
        return self.display_name

    def get_short_name(self):
        return self.display_name
