"""
Principal resolution services.

Maps an authenticated FirebasePrincipal to its User row, looks up other
users by reference, and upserts the User behind a freshly signed-in
principal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from authentication.models import User
from core.exceptions import NotFoundError, ValidationError
from core.services import BaseService

if TYPE_CHECKING:
    from authentication.firebase import FirebasePrincipal


class PrincipalService(BaseService):
    """Lookups between Firebase identities and User records."""

    @classmethod
    def resolve_user(cls, principal) -> User:
        """
        Return the active User behind a principal.

        A User instance is returned unchanged, so internal callers (the
        websocket consumer, tasks, tests) can pass users directly.

        Raises:
            NotFoundError: no active user carries the principal's uid
        """
        if isinstance(principal, User):
            return principal

        uid = getattr(principal, "uid", None)
        if not uid:
            raise NotFoundError("User not found", error_code="USER_NOT_FOUND")

        with cls.storage_operation("resolve user"):
            user = User.objects.filter(firebase_uid=uid, is_active=True).first()

        if user is None:
            cls.get_logger().info(f"No user record for principal {uid}")
            raise NotFoundError(
                "User not found",
                error_code="USER_NOT_FOUND",
                details={"uid": uid},
            )
        return user

    @classmethod
    def find_user(cls, reference) -> User:
        """
        Look up another user by primary key or Firebase UID.

        The mobile client addresses recipients with whichever id it has
        at hand, so both forms are accepted.

        Raises:
            ValidationError: reference is empty
            NotFoundError: no active user matches
        """
        reference = str(reference).strip() if reference is not None else ""
        if not reference:
            raise ValidationError(
                "Recipient is required",
                error_code="RECIPIENT_REQUIRED",
            )

        with cls.storage_operation("find user"):
            queryset = User.objects.filter(is_active=True)
            user = None
            if reference.isascii() and reference.isdecimal():
                user = queryset.filter(pk=int(reference)).first()
            if user is None:
                user = queryset.filter(firebase_uid=reference).first()

        if user is None:
            raise NotFoundError(
                "Recipient user not found",
                error_code="USER_NOT_FOUND",
                details={"user": reference},
            )
        return user

    @classmethod
    def sync_user(cls, principal: FirebasePrincipal) -> tuple[User, bool]:
        """
        Create or refresh the User for a signed-in principal.

        Email, name and avatar are copied from the token when the token
        carries them; fields the token omits are left as stored.

        Returns:
            (user, created)
        """
        updates = {
            "email": principal.email,
            "name": principal.name,
            "profile_image_url": principal.picture,
        }
        updates = {field: value for field, value in updates.items() if value}

        with cls.storage_operation("sync user"), cls.atomic():
            user = User.objects.select_for_update().filter(firebase_uid=principal.uid).first()
            if user is None:
                user = User.objects.create_user(firebase_uid=principal.uid, **updates)
                cls.get_logger().info(f"Created user {user.pk} for principal {principal.uid}")
                return user, True

            for field, value in updates.items():
                setattr(user, field, value)
            if updates:
                user.save(update_fields=[*updates, "updated_at"])
        return user, False
