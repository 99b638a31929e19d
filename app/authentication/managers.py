"""
Custom user manager for Firebase-backed accounts.

Users are identified by their Firebase UID. Passwords are never checked
by this backend (Firebase owns sign-in), so regular users get an
unusable password; only staff accounts created for the admin site carry
a real one.
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Manager for User with the Firebase UID as the username field.

    Usage:
        user = User.objects.create_user(
            firebase_uid="Xb12...",
            email="tenant@example.com",
            name="Tenant",
        )

        admin = User.objects.create_superuser(
            firebase_uid="admin-uid",
            email="admin@example.com",
            password="adminpassword",
        )
    """

    def create_user(self, firebase_uid, email="", password=None, **extra_fields):
        """
        Create and save a user for the given Firebase UID.

        Raises:
            ValueError: If firebase_uid is not provided
        """
        if not firebase_uid:
            raise ValueError("The Firebase UID must be set")

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        user = self.model(
            firebase_uid=firebase_uid,
            email=self.normalize_email(email),
            **extra_fields,
        )
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, firebase_uid, email="", password=None, **extra_fields):
        """
        Create and save a superuser.

        Raises:
            ValueError: If is_staff or is_superuser is not True
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(firebase_uid, email, password, **extra_fields)
