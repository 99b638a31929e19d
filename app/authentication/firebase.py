"""
Firebase ID token verification.

The mobile client signs users in with Firebase Authentication and sends
the resulting ID token with every request (HTTP Authorization header or
websocket handshake). This module turns such a token into a
FirebasePrincipal; it never touches the database.

Configuration (config/settings.py):
    FIREBASE_CREDENTIALS_PATH: service-account JSON file. When unset the
        Admin SDK falls back to application-default credentials.
    FIREBASE_PROJECT_ID: optional explicit project id.
    FIREBASE_CHECK_REVOKED: also reject revoked tokens / disabled users.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import firebase_admin
from django.conf import settings
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials

from core.exceptions import AuthenticationError, ExternalServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirebasePrincipal:
    """
    The authenticated identity making a request.

    Set as request.user by FirebaseAuthentication. It is not a database
    record; PrincipalService.resolve_user maps it to a User.
    """

    uid: str
    email: str = ""
    name: str = ""
    picture: str = ""

    @property
    def pk(self) -> str:
        # DRF's UserRateThrottle keys on request.user.pk
        return self.uid

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_anonymous(self) -> bool:
        return False


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        options = {}
        if settings.FIREBASE_PROJECT_ID:
            options["projectId"] = settings.FIREBASE_PROJECT_ID

        if settings.FIREBASE_CREDENTIALS_PATH:
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
            logger.info("Initializing Firebase Admin SDK from service account file")
        else:
            cred = credentials.ApplicationDefault()
            logger.info("Initializing Firebase Admin SDK with default credentials")

        return firebase_admin.initialize_app(cred, options or None)


def verify_credential(token: str | None) -> FirebasePrincipal:
    """
    Verify a Firebase ID token and return the principal it identifies.

    Raises:
        AuthenticationError: token missing, malformed, expired, revoked,
            or belonging to a disabled account
        ExternalServiceError: Google signing certificates could not be fetched
    """
    if not token:
        raise AuthenticationError(
            "Authentication credentials were not provided.",
            error_code="CREDENTIAL_MISSING",
        )

    try:
        decoded = firebase_auth.verify_id_token(
            token,
            app=get_firebase_app(),
            check_revoked=settings.FIREBASE_CHECK_REVOKED,
        )
    except firebase_auth.CertificateFetchError as exc:
        logger.error(f"Could not fetch Firebase signing certificates: {exc}")
        raise ExternalServiceError(
            "Authentication service unavailable",
            error_code="FIREBASE_UNAVAILABLE",
        ) from exc
    except firebase_auth.ExpiredIdTokenError as exc:
        raise AuthenticationError(
            "Authentication token has expired.",
            error_code="TOKEN_EXPIRED",
        ) from exc
    except firebase_auth.RevokedIdTokenError as exc:
        raise AuthenticationError(
            "Authentication token has been revoked.",
            error_code="TOKEN_REVOKED",
        ) from exc
    except firebase_auth.UserDisabledError as exc:
        raise AuthenticationError(
            "This account has been disabled.",
            error_code="USER_DISABLED",
        ) from exc
    except (firebase_auth.InvalidIdTokenError, ValueError) as exc:
        logger.warning(f"Rejected Firebase ID token: {exc}")
        raise AuthenticationError("Invalid authentication token.") from exc

    return FirebasePrincipal(
        uid=decoded["uid"],
        email=decoded.get("email") or "",
        name=decoded.get("name") or "",
        picture=decoded.get("picture") or "",
    )
