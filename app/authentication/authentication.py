"""
DRF authentication class for Firebase ID tokens.

Reads "Authorization: Bearer <id token>" and sets request.user to a
FirebasePrincipal. Looking the principal up in the users table is left to
the service layer, so a valid token without a User row yields 404 from the
endpoint instead of 401.
"""

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from authentication.firebase import verify_credential
from core.exceptions import AuthenticationError


class FirebaseAuthentication(BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        auth = get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed(
                "Invalid Authorization header. Expected 'Bearer <token>'."
            )

        try:
            token = auth[1].decode()
        except UnicodeError as exc:
            raise exceptions.AuthenticationFailed(
                "Invalid Authorization header. Token contains invalid characters."
            ) from exc

        try:
            principal = verify_credential(token)
        except AuthenticationError as exc:
            raise exceptions.AuthenticationFailed(exc.message, code=exc.error_code) from exc

        return (principal, token)

    def authenticate_header(self, request):
        return self.keyword
