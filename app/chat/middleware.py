"""
WebSocket authentication middleware.

Verifies the Firebase ID token presented in the websocket handshake and
attaches the matching User to scope["user"]. Anything that does not
authenticate gets AnonymousUser; ChatConsumer closes those connections.

Token Passing Methods:
    1. Query string: ws://host/ws/chat/?token=<id_token>
    2. Subprotocol: Sec-WebSocket-Protocol: firebase, <id_token>

Usage in config/asgi.py:
    application = ProtocolTypeRouter({
        "websocket": FirebaseAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        ),
    })
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser

from authentication.firebase import verify_credential
from authentication.services import PrincipalService
from core.exceptions import AuthenticationError, ExternalServiceError, NotFoundError

logger = logging.getLogger(__name__)

TOKEN_SUBPROTOCOL = "firebase"


def get_token_from_query(scope) -> str | None:
    query_string = scope.get("query_string", b"").decode()
    token_list = parse_qs(query_string).get("token", [])
    return token_list[0] if token_list else None


def get_token_from_subprotocol(scope) -> str | None:
    """Expects: Sec-WebSocket-Protocol: firebase, <token>"""
    subprotocols = scope.get("subprotocols") or []
    if len(subprotocols) >= 2 and subprotocols[0] == TOKEN_SUBPROTOCOL:
        return subprotocols[1]
    return None


class FirebaseAuthMiddleware(BaseMiddleware):
    """
    Firebase authentication middleware for WebSocket connections.

    Token sources (in order of precedence):
        1. Query string: ?token=<id_token>
        2. Subprotocol: Sec-WebSocket-Protocol: firebase, <id_token>
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        token = get_token_from_query(scope) or get_token_from_subprotocol(scope)

        if token:
            scope["user"] = await self._get_user_from_token(token)
        else:
            scope["user"] = AnonymousUser()

        return await super().__call__(scope, receive, send)

    @database_sync_to_async
    def _get_user_from_token(self, token: str):
        """
        Verify the token and resolve its User.

        Returns:
            User instance if valid, AnonymousUser otherwise
        """
        try:
            principal = verify_credential(token)
            return PrincipalService.resolve_user(principal)
        except AuthenticationError as e:
            logger.warning(f"Rejected websocket token: {e.message}")
        except NotFoundError:
            logger.warning("Websocket token is valid but has no user record")
        except ExternalServiceError as e:
            logger.error(f"Could not verify websocket token: {e.message}")
        return AnonymousUser()
