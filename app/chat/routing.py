"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - Single chat connection per client session

Authentication:
    Firebase ID token as query parameter (?token=...) or as the
    ["firebase", token] subprotocol pair. See chat.middleware.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/chat/", consumers.ChatConsumer.as_asgi()),
]
