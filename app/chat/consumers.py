"""
WebSocket consumer for the chat application.

One connection per signed-in client session, at ws/chat/. The connection
is not bound to a thread: the client joins and leaves thread rooms as the
user opens and closes conversations.

Authentication:
    FirebaseAuthMiddleware attaches the User to self.scope["user"].
    Anonymous connections are closed with code 4001.

Channel Groups:
    inbox_<user_id>   joined on connect, receives chat-activity pings
    chat_<thread_id>  joined on joinRoom, receives message / messagesRead

Message Types (from client):
    - joinRoom:  {"type": "joinRoom", "chatId": "..."}
    - leaveRoom: {"type": "leaveRoom", "chatId": "..."}

Message Types (to client):
    - connected, joinedRoom, leftRoom
    - message, messagesRead, chat-activity
    - error
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from chat.constants import CLIENT_ACTIONS, REALTIME_EVENTS, SOCKET_CLOSE_CODES
from chat.middleware import TOKEN_SUBPROTOCOL
from chat.models import Thread
from chat.realtime import inbox_group_name, session_registry, thread_group_name
from core.helpers import parse_uuid

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for real-time chat delivery.

    Handles:
        - Connection authentication
        - Inbox group membership for the connected user
        - Joining/leaving thread groups on request
        - Relaying chat events from the channel layer to the client
    """

    async def connect(self):
        user = self.scope.get("user")

        if not user or not user.is_authenticated:
            logger.warning("Rejected unauthenticated chat connection")
            await self.close(code=SOCKET_CLOSE_CODES.UNAUTHENTICATED)
            return

        subprotocols = self.scope.get("subprotocols") or []
        if TOKEN_SUBPROTOCOL in subprotocols:
            await self.accept(subprotocol=TOKEN_SUBPROTOCOL)
        else:
            await self.accept()

        session_registry.register(self.channel_name, user.pk)
        await self._join_group(inbox_group_name(user.pk))

        logger.info(f"User {user.pk} connected to chat")
        await self.send_json({"type": REALTIME_EVENTS.CONNECTED, "userId": user.pk})

    async def disconnect(self, close_code):
        session = session_registry.unregister(self.channel_name)
        if session is None:
            return

        for group in session.groups:
            await self.channel_layer.group_discard(group, self.channel_name)
        logger.info(f"User {session.user_id} disconnected from chat (code {close_code})")

    async def receive_json(self, content, **kwargs):
        """
        Handle incoming client frames.

        Expected frame format:
            {"type": "joinRoom", "chatId": "<uuid>"}
            {"type": "leaveRoom", "chatId": "<uuid>"}
        """
        frame_type = content.get("type") if isinstance(content, dict) else None

        if frame_type == CLIENT_ACTIONS.JOIN_ROOM:
            await self._handle_join(content.get("chatId"))
        elif frame_type == CLIENT_ACTIONS.LEAVE_ROOM:
            await self._handle_leave(content.get("chatId"))
        else:
            await self._send_error(f"Unknown message type: {frame_type}")

    # -------------------------------------------------------------------------
    # Client actions
    # -------------------------------------------------------------------------

    async def _handle_join(self, chat_id):
        user = self.scope["user"]
        thread_id = parse_uuid(chat_id)
        if thread_id is None:
            await self._send_error("Invalid chat ID")
            return

        if not await self._is_participant(thread_id, user.pk):
            logger.warning(f"User {user.pk} denied access to thread room {thread_id}")
            await self._send_error("Chat not found")
            return

        await self._join_group(thread_group_name(thread_id))
        await self.send_json({"type": REALTIME_EVENTS.JOINED_ROOM, "chatId": str(thread_id)})

    async def _handle_leave(self, chat_id):
        thread_id = parse_uuid(chat_id)
        if thread_id is None:
            await self._send_error("Invalid chat ID")
            return

        group = thread_group_name(thread_id)
        if session_registry.leave(self.channel_name, group):
            await self.channel_layer.group_discard(group, self.channel_name)
        await self.send_json({"type": REALTIME_EVENTS.LEFT_ROOM, "chatId": str(thread_id)})

    async def _join_group(self, group: str):
        if session_registry.join(self.channel_name, group):
            await self.channel_layer.group_add(group, self.channel_name)

    async def _send_error(self, message: str):
        await self.send_json({"type": REALTIME_EVENTS.ERROR, "message": message})

    # -------------------------------------------------------------------------
    # Channel layer events
    # -------------------------------------------------------------------------

    async def chat_message(self, event):
        await self.send_json({"type": REALTIME_EVENTS.MESSAGE, "message": event["message"]})

    async def chat_messages_read(self, event):
        await self.send_json(
            {
                "type": REALTIME_EVENTS.MESSAGES_READ,
                "chatId": event["chat_id"],
                "readerId": event["reader_id"],
            }
        )

    async def chat_activity(self, event):
        await self.send_json({"type": REALTIME_EVENTS.CHAT_ACTIVITY, "chatId": event["chat_id"]})

    @database_sync_to_async
    def _is_participant(self, thread_id, user_id) -> bool:
        thread = Thread.objects.filter(pk=thread_id).first()
        return thread is not None and thread.has_participant(user_id)
