"""
Tests for the chat WebSocket consumer.

The consumer is driven through channels' WebsocketCommunicator with the
user placed in scope directly; token handling is covered in
test_middleware.py. Tests run against a committed database because the
consumer reads through database_sync_to_async on another thread.
"""

import uuid

import pytest
from asgiref.sync import async_to_sync, sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from authentication.tests.factories import principal_for
from chat.realtime import inbox_group_name, session_registry, thread_group_name
from chat.routing import websocket_urlpatterns
from chat.services import ChatService

pytestmark = pytest.mark.django_db(transaction=True)

WS_PATH = "/ws/chat/"


def make_communicator(user, subprotocols=None):
    communicator = WebsocketCommunicator(
        URLRouter(websocket_urlpatterns), WS_PATH, subprotocols=subprotocols
    )
    communicator.scope["user"] = user
    return communicator


async def connect(user):
    """Connect ``user`` and consume the greeting frame."""
    communicator = make_communicator(user)
    connected, _ = await communicator.connect()
    assert connected
    greeting = await communicator.receive_json_from()
    assert greeting == {"type": "connected", "userId": user.pk}
    return communicator


async def join(communicator, thread):
    await communicator.send_json_to({"type": "joinRoom", "chatId": str(thread.pk)})
    return await communicator.receive_json_from()


# =============================================================================
# TestConnection
# =============================================================================


class TestConnection:
    def test_authenticated_user_connects_and_is_greeted(self, renter):
        async def scenario():
            communicator = await connect(renter)
            await communicator.disconnect()

        async_to_sync(scenario)()

    def test_anonymous_user_is_closed_with_4001(self):
        """
        Connections without a verified user are refused.

        Why it matters: Clients distinguish "log in again" (4001) from
        transient network drops.
        """

        async def scenario():
            communicator = make_communicator(AnonymousUser())
            connected, code = await communicator.connect()
            return connected, code

        connected, code = async_to_sync(scenario)()

        assert connected is False
        assert code == 4001

    def test_firebase_subprotocol_is_echoed(self, renter):
        async def scenario():
            communicator = make_communicator(renter, subprotocols=["firebase", "some-token"])
            connected, subprotocol = await communicator.connect()
            await communicator.receive_json_from()
            await communicator.disconnect()
            return connected, subprotocol

        connected, subprotocol = async_to_sync(scenario)()

        assert connected is True
        assert subprotocol == "firebase"

    def test_disconnect_forgets_session(self, renter, thread):
        async def scenario():
            communicator = await connect(renter)
            await join(communicator, thread)
            assert len(session_registry) == 1
            await communicator.disconnect()
            return len(session_registry)

        assert async_to_sync(scenario)() == 0

    def test_inbox_receives_activity_without_joining(self, renter):
        async def scenario():
            communicator = await connect(renter)
            await get_channel_layer().group_send(
                inbox_group_name(renter.pk), {"type": "chat.activity", "chat_id": "abc"}
            )
            frame = await communicator.receive_json_from()
            await communicator.disconnect()
            return frame

        assert async_to_sync(scenario)() == {"type": "chat-activity", "chatId": "abc"}


# =============================================================================
# TestRooms
# =============================================================================


class TestRooms:
    def test_participant_joins_room(self, renter, thread):
        async def scenario():
            communicator = await connect(renter)
            reply = await join(communicator, thread)
            await communicator.disconnect()
            return reply

        assert async_to_sync(scenario)() == {"type": "joinedRoom", "chatId": str(thread.pk)}

    def test_stranger_cannot_join_room(self, stranger, thread):
        """
        Non-participants get the same error as for a missing thread.

        Why it matters: The socket must not reveal which chat ids exist.
        """

        async def scenario():
            communicator = await connect(stranger)
            reply = await join(communicator, thread)
            await communicator.disconnect()
            return reply

        assert async_to_sync(scenario)() == {"type": "error", "message": "Chat not found"}

    def test_unknown_thread_is_not_found(self, renter):
        async def scenario():
            communicator = await connect(renter)
            await communicator.send_json_to({"type": "joinRoom", "chatId": str(uuid.uuid4())})
            reply = await communicator.receive_json_from()
            await communicator.disconnect()
            return reply

        assert async_to_sync(scenario)() == {"type": "error", "message": "Chat not found"}

    def test_malformed_chat_id(self, renter):
        async def scenario():
            communicator = await connect(renter)
            await communicator.send_json_to({"type": "joinRoom", "chatId": "not-a-uuid"})
            reply = await communicator.receive_json_from()
            await communicator.disconnect()
            return reply

        assert async_to_sync(scenario)() == {"type": "error", "message": "Invalid chat ID"}

    def test_unknown_frame_type(self, renter):
        async def scenario():
            communicator = await connect(renter)
            await communicator.send_json_to({"type": "typing"})
            reply = await communicator.receive_json_from()
            await communicator.disconnect()
            return reply

        assert async_to_sync(scenario)() == {
            "type": "error",
            "message": "Unknown message type: typing",
        }

    def test_leave_room_stops_thread_events(self, renter, thread):
        async def scenario():
            communicator = await connect(renter)
            await join(communicator, thread)

            await communicator.send_json_to({"type": "leaveRoom", "chatId": str(thread.pk)})
            reply = await communicator.receive_json_from()

            await get_channel_layer().group_send(
                thread_group_name(thread.pk),
                {"type": "chat.messages_read", "chat_id": str(thread.pk), "reader_id": "uid-1"},
            )
            silent = await communicator.receive_nothing()
            await communicator.disconnect()
            return reply, silent

        reply, silent = async_to_sync(scenario)()

        assert reply == {"type": "leftRoom", "chatId": str(thread.pk)}
        assert silent is True


# =============================================================================
# TestRelay
# =============================================================================


class TestRelay:
    def test_posted_message_reaches_room_and_inbox(self, renter, owner, thread):
        """
        A message posted over HTTP is pushed to the open room and the inbox.

        Why it matters: This is the full path from ChatService through the
        channel layer to a live client.
        """

        async def scenario():
            communicator = await connect(owner)
            await join(communicator, thread)

            await sync_to_async(ChatService.post_message)(
                principal_for(renter), owner.pk, "Still available?", thread_id=thread.pk
            )

            frames = [
                await communicator.receive_json_from(),
                await communicator.receive_json_from(),
            ]
            await communicator.disconnect()
            return frames

        message_frame, activity_frame = async_to_sync(scenario)()

        assert message_frame["type"] == "message"
        assert message_frame["message"]["chatId"] == str(thread.pk)
        assert message_frame["message"]["text"] == "Still available?"
        assert message_frame["message"]["sender"]["userId"] == renter.pk
        assert activity_frame == {"type": "chat-activity", "chatId": str(thread.pk)}

    def test_read_receipt_reaches_room(self, renter, owner, thread):
        async def scenario():
            communicator = await connect(renter)
            await join(communicator, thread)

            await sync_to_async(ChatService.get_messages)(principal_for(owner), str(thread.pk))

            frame = await communicator.receive_json_from()
            await communicator.disconnect()
            return frame

        assert async_to_sync(scenario)() == {
            "type": "messagesRead",
            "chatId": str(thread.pk),
            "readerId": owner.firebase_uid,
        }
