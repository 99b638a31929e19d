"""
Tests for realtime fan-out and the websocket session registry.

ChatFanout is exercised against the in-memory channel layer. The send
happens from synchronous code (as in ChatService), so each scenario runs
in one event loop and calls the fan-out through sync_to_async.
"""

import uuid
from unittest.mock import patch

import pytest
from asgiref.sync import async_to_sync, sync_to_async
from channels.layers import get_channel_layer

from chat.exceptions import FanoutError
from chat.realtime import (
    ChatFanout,
    SessionRegistry,
    inbox_group_name,
    thread_group_name,
)


class BrokenLayer:
    """Channel layer whose sends fail for selected groups."""

    def __init__(self, failing_groups):
        self.failing_groups = set(failing_groups)
        self.delivered = []

    async def group_send(self, group, message):
        if group in self.failing_groups:
            raise ConnectionError(f"cannot reach {group}")
        self.delivered.append((group, message))


def subscribe_and_emit(groups, emit):
    """Subscribe one channel per group, run ``emit``, return what each received."""

    async def scenario():
        layer = get_channel_layer()
        channels = {}
        for group in groups:
            channels[group] = await layer.new_channel()
            await layer.group_add(group, channels[group])

        await sync_to_async(emit)()

        return {group: await layer.receive(channel) for group, channel in channels.items()}

    return async_to_sync(scenario)()


# =============================================================================
# TestGroupNames
# =============================================================================


class TestGroupNames:
    def test_group_names_are_deterministic(self):
        thread_id = uuid.UUID("8d7f3c1e-0000-4000-8000-000000000001")

        assert thread_group_name(thread_id) == "chat_8d7f3c1e-0000-4000-8000-000000000001"
        assert inbox_group_name(42) == "inbox_42"


# =============================================================================
# TestChatFanout
# =============================================================================


class TestChatFanout:
    def test_message_posted_reaches_thread_and_both_inboxes(self):
        """
        The full message goes to the thread channel, a ping to each inbox.

        Why it matters: Sessions viewing the chat render the message;
        sessions on the inbox screen only need to refresh.
        """
        thread_id = uuid.uuid4()
        payload = {"id": 1, "chatId": str(thread_id), "text": "Hi"}
        groups = [thread_group_name(thread_id), inbox_group_name(1), inbox_group_name(2)]

        received = subscribe_and_emit(
            groups, lambda: ChatFanout.message_posted(thread_id, [1, 2], payload)
        )

        assert received[thread_group_name(thread_id)] == {
            "type": "chat.message",
            "message": payload,
        }
        for user_id in (1, 2):
            assert received[inbox_group_name(user_id)] == {
                "type": "chat.activity",
                "chat_id": str(thread_id),
            }

    def test_messages_read_reaches_thread_group(self):
        thread_id = uuid.uuid4()
        group = thread_group_name(thread_id)

        received = subscribe_and_emit(
            [group], lambda: ChatFanout.messages_read(thread_id, "firebase-uid-7")
        )

        assert received[group] == {
            "type": "chat.messages_read",
            "chat_id": str(thread_id),
            "reader_id": "firebase-uid-7",
        }

    def test_missing_channel_layer_raises(self):
        with patch("chat.realtime.get_channel_layer", return_value=None):
            with pytest.raises(FanoutError) as exc_info:
                ChatFanout.send_to_group("inbox_1", {"type": "chat.activity"})

        assert exc_info.value.error_code == "FANOUT_FAILED"

    def test_transport_error_wrapped(self):
        layer = BrokenLayer({"inbox_1"})

        with patch("chat.realtime.get_channel_layer", return_value=layer):
            with pytest.raises(FanoutError) as exc_info:
                ChatFanout.send_to_group("inbox_1", {"type": "chat.activity"})

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert exc_info.value.details["group"] == "inbox_1"

    def test_one_failed_group_does_not_stop_the_others(self):
        """
        Delivery is attempted for every group before failures are reported.

        Why it matters: An unreachable inbox must not keep the message
        from the open chat screen.
        """
        thread_id = uuid.uuid4()
        layer = BrokenLayer({inbox_group_name(1)})

        with patch("chat.realtime.get_channel_layer", return_value=layer):
            with pytest.raises(FanoutError) as exc_info:
                ChatFanout.message_posted(thread_id, [1, 2], {"text": "Hi"})

        assert [group for group, _ in layer.delivered] == [
            thread_group_name(thread_id),
            inbox_group_name(2),
        ]
        assert exc_info.value.details["groups"] == [inbox_group_name(1)]


# =============================================================================
# TestSessionRegistry
# =============================================================================


class TestSessionRegistry:
    def test_register_and_unregister(self):
        registry = SessionRegistry()

        session = registry.register("chan-1", 5)

        assert "chan-1" in registry
        assert len(registry) == 1
        assert registry.get("chan-1") is session
        assert registry.unregister("chan-1") is session
        assert "chan-1" not in registry
        assert registry.unregister("chan-1") is None

    def test_join_records_membership_once(self):
        registry = SessionRegistry()
        registry.register("chan-1", 5)

        assert registry.join("chan-1", "chat_a") is True
        assert registry.join("chan-1", "chat_a") is False
        assert registry.get("chan-1").groups == {"chat_a"}

    def test_join_unknown_session_raises(self):
        with pytest.raises(KeyError):
            SessionRegistry().join("ghost", "chat_a")

    def test_leave(self):
        registry = SessionRegistry()
        registry.register("chan-1", 5)
        registry.join("chan-1", "chat_a")

        assert registry.leave("chan-1", "chat_a") is True
        assert registry.leave("chan-1", "chat_a") is False
        assert registry.leave("ghost", "chat_a") is False

    def test_members_and_sessions_for_user(self):
        registry = SessionRegistry()
        registry.register("phone", 5)
        registry.register("tablet", 5)
        registry.register("other", 6)
        registry.join("phone", "chat_a")
        registry.join("other", "chat_a")

        assert registry.members("chat_a") == {"phone", "other"}
        assert {s.channel_name for s in registry.sessions_for_user(5)} == {"phone", "tablet"}
