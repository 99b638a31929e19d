"""
Realtime fan-out for chat events.

Maps threads and users to channel layer groups, pushes events to them,
and tracks which groups each websocket session has joined.

Groups:
    chat_<thread_id>   - sessions currently viewing the thread
    inbox_<user_id>    - every session of the user, joined on connect

Events (the "type" key routes to the ChatConsumer handler of the same
name with dots replaced by underscores):
    chat.message        -> {"type": "message", "message": MessageView}
    chat.messages_read  -> {"type": "messagesRead", "chatId", "readerId" (firebase uid)}
    chat.activity       -> {"type": "chat-activity", "chatId"}

Delivery is fire-and-forget. Emission failures are raised as FanoutError;
ChatService catches and logs them so they never fail a request.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from chat.constants import CHANNEL_GROUPS
from chat.exceptions import FanoutError

logger = logging.getLogger(__name__)


def thread_group_name(thread_id) -> str:
    return f"{CHANNEL_GROUPS.THREAD_PREFIX}{thread_id}"


def inbox_group_name(user_id) -> str:
    return f"{CHANNEL_GROUPS.INBOX_PREFIX}{user_id}"


# =============================================================================
# Emission
# =============================================================================


class ChatFanout:
    """Sends chat events from synchronous code to channel layer groups."""

    @classmethod
    def send_to_group(cls, group: str, event: dict) -> None:
        """
        Send one event to one group.

        Raises:
            FanoutError: no channel layer is configured or the send failed
        """
        channel_layer = get_channel_layer()
        if channel_layer is None:
            raise FanoutError("Channel layer not configured", details={"group": group})

        try:
            async_to_sync(channel_layer.group_send)(group, event)
        except Exception as exc:
            # Channel layers surface transport problems with their own
            # exception types (redis errors, ChannelFull, OSError).
            raise FanoutError(
                f"Failed to deliver {event.get('type')} to {group}",
                details={"group": group, "reason": str(exc)},
            ) from exc

    @classmethod
    def send_to_groups(cls, deliveries: list[tuple[str, dict]]) -> None:
        """
        Attempt every delivery, then report the failures together.

        One unreachable group must not stop the others from being notified.
        """
        failures = []
        for group, event in deliveries:
            try:
                cls.send_to_group(group, event)
            except FanoutError as exc:
                failures.append(exc)

        if failures:
            raise FanoutError(
                f"{len(failures)} of {len(deliveries)} realtime deliveries failed",
                details={"groups": [f.details.get("group") for f in failures]},
            )

    @classmethod
    def message_posted(cls, thread_id, participant_ids, message_payload: dict) -> None:
        """Full message to the thread group, activity ping to each inbox."""
        chat_id = str(thread_id)
        deliveries = [
            (thread_group_name(chat_id), {"type": "chat.message", "message": message_payload}),
        ]
        deliveries.extend(
            (inbox_group_name(user_id), {"type": "chat.activity", "chat_id": chat_id})
            for user_id in participant_ids
        )
        cls.send_to_groups(deliveries)

    @classmethod
    def messages_read(cls, thread_id, reader_id) -> None:
        """Read receipt to the thread group."""
        cls.send_to_group(
            thread_group_name(thread_id),
            {
                "type": "chat.messages_read",
                "chat_id": str(thread_id),
                "reader_id": reader_id,
            },
        )


# =============================================================================
# Session registry
# =============================================================================


@dataclass
class Session:
    """One websocket connection and the groups it has joined."""

    channel_name: str
    user_id: int
    groups: set[str] = field(default_factory=set)


class SessionRegistry:
    """
    Process-local map of websocket sessions.

    Channel layers do not expose group membership, so each worker records
    what its own sessions joined and discards exactly that on disconnect.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def register(self, channel_name: str, user_id: int) -> Session:
        with self._lock:
            session = Session(channel_name=channel_name, user_id=user_id)
            self._sessions[channel_name] = session
            return session

    def unregister(self, channel_name: str) -> Session | None:
        """Forget a session; returns it so the caller can leave its groups."""
        with self._lock:
            return self._sessions.pop(channel_name, None)

    def get(self, channel_name: str) -> Session | None:
        return self._sessions.get(channel_name)

    def join(self, channel_name: str, group: str) -> bool:
        """Record a membership. Returns False if it was already recorded."""
        with self._lock:
            session = self._sessions.get(channel_name)
            if session is None:
                raise KeyError(f"Unknown session {channel_name}")
            if group in session.groups:
                return False
            session.groups.add(group)
            return True

    def leave(self, channel_name: str, group: str) -> bool:
        """Drop a membership. Returns False if it was not recorded."""
        with self._lock:
            session = self._sessions.get(channel_name)
            if session is None or group not in session.groups:
                return False
            session.groups.discard(group)
            return True

    def members(self, group: str) -> set[str]:
        """Channel names of local sessions in ``group``."""
        with self._lock:
            return {s.channel_name for s in self._sessions.values() if group in s.groups}

    def sessions_for_user(self, user_id) -> list[Session]:
        with self._lock:
            return [s for s in self._sessions.values() if s.user_id == user_id]

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, channel_name):
        return channel_name in self._sessions


session_registry = SessionRegistry()
