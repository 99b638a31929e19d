"""
Constants for the chat module.

Import example:
    from chat.constants import REALTIME_EVENTS, SOCKET_CLOSE_CODES
"""

from typing import Final


# =============================================================================
# Realtime Channel Groups
# =============================================================================


class CHANNEL_GROUPS:
    """Channel layer group name prefixes."""

    # One group per thread, joined while a client has the thread open
    THREAD_PREFIX: Final[str] = "chat_"
    # One group per user, joined automatically on connect
    INBOX_PREFIX: Final[str] = "inbox_"


# =============================================================================
# Realtime Events
# =============================================================================


class REALTIME_EVENTS:
    """Event names sent to websocket clients (the frame "type")."""

    MESSAGE: Final[str] = "message"
    MESSAGES_READ: Final[str] = "messagesRead"
    CHAT_ACTIVITY: Final[str] = "chat-activity"
    CONNECTED: Final[str] = "connected"
    JOINED_ROOM: Final[str] = "joinedRoom"
    LEFT_ROOM: Final[str] = "leftRoom"
    ERROR: Final[str] = "error"


class CLIENT_ACTIONS:
    """Frame types accepted from websocket clients."""

    JOIN_ROOM: Final[str] = "joinRoom"
    LEAVE_ROOM: Final[str] = "leaveRoom"


class SOCKET_CLOSE_CODES:
    """Application close codes (4000-4999 range)."""

    UNAUTHENTICATED: Final[int] = 4001
