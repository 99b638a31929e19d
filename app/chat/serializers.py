"""
Serializers for chat API.

Read serializers render the ChatService projections (ThreadSummary,
MessageView); they are plain Serializers, not ModelSerializers, because
the projections already join user and listing data.

Field names follow the camelCase contract the mobile client reads.

Serializer Hierarchy:
    ThreadSummarySerializer: One inbox row
    MessageViewSerializer: One message with nested sender
    PostMessageSerializer: Send-message request body
"""

from rest_framework import serializers


# =============================================================================
# Read Serializers
# =============================================================================


class MessageSenderSerializer(serializers.Serializer):
    """Sender identity embedded in every message."""

    id = serializers.CharField(source="sender_uid", help_text="Sender's Firebase UID")
    userId = serializers.IntegerField(source="sender_user_id", help_text="Sender's user id")
    name = serializers.CharField(source="sender_name", help_text="Sender's display name")
    profileImageUrl = serializers.CharField(
        source="sender_avatar",
        allow_null=True,
        help_text="Sender's avatar URL",
    )


class MessageViewSerializer(serializers.Serializer):
    """
    A message as delivered over HTTP and over the websocket.

    The realtime "message" event carries exactly this payload.
    """

    id = serializers.IntegerField()
    chatId = serializers.UUIDField(source="chat_id")
    text = serializers.CharField()
    timestamp = serializers.DateTimeField()
    sender = MessageSenderSerializer(source="*")


class ThreadSummarySerializer(serializers.Serializer):
    """One row of the caller's inbox."""

    chatId = serializers.UUIDField(source="chat_id")
    recipientId = serializers.IntegerField(source="recipient_id")
    recipientFirebaseUID = serializers.CharField(source="recipient_firebase_uid")
    recipientName = serializers.CharField(source="recipient_name")
    recipientAvatar = serializers.CharField(source="recipient_avatar", allow_null=True)
    listingId = serializers.UUIDField(source="listing_id")
    listingTitle = serializers.CharField(source="listing_title")
    lastMessageText = serializers.CharField(source="last_message_text")
    lastMessageTimestamp = serializers.DateTimeField(
        source="last_message_timestamp",
        allow_null=True,
    )
    lastMessageSenderId = serializers.IntegerField(
        source="last_message_sender_id",
        allow_null=True,
    )
    unreadCount = serializers.IntegerField(source="unread_count")
    state = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


# =============================================================================
# Write Serializers
# =============================================================================


class PostMessageSerializer(serializers.Serializer):
    """
    Request body for sending a message.

    Only shape is checked here. Text trimming and length, recipient
    lookup, and thread resolution are ChatService's job so the websocket
    and HTTP paths share one set of rules.
    """

    text = serializers.CharField(
        allow_blank=True,
        trim_whitespace=False,
        help_text="Message text",
    )
    otherUserId = serializers.CharField(help_text="Recipient user id or Firebase UID")
    chatId = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Existing chat id, if known",
    )
    listingId = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Listing id; required when starting a new chat",
    )


class FindThreadResponseSerializer(serializers.Serializer):
    """Response of the find-thread endpoint."""

    thread = ThreadSummarySerializer(allow_null=True)
