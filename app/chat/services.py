"""
Chat service layer.

ChatService holds every chat operation the API and websocket layers use:

    list_threads     - inbox for the caller, hidden threads excluded
    get_messages     - message log of a thread; marks it read
    post_message     - send, creating the thread on first contact
    delete_thread    - hide for the caller, or purge once both sides deleted
    find_thread      - existing thread for (caller, recipient, listing)

Concurrency:
    Message append, last-message update and unread increment run in one
    transaction with the thread row locked. Two first messages racing to
    create the same thread are coalesced through the unique constraint on
    (user_lower, user_higher, listing): the loser catches IntegrityError
    and appends to the winner's thread.

Realtime events are scheduled with transaction.on_commit and never fail
the request (see _emit_after_commit).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from authentication.services import PrincipalService
from chat.exceptions import FanoutError, ForbiddenError, InvalidIdError, MissingListingError
from chat.models import Message, Thread, ThreadState
from chat.realtime import ChatFanout
from core.exceptions import NotFoundError, ValidationError
from core.helpers import parse_uuid
from core.services import BaseService
from listings.services import ListingContext, ListingService


# =============================================================================
# Projections
# =============================================================================


@dataclass(frozen=True)
class MessageView:
    """A message with its sender's display identity expanded."""

    id: int
    chat_id: UUID
    text: str
    timestamp: datetime
    sender_user_id: int
    sender_uid: str
    sender_name: str
    sender_avatar: str | None

    @classmethod
    def from_message(cls, message: Message) -> MessageView:
        sender = message.sender
        return cls(
            id=message.pk,
            chat_id=message.thread_id,
            text=message.text,
            timestamp=message.created_at,
            sender_user_id=sender.pk,
            sender_uid=sender.firebase_uid,
            sender_name=sender.display_name,
            sender_avatar=sender.profile_image_url or None,
        )


@dataclass(frozen=True)
class ThreadSummary:
    """A thread as one row of the caller's inbox."""

    chat_id: UUID
    recipient_id: int
    recipient_firebase_uid: str
    recipient_name: str
    recipient_avatar: str | None
    listing_id: UUID
    listing_title: str
    last_message_text: str
    last_message_timestamp: datetime | None
    last_message_sender_id: int | None
    unread_count: int
    state: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# ChatService
# =============================================================================


class ChatService(BaseService):

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @classmethod
    def list_threads(cls, principal) -> list[ThreadSummary]:
        """
        Display-ready summaries of the caller's visible threads.

        Ordered by most recent activity first.

        Raises:
            NotFoundError: principal has no user record
        """
        user = PrincipalService.resolve_user(principal)

        with cls.storage_operation("list threads"):
            threads = list(
                Thread.objects.for_participant(user.pk)
                .select_related("user_lower", "user_higher")
                .prefetch_related("memberships")
            )
            listings = ListingService.resolve_contexts(t.listing_id for t in threads)

        return [cls._summarize(t, user.pk, listings[str(t.listing_id)]) for t in threads]

    @classmethod
    def find_thread(cls, principal, recipient_ref, listing_id) -> ThreadSummary | None:
        """
        Existing thread between the caller and a recipient about a listing.

        Threads the caller has hidden are still returned: posting into them
        is allowed, so the client needs their id.

        Raises:
            MissingListingError: listing_id absent
            ValidationError: listing_id malformed, or recipient is the caller
            NotFoundError: caller or recipient unknown
        """
        if not listing_id:
            raise MissingListingError("A listing is required to find a chat")
        listing_uuid = cls._parse_listing_id(listing_id)

        user = PrincipalService.resolve_user(principal)
        recipient = PrincipalService.find_user(recipient_ref)
        cls._ensure_distinct(user, recipient)

        with cls.storage_operation("find thread"):
            thread = (
                Thread.objects.between(user.pk, recipient.pk, listing_uuid)
                .select_related("user_lower", "user_higher")
                .prefetch_related("memberships")
                .first()
            )
            if thread is None:
                return None
            listing = ListingService.resolve_context(thread.listing_id)

        return cls._summarize(thread, user.pk, listing)

    @classmethod
    def get_messages(cls, principal, thread_id) -> list[MessageView]:
        """
        The thread's messages, oldest first. Marks the thread read.

        The caller's unread counter is reset to zero and a read receipt
        is emitted to the thread group after commit.

        Raises:
            InvalidIdError: thread_id malformed
            NotFoundError: caller unknown or thread absent
            ForbiddenError: caller is not a participant
        """
        user = PrincipalService.resolve_user(principal)
        thread_uuid = cls._parse_thread_id(thread_id)

        with cls.storage_operation("get messages"), cls.atomic():
            # Locked like _append, so no message lands between the read and the reset
            thread = cls._get_thread(thread_uuid, for_update=True)
            if not thread.has_participant(user.pk):
                cls.get_logger().warning(
                    f"User {user.pk} attempted to read thread {thread.pk} without membership"
                )
                raise ForbiddenError(
                    "You are not a participant in this chat",
                    details={"chat_id": str(thread.pk)},
                )

            messages = list(Message.objects.for_thread(thread.pk).select_related("sender"))
            thread.reset_unread(user.pk)
            cls._emit_after_commit(ChatFanout.messages_read, thread.pk, user.firebase_uid)

        return [MessageView.from_message(m) for m in messages]

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    @classmethod
    def post_message(
        cls,
        principal,
        recipient_ref,
        text,
        thread_id=None,
        listing_id=None,
    ) -> MessageView:
        """
        Send a message, creating the thread on first contact.

        Thread resolution:
            1. thread_id, when it names an existing thread
            2. the (sender, recipient, listing_id) thread, when listing_id is given
            3. otherwise a new thread, which requires listing_id

        A thread_id that is not a well-formed id is ignored: the client
        uses the recipient's id as a stand-in until the first message
        creates the real thread.

        Raises:
            ValidationError: empty or oversized text, missing recipient,
                recipient is the sender, or recipient not in the named thread
            NotFoundError: sender, recipient, or listing unknown
            ForbiddenError: the named thread does not include the sender
            MissingListingError: new thread without listing_id
        """
        text = cls._clean_text(text)
        if recipient_ref is None or not str(recipient_ref).strip():
            raise ValidationError("Recipient is required", error_code="RECIPIENT_REQUIRED")

        sender = PrincipalService.resolve_user(principal)
        recipient = PrincipalService.find_user(recipient_ref)
        cls._ensure_distinct(sender, recipient)

        with cls.storage_operation("post message"):
            thread = cls._resolve_thread(sender, recipient, thread_id, listing_id)

            if thread is None:
                if not listing_id:
                    raise MissingListingError("A listing is required to start a new chat")
                listing = ListingService.get_listing(listing_id)
                thread, message = cls._start_thread(sender, recipient, listing.pk, text)
            else:
                thread, message = cls._append(thread.pk, sender, recipient, text)

        view = MessageView.from_message(message)
        cls._emit_message_posted(thread, view)
        return view

    @classmethod
    def delete_thread(cls, principal, thread_id) -> ThreadState:
        """
        Delete a thread from the caller's point of view.

        - Neither side has hidden it: hide it for the caller (HIDDEN_BY_ONE).
        - The other side already hid it: purge thread and messages (DELETED).
        - The caller already hid it: no-op.

        Returns:
            The resulting state

        Raises:
            InvalidIdError: thread_id malformed
            NotFoundError: caller unknown, thread absent, or caller not a participant
        """
        user = PrincipalService.resolve_user(principal)
        thread_uuid = cls._parse_thread_id(thread_id)
        logger = cls.get_logger()

        with cls.storage_operation("delete thread"), cls.atomic():
            thread = Thread.objects.select_for_update().filter(pk=thread_uuid).first()
            if thread is None or not thread.has_participant(user.pk):
                raise NotFoundError(
                    "Chat not found",
                    error_code="THREAD_NOT_FOUND",
                    details={"chat_id": str(thread_uuid)},
                )

            if thread.is_hidden_by(user.pk):
                logger.debug(f"Thread {thread.pk} already hidden by user {user.pk}")
                return ThreadState(thread.state)

            if thread.is_hidden_by_other(user.pk):
                thread.abandon()
                removed = thread.purge()
                logger.info(
                    f"Thread {thread_uuid} deleted by both participants; "
                    f"purged with {removed} messages"
                )
                return ThreadState.DELETED

            thread.add_hidden(user.pk)
            thread.hide()
            thread.save(update_fields=["state"])

        logger.info(f"Thread {thread.pk} hidden by user {user.pk}")
        return ThreadState.HIDDEN_BY_ONE

    @classmethod
    def purge_abandoned_threads(cls, batch_size: int | None = None) -> int:
        """
        Purge threads every participant has hidden.

        delete_thread purges on the second deletion, so this only finds
        rows left behind by data edits or interrupted requests.

        Returns:
            Number of threads purged
        """
        batch_size = batch_size or settings.CHAT_ABANDONED_PURGE_BATCH_SIZE
        logger = cls.get_logger()

        with cls.storage_operation("find abandoned threads"):
            thread_ids = list(
                Thread.objects.annotate(
                    hidden_count=Count("memberships", filter=Q(memberships__hidden_at__isnull=False))
                )
                .filter(hidden_count__gte=2)
                .values_list("pk", flat=True)[:batch_size]
            )

        purged = 0
        for thread_id in thread_ids:
            with cls.storage_operation("purge abandoned thread"), cls.atomic():
                thread = Thread.objects.select_for_update().filter(pk=thread_id).first()
                if thread is None:
                    continue
                removed = thread.purge()
                purged += 1
                logger.info(f"Purged abandoned thread {thread_id} with {removed} messages")

        return purged

    # -------------------------------------------------------------------------
    # Thread resolution and writes
    # -------------------------------------------------------------------------

    @classmethod
    def _resolve_thread(cls, sender, recipient, thread_id, listing_id) -> Thread | None:
        thread_uuid = parse_uuid(thread_id) if thread_id else None
        if thread_uuid is not None:
            thread = Thread.objects.filter(pk=thread_uuid).first()
            if thread is not None:
                if not thread.has_participant(sender.pk):
                    raise ForbiddenError(
                        "You are not a participant in this chat",
                        details={"chat_id": str(thread.pk)},
                    )
                if not thread.has_participant(recipient.pk):
                    raise ValidationError(
                        "Recipient is not a participant in this chat",
                        error_code="RECIPIENT_MISMATCH",
                        details={"chat_id": str(thread.pk)},
                    )
                return thread

        if listing_id:
            listing_uuid = cls._parse_listing_id(listing_id)
            return Thread.objects.between(sender.pk, recipient.pk, listing_uuid).first()

        return None

    @classmethod
    def _start_thread(cls, sender, recipient, listing_id, text) -> tuple[Thread, Message]:
        """Create thread and first message, coalescing with a concurrent creator."""
        try:
            with cls.atomic():
                thread = Thread.objects.create_thread(
                    sender,
                    recipient,
                    listing_id,
                    unread_by={recipient.pk: 1},
                )
                message = Message.objects.create(thread=thread, sender=sender, text=text)
                thread.set_last_message(message)
        except IntegrityError:
            existing = Thread.objects.between(sender.pk, recipient.pk, listing_id).first()
            if existing is None:
                raise
            cls.get_logger().info(
                f"Concurrent creation of thread for users {sender.pk}/{recipient.pk} "
                f"and listing {listing_id}; appending to {existing.pk}"
            )
            return cls._append(existing.pk, sender, recipient, text)

        cls.get_logger().info(
            f"Created thread {thread.pk} between users {sender.pk} and {recipient.pk} "
            f"for listing {listing_id}"
        )
        return thread, message

    @classmethod
    def _append(cls, thread_id, sender, recipient, text) -> tuple[Thread, Message]:
        """Append a message and update the thread as one step."""
        with cls.atomic():
            thread = Thread.objects.select_for_update().filter(pk=thread_id).first()
            if thread is None:
                raise NotFoundError(
                    "Chat not found",
                    error_code="THREAD_NOT_FOUND",
                    details={"chat_id": str(thread_id)},
                )
            message = Message.objects.create(thread=thread, sender=sender, text=text)
            thread.set_last_message(message)
            thread.increment_unread(recipient.pk)
        return thread, message

    # -------------------------------------------------------------------------
    # Realtime
    # -------------------------------------------------------------------------

    @classmethod
    def _emit_message_posted(cls, thread: Thread, view: MessageView) -> None:
        from chat.serializers import MessageViewSerializer

        payload = dict(MessageViewSerializer(view).data)
        cls._emit_after_commit(
            ChatFanout.message_posted,
            thread.pk,
            list(thread.participant_ids),
            payload,
        )

    @classmethod
    def _emit_after_commit(cls, emit, *args) -> None:
        """Run a fan-out call once the surrounding transaction commits."""

        def _send():
            try:
                emit(*args)
            except FanoutError as exc:
                cls.get_logger().warning(f"Realtime delivery failed: {exc} {exc.details}")

        transaction.on_commit(_send)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def _get_thread(cls, thread_uuid, *, for_update=False) -> Thread:
        queryset = Thread.objects.select_for_update() if for_update else Thread.objects
        thread = queryset.filter(pk=thread_uuid).first()
        if thread is None:
            raise NotFoundError(
                "Chat not found",
                error_code="THREAD_NOT_FOUND",
                details={"chat_id": str(thread_uuid)},
            )
        return thread

    @staticmethod
    def _parse_thread_id(thread_id) -> UUID:
        thread_uuid = parse_uuid(thread_id)
        if thread_uuid is None:
            raise InvalidIdError("Invalid chat ID", details={"chat_id": str(thread_id)})
        return thread_uuid

    @staticmethod
    def _parse_listing_id(listing_id) -> UUID:
        listing_uuid = parse_uuid(listing_id)
        if listing_uuid is None:
            raise ValidationError(
                "Invalid listing ID",
                error_code="INVALID_LISTING_ID",
                details={"listing_id": str(listing_id)},
            )
        return listing_uuid

    @staticmethod
    def _clean_text(text) -> str:
        text = text.strip() if isinstance(text, str) else ""
        if not text:
            raise ValidationError("Message text is required", error_code="MESSAGE_TEXT_REQUIRED")
        if len(text) > settings.CHAT_MESSAGE_MAX_LENGTH:
            raise ValidationError(
                f"Message text cannot exceed {settings.CHAT_MESSAGE_MAX_LENGTH} characters",
                error_code="MESSAGE_TOO_LONG",
            )
        return text

    @staticmethod
    def _ensure_distinct(user, recipient) -> None:
        if user.pk == recipient.pk:
            raise ValidationError("You cannot start a chat with yourself", error_code="SELF_CHAT")

    @staticmethod
    def _summarize(thread: Thread, user_id, listing: ListingContext) -> ThreadSummary:
        other = thread.other_participant(user_id)
        return ThreadSummary(
            chat_id=thread.pk,
            recipient_id=other.pk,
            recipient_firebase_uid=other.firebase_uid,
            recipient_name=other.display_name,
            recipient_avatar=other.profile_image_url or None,
            listing_id=thread.listing_id,
            listing_title=listing.title,
            last_message_text=thread.last_message_text or settings.CHAT_NO_MESSAGES_TEXT,
            last_message_timestamp=thread.last_message_at,
            last_message_sender_id=thread.last_message_sender_id,
            unread_count=thread.unread_count_for(user_id),
            state=thread.state,
            created_at=thread.created_at,
            updated_at=thread.updated_at,
        )
