"""
Chat models.

A Thread is a conversation between exactly two users about one listing.
Messages form an append-only log per thread. Per-participant state
(unread counter, hidden flag) lives on ThreadParticipant rows so every
counter change is a single keyed UPDATE.

Lifecycle (Thread.state, django-fsm):

    (no row) --first message--> ACTIVE --one side deletes--> HIDDEN_BY_ONE
    HIDDEN_BY_ONE --other side deletes--> DELETED (row and messages purged)

There is no way back from HIDDEN_BY_ONE to ACTIVE.

Related files:
    - services.py: ChatService (the operations that drive these models)
    - realtime.py: channel naming and event emission
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


def ordered_pair(user_a_id: int, user_b_id: int) -> tuple[int, int]:
    """Return two user ids as (lower, higher), the stored order of a pair."""
    return (user_a_id, user_b_id) if user_a_id < user_b_id else (user_b_id, user_a_id)


class ThreadState(models.TextChoices):
    ACTIVE = "active", "Active"
    HIDDEN_BY_ONE = "hidden_by_one", "Hidden by one participant"
    DELETED = "deleted", "Deleted"


# =============================================================================
# Thread
# =============================================================================


class ThreadQuerySet(models.QuerySet):
    def for_participant(self, user_id):
        """
        Threads the user belongs to and has not hidden, most recent first.

        Both conditions sit in one filter() call so they apply to the same
        membership row.
        """
        return self.filter(
            memberships__user_id=user_id,
            memberships__hidden_at__isnull=True,
        ).order_by("-updated_at", "-created_at")

    def between(self, user_a_id, user_b_id, listing_id):
        """Exact match on the unordered pair and listing."""
        lower, higher = ordered_pair(user_a_id, user_b_id)
        return self.filter(user_lower_id=lower, user_higher_id=higher, listing_id=listing_id)

    def involving(self, user_id):
        return self.filter(Q(user_lower_id=user_id) | Q(user_higher_id=user_id))


class ThreadManager(models.Manager.from_queryset(ThreadQuerySet)):
    def create_thread(self, user_a, user_b, listing_id, *, unread_by=None):
        """
        Create a thread with both participant rows.

        Args:
            user_a, user_b: The two participants, in any order
            listing_id: Listing the conversation is about (required)
            unread_by: Optional {user_id: count} seed for unread counters

        Raises:
            ValueError: listing_id missing or participants not distinct
            IntegrityError: a thread for this pair and listing already exists
        """
        if not listing_id:
            raise ValueError("A thread requires a listing")
        if user_a.pk == user_b.pk:
            raise ValueError("A thread requires two distinct participants")

        lower, higher = ordered_pair(user_a.pk, user_b.pk)
        thread = self.create(
            user_lower_id=lower,
            user_higher_id=higher,
            listing_id=listing_id,
        )
        unread_by = unread_by or {}
        ThreadParticipant.objects.bulk_create(
            [
                ThreadParticipant(
                    thread=thread,
                    user_id=user_id,
                    unread_count=unread_by.get(user_id, 0),
                )
                for user_id in (lower, higher)
            ]
        )
        return thread


class Thread(UUIDPrimaryKeyMixin, BaseModel):
    """
    Two-participant conversation about one listing.

    Fields:
        user_lower / user_higher: The participants, stored ordered by
            primary key so the pair has a single representation
        listing: Listing the conversation is about. No database constraint:
            a removed listing leaves its conversations readable
        state: Lifecycle state, only changed through transitions
        last_message_*: Denormalized cache of the newest message
    """

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="Participant with the lower user id",
    )
    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="Participant with the higher user id",
    )
    listing = models.ForeignKey(
        "listings.Listing",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="chat_threads",
        help_text="Listing this conversation is about",
    )
    state = FSMField(
        default=ThreadState.ACTIVE,
        choices=ThreadState.choices,
        protected=True,
        help_text="Lifecycle state",
    )

    last_message_text = models.TextField(
        blank=True,
        default="",
        help_text="Text of the most recent message",
    )
    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp of the most recent message",
    )
    last_message_sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Sender of the most recent message",
    )

    objects = ThreadManager()

    class Meta:
        db_table = "chat_thread"
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["user_lower", "-updated_at"], name="thread_lower_updated_idx"),
            models.Index(fields=["user_higher", "-updated_at"], name="thread_higher_updated_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user_lower", "user_higher", "listing"],
                name="unique_thread_per_pair_listing",
            ),
            models.CheckConstraint(
                condition=Q(user_lower__lt=F("user_higher")),
                name="thread_participants_ordered",
            ),
        ]

    def __str__(self):
        return f"Thread {self.id} ({self.user_lower_id}, {self.user_higher_id})"

    # -------------------------------------------------------------------------
    # Participants
    # -------------------------------------------------------------------------

    @property
    def participant_ids(self) -> tuple[int, int]:
        return (self.user_lower_id, self.user_higher_id)

    def has_participant(self, user_id) -> bool:
        return user_id in self.participant_ids

    def other_participant_id(self, user_id) -> int:
        if user_id == self.user_lower_id:
            return self.user_higher_id
        if user_id == self.user_higher_id:
            return self.user_lower_id
        raise ValueError(f"User {user_id} is not a participant in thread {self.id}")

    def other_participant(self, user_id):
        return self.user_higher if user_id == self.user_lower_id else self.user_lower

    @property
    def unread_count_by_participant(self) -> dict[int, int]:
        """Mapping of participant id to unread count."""
        return {m.user_id: m.unread_count for m in self.memberships.all()}

    @property
    def hidden_by(self) -> set[int]:
        """Participant ids who have hidden the thread."""
        return {m.user_id for m in self.memberships.all() if m.hidden_at is not None}

    def unread_count_for(self, user_id) -> int:
        return self.unread_count_by_participant.get(user_id, 0)

    # -------------------------------------------------------------------------
    # Per-participant state (single-statement updates)
    # -------------------------------------------------------------------------

    def increment_unread(self, user_id, delta: int = 1) -> int:
        return ThreadParticipant.objects.filter(thread_id=self.pk, user_id=user_id).update(
            unread_count=F("unread_count") + delta
        )

    def reset_unread(self, user_id) -> int:
        return ThreadParticipant.objects.filter(thread_id=self.pk, user_id=user_id).update(
            unread_count=0
        )

    def add_hidden(self, user_id) -> int:
        """Mark the thread hidden for one participant. Idempotent."""
        return ThreadParticipant.objects.filter(
            thread_id=self.pk,
            user_id=user_id,
            hidden_at__isnull=True,
        ).update(hidden_at=timezone.now())

    def is_hidden_by(self, user_id) -> bool:
        return ThreadParticipant.objects.filter(
            thread_id=self.pk,
            user_id=user_id,
            hidden_at__isnull=False,
        ).exists()

    def is_hidden_by_other(self, user_id) -> bool:
        """True iff the participant other than ``user_id`` has hidden the thread."""
        return self.is_hidden_by(self.other_participant_id(user_id))

    def set_last_message(self, message: Message) -> None:
        """Point the last-message cache at ``message`` and bump updated_at."""
        self.last_message_text = message.text
        self.last_message_at = message.created_at
        self.last_message_sender_id = message.sender_id
        self.save(
            update_fields=[
                "last_message_text",
                "last_message_at",
                "last_message_sender",
                "updated_at",
            ]
        )

    # -------------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------------

    @transition(field=state, source=ThreadState.ACTIVE, target=ThreadState.HIDDEN_BY_ONE)
    def hide(self):
        """One participant has hidden the thread; the other still sees it."""

    @transition(field=state, source=ThreadState.HIDDEN_BY_ONE, target=ThreadState.DELETED)
    def abandon(self):
        """Both participants have deleted the thread; it will be purged."""

    def purge(self) -> int:
        """
        Permanently delete the thread and all its messages.

        Returns:
            Number of messages removed
        """
        removed = Message.objects.purge_thread(self.pk)
        self.delete()
        return removed


class ThreadParticipant(BaseModel):
    """
    A participant's private view of a thread.

    Fields:
        unread_count: Messages received since the participant last read
        hidden_at: When the participant hid (soft-deleted) the thread
    """

    thread = models.ForeignKey(
        Thread,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Thread this row belongs to",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_memberships",
        help_text="Participant",
    )
    unread_count = models.PositiveIntegerField(
        default=0,
        help_text="Messages not yet read by this participant",
    )
    hidden_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When this participant hid the thread",
    )

    class Meta:
        db_table = "chat_thread_participant"
        ordering = ["thread", "user"]
        constraints = [
            models.UniqueConstraint(
                fields=["thread", "user"],
                name="unique_thread_participant",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "hidden_at"], name="participant_user_hidden_idx"),
        ]

    def __str__(self):
        return f"User {self.user_id} in thread {self.thread_id}"


# =============================================================================
# Message
# =============================================================================


class MessageQuerySet(models.QuerySet):
    def for_thread(self, thread_id):
        """Messages of one thread, oldest first."""
        return self.filter(thread_id=thread_id).order_by("created_at", "id")

    def purge_thread(self, thread_id) -> int:
        deleted, _ = self.filter(thread_id=thread_id).delete()
        return deleted


class Message(BaseModel):
    """
    One message in a thread. Immutable once stored.

    created_at is the message timestamp.
    """

    thread = models.ForeignKey(
        Thread,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Thread this message belongs to",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_messages",
        help_text="Participant who sent the message",
    )
    text = models.TextField(help_text="Message text (trimmed, non-empty)")

    objects = MessageQuerySet.as_manager()

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["thread", "created_at"], name="message_thread_created_idx"),
        ]

    def __str__(self):
        return f"Message {self.id} in thread {self.thread_id}"

    @property
    def timestamp(self):
        return self.created_at
