"""
Django admin configuration for chat models.

Threads are read-mostly here: state only changes through ChatService,
so it is shown but not editable.
"""

from django.contrib import admin

from chat.models import Message, Thread, ThreadParticipant


class ThreadParticipantInline(admin.TabularInline):
    """Inline display of participant rows in thread admin."""

    model = ThreadParticipant
    extra = 0
    readonly_fields = ["user", "unread_count", "hidden_at", "created_at"]
    can_delete = False


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    fields = ["sender", "text", "created_at"]
    readonly_fields = ["sender", "text", "created_at"]
    ordering = ["-created_at"]
    show_change_link = True


@admin.register(Thread)
class ThreadAdmin(admin.ModelAdmin):
    """Admin interface for Thread model."""

    list_display = [
        "id",
        "user_lower",
        "user_higher",
        "listing_id",
        "state",
        "last_message_at",
        "updated_at",
    ]
    list_filter = ["state", "created_at"]
    search_fields = [
        "id",
        "user_lower__email",
        "user_higher__email",
        "user_lower__firebase_uid",
        "user_higher__firebase_uid",
    ]
    readonly_fields = [
        "state",
        "last_message_text",
        "last_message_at",
        "last_message_sender",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["user_lower", "user_higher", "listing"]
    inlines = [ThreadParticipantInline, MessageInline]
    ordering = ["-updated_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message moderation."""

    list_display = ["id", "thread", "sender", "short_text", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["text", "sender__email", "thread__id"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["thread", "sender"]
    ordering = ["-created_at"]

    @admin.display(description="Text")
    def short_text(self, obj):
        return obj.text[:50] + "..." if len(obj.text) > 50 else obj.text
