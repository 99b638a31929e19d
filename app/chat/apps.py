"""
Chat application configuration.

This app provides listing-scoped two-person chat:
- Threads keyed by participant pair and listing
- Append-only message log with per-participant unread counters
- Hide-then-purge deletion
- Realtime delivery over Django Channels
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
