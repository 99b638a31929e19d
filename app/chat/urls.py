"""
URL configuration for chat API.

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import path

from chat.views import (
    MessageCreateView,
    ThreadDetailView,
    ThreadFindView,
    ThreadListView,
    ThreadMessagesView,
)

app_name = "chat"

urlpatterns = [
    path("threads/", ThreadListView.as_view(), name="thread-list"),
    path("threads/<str:thread_id>/", ThreadDetailView.as_view(), name="thread-detail"),
    path("messages/", MessageCreateView.as_view(), name="message-create"),
    path("find/<str:recipient>/", ThreadFindView.as_view(), name="thread-find"),
    path("<str:thread_id>/messages/", ThreadMessagesView.as_view(), name="thread-messages"),
]
