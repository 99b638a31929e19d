"""
API views for chat.

URL Structure (prefixed with /api/v1/chat/):
    threads/                       GET     inbox of the current user
    threads/{chat_id}/             DELETE  delete a thread for the current user
    {chat_id}/messages/            GET     message log; marks the thread read
    messages/                      POST    send a message
    find/{recipient}/?listingId=   GET     existing thread with a recipient

Views stay thin: they validate request shape, call ChatService and
serialize its projections. Errors raised by the service are rendered by
core.exception_handlers.api_exception_handler.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.serializers import (
    FindThreadResponseSerializer,
    MessageViewSerializer,
    PostMessageSerializer,
    ThreadSummarySerializer,
)
from chat.services import ChatService


class ThreadListView(APIView):
    """
    List the current user's chats.

    GET /api/v1/chat/threads/

    Hidden threads are excluded. Most recently active first.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_chats",
        summary="List chats",
        tags=["Chat"],
        responses={200: ThreadSummarySerializer(many=True)},
    )
    def get(self, request):
        summaries = ChatService.list_threads(request.user)
        return Response(ThreadSummarySerializer(summaries, many=True).data)


class ThreadDetailView(APIView):
    """
    Delete a chat for the current user.

    DELETE /api/v1/chat/threads/{chat_id}/

    The first participant to delete only hides the chat. When the second
    one deletes, the chat and its messages are removed for good.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="delete_chat",
        summary="Delete chat",
        tags=["Chat"],
        responses={
            204: OpenApiResponse(description="Chat hidden or removed"),
            400: OpenApiResponse(description="Malformed chat id"),
            404: OpenApiResponse(description="Chat not found"),
        },
    )
    def delete(self, request, thread_id):
        ChatService.delete_thread(request.user, thread_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ThreadMessagesView(APIView):
    """
    Get a chat's messages, oldest first.

    GET /api/v1/chat/{chat_id}/messages/

    Resets the caller's unread counter and notifies the other participant.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_chat_messages",
        summary="Get chat messages",
        tags=["Chat"],
        responses={
            200: MessageViewSerializer(many=True),
            400: OpenApiResponse(description="Malformed chat id"),
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Chat not found"),
        },
    )
    def get(self, request, thread_id):
        messages = ChatService.get_messages(request.user, thread_id)
        return Response(MessageViewSerializer(messages, many=True).data)


class MessageCreateView(APIView):
    """
    Send a message.

    POST /api/v1/chat/messages/

    Payload:
        text: Message text
        otherUserId: Recipient user id or Firebase UID
        chatId: Optional existing chat id
        listingId: Listing id, required when no chat exists yet
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="send_message",
        summary="Send message",
        tags=["Chat"],
        request=PostMessageSerializer,
        responses={
            201: MessageViewSerializer,
            400: OpenApiResponse(description="Invalid message or missing listing"),
            403: OpenApiResponse(description="Not a participant of the given chat"),
            404: OpenApiResponse(description="Recipient or listing not found"),
        },
    )
    def post(self, request):
        serializer = PostMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        message = ChatService.post_message(
            request.user,
            recipient_ref=data["otherUserId"],
            text=data["text"],
            thread_id=data.get("chatId"),
            listing_id=data.get("listingId"),
        )
        return Response(MessageViewSerializer(message).data, status=status.HTTP_201_CREATED)


class ThreadFindView(APIView):
    """
    Look up the chat between the current user and a recipient.

    GET /api/v1/chat/find/{recipient}/?listingId={listing_id}

    Returns {"thread": null} when the two have not talked about the
    listing yet.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="find_chat",
        summary="Find chat with user",
        tags=["Chat"],
        parameters=[
            OpenApiParameter(
                name="listingId",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                description="Listing the chat is about",
                required=True,
            ),
        ],
        responses={200: FindThreadResponseSerializer},
    )
    def get(self, request, recipient):
        summary = ChatService.find_thread(
            request.user,
            recipient,
            request.query_params.get("listingId"),
        )
        return Response(FindThreadResponseSerializer({"thread": summary}).data)
