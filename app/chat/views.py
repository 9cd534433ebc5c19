"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ChatViewSet: Chat listing, direct chats, group management
- MessageViewSet: Message listing, sending, read receipts

URL Structure:
    /api/v1/chats/                          GET, POST
    /api/v1/chats/group/                    POST
    /api/v1/chats/group/rename/             PUT
    /api/v1/chats/group/add-member/         PUT
    /api/v1/chats/group/remove-member/      PUT
    /api/v1/chats/group/users/              PUT
    /api/v1/chats/group/admins/             PUT
    /api/v1/messages/?chatId=               GET
    /api/v1/messages/                       POST
    /api/v1/messages/readBy/                PUT

Design Decisions:
    - ViewSets are plain ViewSets; chat ids travel in bodies and query
      strings, so routes are declared explicitly in urls.py
    - Request serializers validate shape; services validate existence and
      authority and return ServiceResult
    - Responses use the success envelope; failures are raised and rendered
      by core.exception_handler
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from chat.serializers import (
    ChatListSerializer,
    ChatSerializer,
    DirectChatCreateSerializer,
    GroupChatCreateSerializer,
    GroupChatRenameSerializer,
    GroupMemberSerializer,
    GroupUsersSerializer,
    MessageCreateSerializer,
    MessageListQuerySerializer,
    MessageReadSerializer,
    MessageSerializer,
)
from chat.services import ChatService, MessageService
from core.viewset_mixins import ServiceResultMixin

_ERRORS = {
    403: OpenApiResponse(description="Requester lacks the required role"),
    404: OpenApiResponse(description="Chat or user not found"),
    422: OpenApiResponse(description="Invalid request body"),
}


@extend_schema_view(
    list=extend_schema(
        operation_id="list_chats",
        summary="List chats",
        tags=["Chat - Chats"],
        responses={200: ChatListSerializer(many=True)},
    ),
    create=extend_schema(
        operation_id="access_direct_chat",
        summary="Get or create direct chat",
        tags=["Chat - Chats"],
        request=DirectChatCreateSerializer,
        responses={200: ChatSerializer, 400: OpenApiResponse(description="Chat with yourself"), **_ERRORS},
    ),
    create_group=extend_schema(
        operation_id="create_group_chat",
        summary="Create group chat",
        tags=["Chat - Chats"],
        request=GroupChatCreateSerializer,
        responses={200: ChatSerializer, **_ERRORS},
    ),
    rename=extend_schema(
        operation_id="rename_group_chat",
        summary="Rename group chat",
        tags=["Chat - Chats"],
        request=GroupChatRenameSerializer,
        responses={200: ChatSerializer, **_ERRORS},
    ),
    add_member=extend_schema(
        operation_id="add_group_member",
        summary="Add group member",
        tags=["Chat - Chats"],
        request=GroupMemberSerializer,
        responses={200: ChatSerializer, 409: OpenApiResponse(description="Already a member"), **_ERRORS},
    ),
    remove_member=extend_schema(
        operation_id="remove_group_member",
        summary="Remove group member or leave group",
        tags=["Chat - Chats"],
        request=GroupMemberSerializer,
        responses={200: ChatSerializer, 400: OpenApiResponse(description="Sole admin cannot leave"), **_ERRORS},
    ),
    replace_users=extend_schema(
        operation_id="replace_group_members",
        summary="Replace group members",
        tags=["Chat - Chats"],
        request=GroupUsersSerializer,
        responses={200: ChatSerializer, **_ERRORS},
    ),
    replace_admins=extend_schema(
        operation_id="replace_group_admins",
        summary="Replace group admins",
        tags=["Chat - Chats"],
        request=GroupUsersSerializer,
        responses={200: ChatSerializer, **_ERRORS},
    ),
)
class ChatViewSet(ServiceResultMixin, viewsets.ViewSet):
    """
    ViewSet for chat operations.

    list:
        Get all chats where the current user is a member or admin, most
        recently active first, each with its unread message count.

    create:
        Open the direct chat with another user. Returns the existing chat
        if the pair already has one.

    create_group:
        Create a group; the requester becomes its first member and admin.

    rename, add_member, replace_users, replace_admins:
        Admin-only group management.

    remove_member:
        Remove a member (admins) or leave the group (anyone).
    """

    permission_classes = [IsAuthenticated]

    def _validated(self, serializer_class, data) -> dict:
        serializer = serializer_class(data=data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def list(self, request):
        result = ChatService.list_chats(request.user)
        return self.render_result(result, ChatListSerializer, key="chats", many=True)

    def create(self, request):
        data = self._validated(DirectChatCreateSerializer, request.data)
        result = ChatService.get_or_create_direct_chat(request.user, data["userId"])
        return self.render_result(result, ChatSerializer, key="chat")

    def create_group(self, request):
        data = self._validated(GroupChatCreateSerializer, request.data)
        result = ChatService.create_group_chat(
            request.user, data["chatName"], data["users"]
        )
        return self.render_result(result, ChatSerializer, key="chat")

    def rename(self, request):
        data = self._validated(GroupChatRenameSerializer, request.data)
        result = ChatService.rename_group_chat(
            request.user, data["chatId"], data["chatName"]
        )
        return self.render_result(result, ChatSerializer, key="chat")

    def add_member(self, request):
        data = self._validated(GroupMemberSerializer, request.data)
        result = ChatService.add_member(request.user, data["chatId"], data["userId"])
        return self.render_result(result, ChatSerializer, key="chat")

    def remove_member(self, request):
        data = self._validated(GroupMemberSerializer, request.data)
        result = ChatService.remove_member(request.user, data["chatId"], data["userId"])
        return self.render_result(result, ChatSerializer, key="chat")

    def replace_users(self, request):
        data = self._validated(GroupUsersSerializer, request.data)
        result = ChatService.replace_members(request.user, data["chatId"], data["users"])
        return self.render_result(result, ChatSerializer, key="chat")

    def replace_admins(self, request):
        data = self._validated(GroupUsersSerializer, request.data)
        result = ChatService.replace_admins(request.user, data["chatId"], data["users"])
        return self.render_result(result, ChatSerializer, key="chat")


@extend_schema_view(
    list=extend_schema(
        operation_id="list_messages",
        summary="List messages of a chat",
        tags=["Chat - Messages"],
        parameters=[
            OpenApiParameter(
                name="chatId",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Chat to list messages from",
            ),
        ],
        responses={200: MessageSerializer(many=True), **_ERRORS},
    ),
    create=extend_schema(
        operation_id="send_message",
        summary="Send message",
        tags=["Chat - Messages"],
        request=MessageCreateSerializer,
        responses={200: MessageSerializer, **_ERRORS},
    ),
    mark_read=extend_schema(
        operation_id="mark_message_read",
        summary="Mark message as read",
        tags=["Chat - Messages"],
        request=MessageReadSerializer,
        responses={
            200: MessageSerializer,
            400: OpenApiResponse(description="Own, already read or unknown message"),
            **_ERRORS,
        },
    ),
)
class MessageViewSet(ServiceResultMixin, viewsets.ViewSet):
    """
    ViewSet for message operations.

    list:
        All messages of a chat, oldest first. Members and admins only.

    create:
        Send a message to a chat the requester is a member of. The message
        becomes the chat's latest message.

    mark_read:
        Add the requester to a message's readers.
    """

    permission_classes = [IsAuthenticated]

    def list(self, request):
        query = MessageListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = MessageService.list_messages(request.user, query.validated_data["chatId"])
        return self.render_result(result, MessageSerializer, key="messages", many=True)

    def create(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.send_message(
            request.user,
            serializer.validated_data["chatId"],
            serializer.validated_data["message"],
        )
        return self.render_result(result, MessageSerializer, key="message")

    def mark_read(self, request):
        serializer = MessageReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.mark_read(request.user, serializer.validated_data["messageId"])
        return self.render_result(result, MessageSerializer, key="message")
