"""
Serializers for chat API.

This module provides serializers for the chat system:
- Chat serializers (detail, list with unread counts)
- Message serializers (full message, latest-message preview)
- Request serializers validating HTTP bodies and query strings

Serializer Hierarchy:
    ChatSerializer: Chat with members, admins and latest message
    ChatListSerializer: ChatSerializer plus unreadCount, admins shown once
    ChatSummarySerializer: Chat fields without relations (embedded in messages)

    MessageSerializer: Message with sender, chat and readers
    LatestMessageSerializer: Message preview with compact sender

    DirectChatCreateSerializer, GroupChatCreateSerializer,
    GroupChatRenameSerializer, GroupMemberSerializer, GroupUsersSerializer,
    MessageListQuerySerializer, MessageCreateSerializer, MessageReadSerializer:
        Request validation

Design Decisions:
    - Read and write serializers are separate for clarity
    - Output keys are camelCase to match the socket payloads
    - Ids in requests are validated by shape here; existence is checked
      by the service layer
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from authentication.serializers import SenderSerializer, UserSerializer
from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG
from chat.models import Chat, Message
from core.serializer_mixins import ObjectIdField, TimestampMixin

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Message Serializers
# =============================================================================


class ChatSummarySerializer(TimestampMixin, serializers.ModelSerializer):
    """Chat fields without members; embedded in every message."""

    chatName = serializers.CharField(source="chat_name", read_only=True)
    isGroupChat = serializers.BooleanField(source="is_group_chat", read_only=True)
    groupIcon = serializers.CharField(source="group_icon", read_only=True)

    class Meta:
        model = Chat
        fields = [
            "id",
            "chatName",
            "isGroupChat",
            "groupIcon",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class LatestMessageSerializer(TimestampMixin, serializers.ModelSerializer):
    """
    Message preview shown on a chat.

    The sender is rendered in its compact form (no email).
    """

    chat = serializers.CharField(source="chat_id", read_only=True)
    sender = SenderSerializer(read_only=True)

    class Meta:
        model = Message
        fields = ["id", "chat", "sender", "content", "createdAt", "updatedAt"]
        read_only_fields = fields


class MessageSerializer(TimestampMixin, serializers.ModelSerializer):
    """
    Full message serializer for message lists, sends and read receipts.

    Expects a Message loaded through chat.services.message_queryset so the
    sender, chat and readers come from one round of queries.
    """

    chat = ChatSummarySerializer(read_only=True)
    sender = UserSerializer(read_only=True)
    readBy = UserSerializer(source="reader_list", many=True, read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "chat",
            "sender",
            "content",
            "readBy",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


# =============================================================================
# Chat Serializers
# =============================================================================


class ChatSerializer(TimestampMixin, serializers.ModelSerializer):
    """
    Chat with its members, admins and latest message.

    Expects a Chat loaded through chat.services.chat_queryset; members and
    admins are read from the prefetched through rows in insertion order.
    """

    chatName = serializers.CharField(source="chat_name", read_only=True)
    isGroupChat = serializers.BooleanField(source="is_group_chat", read_only=True)
    groupIcon = serializers.CharField(source="group_icon", read_only=True)
    users = UserSerializer(source="member_list", many=True, read_only=True)
    groupAdmins = UserSerializer(source="admin_list", many=True, read_only=True)
    latestMessage = LatestMessageSerializer(
        source="latest_message", read_only=True, allow_null=True
    )

    class Meta:
        model = Chat
        fields = [
            "id",
            "chatName",
            "isGroupChat",
            "groupIcon",
            "users",
            "groupAdmins",
            "latestMessage",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class ChatListSerializer(ChatSerializer):
    """
    Chat list entry.

    A user who is both member and admin is listed only under groupAdmins.
    unreadCount comes from the annotation added by ChatService.list_chats.
    """

    users = serializers.SerializerMethodField()
    unreadCount = serializers.IntegerField(
        source="unread_count",
        read_only=True,
        help_text="Messages not sent and not yet read by the current user",
    )

    class Meta(ChatSerializer.Meta):
        fields = ChatSerializer.Meta.fields + ["unreadCount"]
        read_only_fields = fields

    @extend_schema_field(UserSerializer(many=True))
    def get_users(self, obj: Chat) -> list[dict[str, Any]]:
        admin_ids = set(obj.admin_ids())
        members = [user for user in obj.member_list() if user.pk not in admin_ids]
        return UserSerializer(members, many=True, context=self.context).data


# =============================================================================
# Request Serializers
# =============================================================================


def _unique_ids(value: list[str]) -> list[str]:
    if len(set(value)) != len(value):
        raise serializers.ValidationError("Duplicate user ids are not allowed.")
    return value


class GroupNameField(serializers.CharField):
    """Group name, trimmed, 3-50 characters."""

    def __init__(self, **kwargs):
        kwargs.setdefault("min_length", CHAT_CONFIG.MIN_GROUP_NAME_LENGTH)
        kwargs.setdefault("max_length", CHAT_CONFIG.MAX_GROUP_NAME_LENGTH)
        super().__init__(**kwargs)


class DirectChatCreateSerializer(serializers.Serializer):
    """Body of POST /chats/."""

    userId = ObjectIdField(help_text="User to open a direct chat with")


class GroupChatCreateSerializer(serializers.Serializer):
    """Body of POST /chats/group/."""

    chatName = GroupNameField(help_text="Group name (3-50 characters)")
    users = serializers.ListField(
        child=ObjectIdField(),
        min_length=1,
        help_text="Other members; the requester is added automatically",
    )

    def validate_users(self, value: list[str]) -> list[str]:
        return _unique_ids(value)


class GroupChatRenameSerializer(serializers.Serializer):
    """Body of PUT /chats/group/rename/."""

    chatId = ObjectIdField()
    chatName = GroupNameField()


class GroupMemberSerializer(serializers.Serializer):
    """Body of PUT /chats/group/add-member/ and /chats/group/remove-member/."""

    chatId = ObjectIdField()
    userId = ObjectIdField()


class GroupUsersSerializer(serializers.Serializer):
    """Body of PUT /chats/group/users/ and /chats/group/admins/."""

    chatId = ObjectIdField()
    users = serializers.ListField(child=ObjectIdField(), min_length=1)

    def validate_users(self, value: list[str]) -> list[str]:
        return _unique_ids(value)


class MessageListQuerySerializer(serializers.Serializer):
    """Query string of GET /messages/."""

    chatId = ObjectIdField()


class MessageCreateSerializer(serializers.Serializer):
    """Body of POST /messages/."""

    chatId = ObjectIdField()
    message = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        help_text="Message text (leading and trailing whitespace is trimmed)",
    )


class MessageReadSerializer(serializers.Serializer):
    """Body of PUT /messages/readBy/."""

    messageId = ObjectIdField()
