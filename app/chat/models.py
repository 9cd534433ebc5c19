"""
Chat system models.

This module defines the data models for the chat system supporting:
- Direct (1:1) conversations between exactly two users
- Group conversations with a member set and an admin set

Models:
    Chat: Container for messages between users
    ChatMembership: Ordered, unique membership of a user in a chat
    ChatAdmin: Ordered, unique admin role of a user in a group chat
    DirectChatPair: Helper enforcing one direct chat per unordered user pair
    Message: Individual message within a chat
    MessageRead: Read receipt of a message by one user

Design Decisions:
    - Membership and admin role are two independent relations; services keep
      every admin a member and never leave a group without an admin
    - Through tables use auto-increment keys so insertion order is the
      display order
    - Messages are immutable except for the growing read-receipt set
    - Every chat mutation bumps Chat.updated_at so listings sort by activity
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import F, Q

from chat.constants import CHAT_CONFIG
from core.model_mixins import ObjectIdPrimaryKeyMixin
from core.models import BaseModel

if TYPE_CHECKING:
    from authentication.models import User


class Chat(ObjectIdPrimaryKeyMixin, BaseModel):
    """
    A conversation between two or more users.

    Chat Types:
        Direct (is_group_chat=False): exactly 2 members, no admins, name is
            the placeholder "sender". Unique per user pair via DirectChatPair.

        Group (is_group_chat=True): at least one member and one admin; every
            admin is also a member.

    Fields:
        chat_name: Group name, or the direct chat placeholder
        is_group_chat: Direct or group
        group_icon: Storage path of the group icon
        latest_message: Most recently sent message (last writer wins)

    Relationships:
        users: Members, through ChatMembership
        group_admins: Admins, through ChatAdmin
        messages: All Message records for this chat
        direct_pair: DirectChatPair if this is a direct chat
    """

    chat_name = models.CharField(
        max_length=CHAT_CONFIG.MAX_GROUP_NAME_LENGTH,
        help_text="Group name (placeholder for direct chats)",
    )

    is_group_chat = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether this is a group chat",
    )

    group_icon = models.CharField(
        max_length=255,
        default=CHAT_CONFIG.DEFAULT_GROUP_ICON,
        help_text="Storage path of the group icon",
    )

    latest_message = models.ForeignKey(
        "chat.Message",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Most recent message in this chat",
    )

    users = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="chat.ChatMembership",
        related_name="chats",
        help_text="Members of this chat",
    )

    group_admins = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="chat.ChatAdmin",
        related_name="administered_chats",
        help_text="Admins of this group chat",
    )

    class Meta:
        db_table = "chat_chat"
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["-updated_at"], name="chat_chat_updated_idx"),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        if self.is_group_chat:
            return f"Group: {self.chat_name}"
        return f"Direct({self.pk})"

    def member_list(self) -> list[User]:
        """Members in insertion order (uses prefetched memberships if present)."""
        return [membership.user for membership in self.memberships.all()]

    def admin_list(self) -> list[User]:
        """Admins in insertion order (uses prefetched admin entries if present)."""
        return [entry.user for entry in self.admin_entries.all()]

    def member_ids(self) -> list[str]:
        return [membership.user_id for membership in self.memberships.all()]

    def admin_ids(self) -> list[str]:
        return [entry.user_id for entry in self.admin_entries.all()]

    def participant_ids(self) -> list[str]:
        """Members followed by admins who are not members, without duplicates."""
        ids = self.member_ids()
        ids.extend(user_id for user_id in self.admin_ids() if user_id not in ids)
        return ids


class ChatMembership(models.Model):
    """
    Membership of a user in a chat.

    The auto-increment key records insertion order; the unique constraint
    keeps membership a set.
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_memberships",
    )
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "chat_membership"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user"],
                name="unique_chat_membership",
            ),
        ]

    def __str__(self) -> str:
        return f"Membership(chat={self.chat_id}, user={self.user_id})"


class ChatAdmin(models.Model):
    """Admin role of a user in a group chat."""

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="admin_entries",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_admin_roles",
    )
    granted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "chat_admin"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user"],
                name="unique_chat_admin",
            ),
        ]

    def __str__(self) -> str:
        return f"Admin(chat={self.chat_id}, user={self.user_id})"


class DirectChatPair(models.Model):
    """
    Enforces uniqueness of direct chats between two users.

    Stores user pairs in canonical order (lower id first) so that whoever
    initiates, there is only one direct chat per pair.

    Constraints:
        - UniqueConstraint(user_lower, user_higher): One chat per pair
        - CheckConstraint(user_lower_id < user_higher_id): Canonical order
    """

    chat = models.OneToOneField(
        Chat,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="direct_pair",
        help_text="The direct chat this pair represents",
    )

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with lower id in this pair",
    )

    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with higher id in this pair",
    )

    class Meta:
        db_table = "chat_direct_pair"
        constraints = [
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                name="unique_direct_chat_pair",
            ),
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="direct_pair_lower_less_than_higher",
            ),
        ]

    def __str__(self) -> str:
        return f"DirectPair({self.user_lower_id}, {self.user_higher_id})"

    @staticmethod
    def canonical_order(first_id: str, second_id: str) -> tuple[str, str]:
        """Return the two ids as (lower, higher)."""
        return (first_id, second_id) if first_id < second_id else (second_id, first_id)


class Message(ObjectIdPrimaryKeyMixin, BaseModel):
    """
    Individual message within a chat.

    Fields:
        chat: Owning chat (immutable)
        sender: Author (immutable)
        content: Non-empty text

    Relationships:
        read_by: Users who marked the message read, through MessageRead.
            Never contains the sender; only grows.
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Chat this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(help_text="Message text")

    read_by = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="chat.MessageRead",
        related_name="read_messages",
        help_text="Users who have read this message",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["chat", "created_at"], name="chat_msg_chat_created_idx"),
        ]

    def __str__(self) -> str:
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"Message({self.pk}): {preview}"

    def reader_list(self) -> list[User]:
        """Readers in the order they read (uses prefetched receipts if present)."""
        return [receipt.user for receipt in self.reads.all()]


class MessageRead(models.Model):
    """Read receipt: ``user`` has read ``message``."""

    message = models.ForeignKey(
        Message,
        on_delete=models.CASCADE,
        related_name="reads",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="message_reads",
    )
    read_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "chat_message_read"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["message", "user"],
                name="unique_message_read",
            ),
        ]

    def __str__(self) -> str:
        return f"Read(message={self.message_id}, user={self.user_id})"
