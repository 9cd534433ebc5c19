"""
Service-level authorization for chat operations.

Every chat and message operation is listed in CHAT_POLICY with the role it
requires. Services call ChatAuthorizationService.check() with the operation
name instead of writing their own membership/admin checks, so the rules for
one operation can be read (and changed) in one place.

Roles:
    PARTICIPANT: member or admin of the chat
    MEMBER: current member of the chat
    ADMIN: admin of the chat
    ADMIN_OR_SELF: admin, or the requester acting on themself

Error Codes:
    NOT_PARTICIPANT: Requester is neither member nor admin
    NOT_MEMBER: Requester is not a current member
    NOT_ADMIN: Requester is not an admin

Usage:
    failure = ChatAuthorizationService.check(user, chat, ChatOperation.RENAME)
    if failure is not None:
        return failure
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from core.exceptions import ErrorKind
from core.services import ServiceResult

if TYPE_CHECKING:
    from authentication.models import User
    from chat.models import Chat


class ChatRole(str, Enum):
    """Role a requester must hold in a chat."""

    PARTICIPANT = "participant"
    MEMBER = "member"
    ADMIN = "admin"
    ADMIN_OR_SELF = "admin_or_self"


class ChatOperation(str, Enum):
    """Operations guarded by the policy table."""

    LIST_MESSAGES = "list_messages"
    SEND_MESSAGE = "send_message"
    MARK_READ = "mark_read"
    JOIN_CHAT = "join_chat"
    RENAME = "rename"
    ADD_MEMBER = "add_member"
    REMOVE_MEMBER = "remove_member"
    REPLACE_MEMBERS = "replace_members"
    REPLACE_ADMINS = "replace_admins"


CHAT_POLICY: dict[ChatOperation, ChatRole] = {
    ChatOperation.LIST_MESSAGES: ChatRole.PARTICIPANT,
    ChatOperation.SEND_MESSAGE: ChatRole.MEMBER,
    ChatOperation.MARK_READ: ChatRole.MEMBER,
    ChatOperation.JOIN_CHAT: ChatRole.PARTICIPANT,
    ChatOperation.RENAME: ChatRole.ADMIN,
    ChatOperation.ADD_MEMBER: ChatRole.ADMIN,
    ChatOperation.REMOVE_MEMBER: ChatRole.ADMIN_OR_SELF,
    ChatOperation.REPLACE_MEMBERS: ChatRole.ADMIN,
    ChatOperation.REPLACE_ADMINS: ChatRole.ADMIN,
}


class ChatAuthorizationService:
    """
    Stateless service providing authorization checks for chat operations.

    All methods are classmethods and can be called directly without instantiation.
    Membership checks query the through tables; results are not cached.
    """

    @classmethod
    def is_member(cls, user_id: str, chat_id: str) -> bool:
        """Check if user is a current member of the chat."""
        from chat.models import ChatMembership

        return ChatMembership.objects.filter(chat_id=chat_id, user_id=user_id).exists()

    @classmethod
    def is_admin(cls, user_id: str, chat_id: str) -> bool:
        """Check if user is an admin of the chat."""
        from chat.models import ChatAdmin

        return ChatAdmin.objects.filter(chat_id=chat_id, user_id=user_id).exists()

    @classmethod
    def is_participant(cls, user_id: str, chat_id: str) -> bool:
        """Check if user is a member or an admin of the chat."""
        return cls.is_member(user_id, chat_id) or cls.is_admin(user_id, chat_id)

    @classmethod
    def has_role(
        cls,
        user: User,
        chat: Chat,
        role: ChatRole,
        target_user_id: str | None = None,
    ) -> bool:
        """
        Check whether user holds role in chat.

        Args:
            user: Requester
            chat: Chat being acted on
            role: Required role
            target_user_id: User the operation acts on (for ADMIN_OR_SELF)
        """
        if role is ChatRole.PARTICIPANT:
            return cls.is_participant(user.pk, chat.pk)
        if role is ChatRole.MEMBER:
            return cls.is_member(user.pk, chat.pk)
        if role is ChatRole.ADMIN_OR_SELF and target_user_id == user.pk:
            return True
        return cls.is_admin(user.pk, chat.pk)

    @classmethod
    def check(
        cls,
        user: User,
        chat: Chat,
        operation: ChatOperation,
        target_user_id: str | None = None,
    ) -> ServiceResult | None:
        """
        Apply the policy for operation.

        Returns:
            None when allowed, otherwise a Forbidden ServiceResult
        """
        role = CHAT_POLICY[operation]
        if cls.has_role(user, chat, role, target_user_id):
            return None

        if role is ChatRole.PARTICIPANT:
            message, code = "You are not a participant of this chat", "NOT_PARTICIPANT"
        elif role is ChatRole.MEMBER:
            message, code = "You are not a member of this chat", "NOT_MEMBER"
        else:
            message, code = "Only group admins can perform this action", "NOT_ADMIN"

        return ServiceResult.failure(
            message,
            error_code=code,
            kind=ErrorKind.FORBIDDEN,
        )
