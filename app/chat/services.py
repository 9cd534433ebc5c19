"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all operations on chats, their members and admins, and messages.

Services:
    ChatService: Chat lifecycle (direct get-or-create, groups, membership)
    MessageService: Message operations (list, send, mark as read)

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure() with an error kind
    - Unexpected failures raise exceptions
    - Every mutation runs in a transaction and bumps Chat.updated_at
    - Authority checks go through ChatAuthorizationService

Usage:
    from chat.services import ChatService, MessageService

    # Get or create a direct chat
    result = ChatService.get_or_create_direct_chat(user, other_user_id)
    if result.success:
        chat = result.data

    # Create a group chat
    result = ChatService.create_group_chat(
        requester=user,
        chat_name="Team",
        member_ids=[b_id, c_id],
    )

    # Send a message
    result = MessageService.send_message(
        sender=user,
        chat_id=chat.id,
        content="Hello everyone!",
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Count, IntegerField, OuterRef, Prefetch, Q, Subquery
from django.db.models.functions import Coalesce

from authentication.services import IdentityService
from chat.authorization import ChatAuthorizationService, ChatOperation
from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG
from chat.models import (
    Chat,
    ChatAdmin,
    ChatMembership,
    DirectChatPair,
    Message,
    MessageRead,
)
from core.exceptions import ErrorKind
from core.helpers import is_object_id, normalize_object_id
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from django.db.models import QuerySet

    from authentication.models import User


def chat_queryset() -> QuerySet[Chat]:
    """Chats with members, admins and latest message (with sender) loaded."""
    return Chat.objects.select_related("latest_message__sender").prefetch_related(
        Prefetch(
            "memberships",
            queryset=ChatMembership.objects.select_related("user").order_by("id"),
        ),
        Prefetch(
            "admin_entries",
            queryset=ChatAdmin.objects.select_related("user").order_by("id"),
        ),
    )


def message_queryset() -> QuerySet[Message]:
    """Messages with sender, chat and read receipts loaded."""
    return Message.objects.select_related("sender", "chat").prefetch_related(
        Prefetch(
            "reads",
            queryset=MessageRead.objects.select_related("user").order_by("id"),
        ),
    )


def _invalid_id(field: str) -> ServiceResult:
    return ServiceResult.failure(
        f"{field} is Invalid!",
        error_code="INVALID_ID",
        errors={field: ["Must be a 24-character hexadecimal identifier."]},
        kind=ErrorKind.VALIDATION,
    )


def _already_member() -> ServiceResult:
    return ServiceResult.failure(
        "This User Already Added on this group",
        error_code="USER_ALREADY_MEMBER",
        kind=ErrorKind.CONFLICT,
    )


def _insert_missing(model, chat: Chat, user_ids: Sequence[str]) -> None:
    """Add user_ids to a through table in order, skipping rows that exist."""
    existing = set(model.objects.filter(chat=chat).values_list("user_id", flat=True))
    model.objects.bulk_create(
        [model(chat=chat, user_id=user_id) for user_id in user_ids if user_id not in existing],
        ignore_conflicts=True,
    )


class ChatService(BaseService):
    """
    Service for chat lifecycle and membership operations.

    Methods:
        get_or_create_direct_chat: Return the 1:1 chat of a user pair, creating it once
        create_group_chat: Create a group with the requester as sole admin
        rename_group_chat: Change a group's name
        list_chats: Chats visible to a user, with unread counts
        add_member: Add one user to a group
        remove_member: Remove one user (or leave) a group
        replace_members: Overwrite a group's member set
        replace_admins: Overwrite a group's admin set
        get_chat_for_user: Load a chat the user participates in
    """

    @classmethod
    def _load(cls, chat_id: str) -> Chat:
        return chat_queryset().get(pk=chat_id)

    @classmethod
    def _lock(cls, chat: Chat) -> Chat:
        """
        Lock the chat row until the surrounding transaction ends.

        Membership and admin writers all take this lock first, so checks
        made after it see every committed change and nothing can slip in
        before the write.
        """
        return Chat.objects.select_for_update().get(pk=chat.pk)

    @classmethod
    def _get_group_chat(cls, chat_id: str, field: str = "chatId") -> ServiceResult[Chat]:
        if not is_object_id(chat_id):
            return _invalid_id(field)

        chat = Chat.objects.filter(
            pk=normalize_object_id(chat_id), is_group_chat=True
        ).first()
        if chat is None:
            return ServiceResult.failure(
                "chatId is not found on database",
                error_code="CHAT_NOT_FOUND",
                kind=ErrorKind.NOT_FOUND,
            )
        return ServiceResult.success(chat)

    @classmethod
    def _clean_group_name(cls, chat_name: str | None) -> ServiceResult[str]:
        name = chat_name.strip() if isinstance(chat_name, str) else ""
        if not (
            CHAT_CONFIG.MIN_GROUP_NAME_LENGTH
            <= len(name)
            <= CHAT_CONFIG.MAX_GROUP_NAME_LENGTH
        ):
            return ServiceResult.failure(
                "Group name must be between "
                f"{CHAT_CONFIG.MIN_GROUP_NAME_LENGTH} and "
                f"{CHAT_CONFIG.MAX_GROUP_NAME_LENGTH} characters",
                error_code="INVALID_CHAT_NAME",
                errors={"chatName": ["Invalid length."]},
                kind=ErrorKind.VALIDATION,
            )
        return ServiceResult.success(name)

    @classmethod
    def get_or_create_direct_chat(
        cls,
        requester: User,
        other_user_id: str,
    ) -> ServiceResult[Chat]:
        """
        Return the direct chat between requester and another user.

        Direct chats are unique per unordered user pair. The first call
        creates the chat, its DirectChatPair and both memberships; every
        later call (from either side) returns the same chat.

        Implementation:
            1. Resolve the other user
            2. Reject the requester talking to themself
            3. Canonicalize order (lower id first) and look up the pair
            4. If missing, create chat + pair + memberships in a transaction
            5. If a concurrent request created the pair first, re-read it

        Returns:
            ServiceResult with Chat (existing or new)

        Error codes:
            INVALID_ID: Malformed user id
            USER_NOT_FOUND: No such user
            SAME_USER: Cannot create a direct chat with yourself
        """
        user_result = IdentityService.get_user(other_user_id, field="userId")
        if not user_result.success:
            return user_result
        other = user_result.data

        if other.pk == requester.pk:
            return ServiceResult.failure(
                "Duplicate UserId. User Not able to create chat with itself",
                error_code="SAME_USER",
            )

        lower_id, higher_id = DirectChatPair.canonical_order(requester.pk, other.pk)

        pair = DirectChatPair.objects.filter(
            user_lower_id=lower_id, user_higher_id=higher_id
        ).first()
        if pair is not None:
            cls.get_logger().debug(
                f"Found existing direct chat {pair.chat_id} "
                f"between users {lower_id} and {higher_id}"
            )
            return ServiceResult.success(cls._load(pair.chat_id))

        try:
            with cls.atomic():
                chat = Chat.objects.create(
                    chat_name=CHAT_CONFIG.DIRECT_CHAT_NAME,
                    is_group_chat=False,
                )
                DirectChatPair.objects.create(
                    chat=chat,
                    user_lower_id=lower_id,
                    user_higher_id=higher_id,
                )
                ChatMembership.objects.create(chat=chat, user=requester)
                ChatMembership.objects.create(chat=chat, user=other)
        except IntegrityError:
            # Another request created the pair between our lookup and insert
            pair = DirectChatPair.objects.get(
                user_lower_id=lower_id, user_higher_id=higher_id
            )
            cls.get_logger().info(
                f"Direct chat {pair.chat_id} was created concurrently, reusing it"
            )
            return ServiceResult.success(cls._load(pair.chat_id))

        cls.get_logger().info(
            f"Created direct chat {chat.id} between users {lower_id} and {higher_id}"
        )
        return ServiceResult.success(cls._load(chat.pk))

    @classmethod
    def create_group_chat(
        cls,
        requester: User,
        chat_name: str,
        member_ids: Sequence[str],
    ) -> ServiceResult[Chat]:
        """
        Create a new group chat.

        The requester becomes the first member and the sole admin; the
        listed users follow as members in the given order.

        Args:
            requester: User creating the group
            chat_name: Group name, 3-50 characters after trimming
            member_ids: Other members (non-empty, distinct, requester excluded)

        Error codes:
            INVALID_CHAT_NAME: Name too short or too long
            EMPTY_USER_LIST / INVALID_ID / DUPLICATE_USER: Bad member list
            USER_NOT_FOUND: A listed user does not exist
            DUPLICATE_REQUESTER: The requester is in the member list
        """
        name_result = cls._clean_group_name(chat_name)
        if not name_result.success:
            return name_result
        name = name_result.data

        users_result = IdentityService.resolve_users(member_ids, field="users")
        if not users_result.success:
            return users_result
        members = users_result.data

        if any(member.pk == requester.pk for member in members):
            return ServiceResult.failure(
                "Duplicate UserId. Current LoggedIn User Id present in users Array",
                error_code="DUPLICATE_REQUESTER",
            )

        with cls.atomic():
            chat = Chat.objects.create(chat_name=name, is_group_chat=True)
            ChatMembership.objects.create(chat=chat, user=requester)
            for member in members:
                ChatMembership.objects.create(chat=chat, user=member)
            ChatAdmin.objects.create(chat=chat, user=requester)

        cls.get_logger().info(
            f"Created group chat {chat.id} named '{name}' "
            f"with {1 + len(members)} members"
        )
        return ServiceResult.success(cls._load(chat.pk))

    @classmethod
    def rename_group_chat(
        cls,
        requester: User,
        chat_id: str,
        chat_name: str,
    ) -> ServiceResult[Chat]:
        """
        Rename a group chat.

        Error codes:
            INVALID_ID: Malformed chat id
            INVALID_CHAT_NAME: Name too short or too long
            CHAT_NOT_FOUND: No group chat with this id
            NOT_ADMIN: Requester is not an admin
        """
        chat_result = cls._get_group_chat(chat_id)
        if not chat_result.success:
            return chat_result
        chat = chat_result.data

        name_result = cls._clean_group_name(chat_name)
        if not name_result.success:
            return name_result

        denied = ChatAuthorizationService.check(requester, chat, ChatOperation.RENAME)
        if denied is not None:
            return denied

        with cls.atomic():
            chat.chat_name = name_result.data
            chat.save(update_fields=["chat_name", "updated_at"])

        cls.get_logger().info(f"User {requester.id} renamed chat {chat.id}")
        return ServiceResult.success(cls._load(chat.pk))

    @classmethod
    def list_chats(cls, user: User) -> ServiceResult[list[Chat]]:
        """
        List every chat where user is a member or an admin.

        Each chat carries an ``unread_count`` annotation: messages in the
        chat not sent by user and not yet read by user. Most recently
        updated chats come first.
        """
        unread = (
            Message.objects.filter(chat=OuterRef("pk"))
            .exclude(sender=user)
            .exclude(reads__user=user)
            .order_by()
            .values("chat")
            .annotate(count=Count("pk"))
            .values("count")
        )

        chats = (
            chat_queryset()
            .filter(
                Q(pk__in=ChatMembership.objects.filter(user=user).values("chat_id"))
                | Q(pk__in=ChatAdmin.objects.filter(user=user).values("chat_id"))
            )
            .annotate(
                unread_count=Coalesce(
                    Subquery(unread, output_field=IntegerField()), 0
                )
            )
            .order_by("-updated_at", "-id")
        )
        return ServiceResult.success(list(chats))

    @classmethod
    def add_member(
        cls,
        requester: User,
        chat_id: str,
        user_id: str,
    ) -> ServiceResult[Chat]:
        """
        Add a user to a group chat.

        Error codes:
            CHAT_NOT_FOUND: No group chat with this id
            USER_NOT_FOUND: No such user
            NOT_ADMIN: Requester is not an admin
            USER_ALREADY_MEMBER: Target is already a member or admin
        """
        chat_result = cls._get_group_chat(chat_id)
        if not chat_result.success:
            return chat_result
        chat = chat_result.data

        user_result = IdentityService.get_user(user_id, field="userId")
        if not user_result.success:
            return user_result
        target = user_result.data

        with cls.atomic():
            chat = cls._lock(chat)

            denied = ChatAuthorizationService.check(
                requester, chat, ChatOperation.ADD_MEMBER
            )
            if denied is not None:
                return denied

            if ChatAuthorizationService.is_participant(target.pk, chat.pk):
                return _already_member()

            try:
                with cls.atomic():
                    ChatMembership.objects.create(chat=chat, user=target)
            except IntegrityError:
                # A concurrent add committed the same membership first
                return _already_member()
            chat.touch()

        cls.get_logger().info(
            f"Added user {target.id} to chat {chat.id} by user {requester.id}"
        )
        return ServiceResult.success(cls._load(chat.pk))

    @classmethod
    def remove_member(
        cls,
        requester: User,
        chat_id: str,
        user_id: str,
    ) -> ServiceResult[Chat]:
        """
        Remove a user from a group chat, or leave it.

        Any member may remove themself; removing someone else requires the
        admin role. A removed user also loses the admin role.

        Error codes:
            USER_NOT_FOUND: No such user
            CHAT_NOT_FOUND: No group chat with this id
            NOT_ADMIN: Requester removes someone else without being admin
            SOLE_ADMIN_CANNOT_LEAVE: The only admin tries to leave
            NOT_A_MEMBER: Target is not a member of the chat
        """
        user_result = IdentityService.get_user(user_id, field="userId")
        if not user_result.success:
            return user_result
        target = user_result.data

        chat_result = cls._get_group_chat(chat_id)
        if not chat_result.success:
            return chat_result
        chat = chat_result.data

        with cls.atomic():
            chat = cls._lock(chat)

            denied = ChatAuthorizationService.check(
                requester, chat, ChatOperation.REMOVE_MEMBER, target_user_id=target.pk
            )
            if denied is not None:
                return denied

            admin_ids = list(
                ChatAdmin.objects.filter(chat=chat).values_list("user_id", flat=True)
            )
            if target.pk == requester.pk and admin_ids == [requester.pk]:
                return ServiceResult.failure(
                    "Unable to leave the group. As the sole admin, you must first "
                    "assign another user as an admin before leaving",
                    error_code="SOLE_ADMIN_CANNOT_LEAVE",
                )

            if not ChatAuthorizationService.is_member(target.pk, chat.pk):
                return ServiceResult.failure(
                    "This User is not a member of this group",
                    error_code="NOT_A_MEMBER",
                    kind=ErrorKind.NOT_FOUND,
                )

            ChatMembership.objects.filter(chat=chat, user=target).delete()
            ChatAdmin.objects.filter(chat=chat, user=target).delete()
            chat.touch()

        if target.pk == requester.pk:
            cls.get_logger().info(f"User {target.id} left chat {chat.id}")
        else:
            cls.get_logger().info(
                f"Removed user {target.id} from chat {chat.id} by user {requester.id}"
            )
        return ServiceResult.success(cls._load(chat.pk))

    @classmethod
    def replace_members(
        cls,
        requester: User,
        chat_id: str,
        user_ids: Sequence[str],
    ) -> ServiceResult[Chat]:
        """
        Overwrite the member set of a group chat.

        Admins missing from the new member set lose the admin role; the
        call fails rather than leave the group without an admin.

        Error codes:
            CHAT_NOT_FOUND: No group chat with this id
            NOT_ADMIN: Requester is not an admin
            EMPTY_USER_LIST / INVALID_ID / DUPLICATE_USER: Bad user list
            USER_NOT_FOUND: A listed user does not exist
            NO_ADMIN_REMAINING: No current admin is in the new member set
        """
        chat_result = cls._get_group_chat(chat_id)
        if not chat_result.success:
            return chat_result
        chat = chat_result.data

        denied = ChatAuthorizationService.check(
            requester, chat, ChatOperation.REPLACE_MEMBERS
        )
        if denied is not None:
            return denied

        users_result = IdentityService.resolve_users(user_ids, field="users")
        if not users_result.success:
            return users_result
        new_ids = [user.pk for user in users_result.data]

        with cls.atomic():
            chat = cls._lock(chat)

            # Roles may have changed while the user list was being resolved
            denied = ChatAuthorizationService.check(
                requester, chat, ChatOperation.REPLACE_MEMBERS
            )
            if denied is not None:
                return denied

            admin_ids = list(
                ChatAdmin.objects.filter(chat=chat).values_list("user_id", flat=True)
            )
            if not any(admin_id in new_ids for admin_id in admin_ids):
                return ServiceResult.failure(
                    "A group must keep at least one admin among its members",
                    error_code="NO_ADMIN_REMAINING",
                )

            ChatMembership.objects.filter(chat=chat).exclude(user_id__in=new_ids).delete()
            ChatAdmin.objects.filter(chat=chat).exclude(user_id__in=new_ids).delete()
            _insert_missing(ChatMembership, chat, new_ids)
            chat.touch()

        cls.get_logger().info(
            f"User {requester.id} replaced members of chat {chat.id} "
            f"({len(new_ids)} members)"
        )
        return ServiceResult.success(cls._load(chat.pk))

    @classmethod
    def replace_admins(
        cls,
        requester: User,
        chat_id: str,
        user_ids: Sequence[str],
    ) -> ServiceResult[Chat]:
        """
        Overwrite the admin set of a group chat.

        Every new admin must already be a member. The list is non-empty, so
        the group always keeps an admin.

        Error codes:
            CHAT_NOT_FOUND: No group chat with this id
            NOT_ADMIN: Requester is not an admin
            EMPTY_USER_LIST / INVALID_ID / DUPLICATE_USER: Bad user list
            USER_NOT_FOUND: A listed user does not exist
            ADMIN_NOT_MEMBER: A listed user is not a member
        """
        chat_result = cls._get_group_chat(chat_id)
        if not chat_result.success:
            return chat_result
        chat = chat_result.data

        denied = ChatAuthorizationService.check(
            requester, chat, ChatOperation.REPLACE_ADMINS
        )
        if denied is not None:
            return denied

        users_result = IdentityService.resolve_users(user_ids, field="users")
        if not users_result.success:
            return users_result
        new_ids = [user.pk for user in users_result.data]

        with cls.atomic():
            chat = cls._lock(chat)

            denied = ChatAuthorizationService.check(
                requester, chat, ChatOperation.REPLACE_ADMINS
            )
            if denied is not None:
                return denied

            member_ids = set(
                ChatMembership.objects.filter(chat=chat).values_list("user_id", flat=True)
            )
            for index, user_id in enumerate(new_ids):
                if user_id not in member_ids:
                    return ServiceResult.failure(
                        "Only members of the group can be admins",
                        error_code="ADMIN_NOT_MEMBER",
                        errors={f"users[{index}]": ["User is not a member of this group."]},
                    )

            ChatAdmin.objects.filter(chat=chat).exclude(user_id__in=new_ids).delete()
            _insert_missing(ChatAdmin, chat, new_ids)
            chat.touch()

        cls.get_logger().info(
            f"User {requester.id} replaced admins of chat {chat.id} "
            f"({len(new_ids)} admins)"
        )
        return ServiceResult.success(cls._load(chat.pk))

    @classmethod
    def get_chat_for_user(cls, user: User, chat_id: str) -> ServiceResult[Chat]:
        """
        Load a chat (direct or group) the user is a member or admin of.

        Used by the socket consumer before joining a chat group or
        announcing a new group.

        Error codes:
            INVALID_ID: Malformed chat id
            CHAT_NOT_FOUND: No chat with this id
            NOT_PARTICIPANT: User is neither member nor admin
        """
        if not is_object_id(chat_id):
            return _invalid_id("chatId")

        chat = chat_queryset().filter(pk=normalize_object_id(chat_id)).first()
        if chat is None:
            return ServiceResult.failure(
                "Chat not found",
                error_code="CHAT_NOT_FOUND",
                kind=ErrorKind.NOT_FOUND,
            )

        denied = ChatAuthorizationService.check(user, chat, ChatOperation.JOIN_CHAT)
        if denied is not None:
            return denied
        return ServiceResult.success(chat)


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        list_messages: All messages of a chat, oldest first
        send_message: Persist a message and make it the chat's latest
        mark_read: Record a read receipt
        get_message: Load one message with relations (socket relay)
    """

    @classmethod
    def _get_chat(cls, chat_id: str) -> ServiceResult[Chat]:
        if not is_object_id(chat_id):
            return _invalid_id("chatId")

        chat = Chat.objects.filter(pk=normalize_object_id(chat_id)).first()
        if chat is None:
            return ServiceResult.failure(
                "Chat not found",
                error_code="CHAT_NOT_FOUND",
                kind=ErrorKind.NOT_FOUND,
            )
        return ServiceResult.success(chat)

    @classmethod
    def list_messages(cls, requester: User, chat_id: str) -> ServiceResult[list[Message]]:
        """
        List all messages of a chat in insertion order.

        Error codes:
            INVALID_ID: Malformed chat id
            CHAT_NOT_FOUND: No chat with this id
            NOT_PARTICIPANT: Requester is neither member nor admin
        """
        chat_result = cls._get_chat(chat_id)
        if not chat_result.success:
            return chat_result
        chat = chat_result.data

        denied = ChatAuthorizationService.check(
            requester, chat, ChatOperation.LIST_MESSAGES
        )
        if denied is not None:
            return denied

        messages = message_queryset().filter(chat=chat).order_by("created_at", "id")
        return ServiceResult.success(list(messages))

    @classmethod
    def send_message(
        cls,
        sender: User,
        chat_id: str,
        content: str,
    ) -> ServiceResult[Message]:
        """
        Send a text message to a chat.

        The message becomes the chat's latest message, which also moves the
        chat to the top of every participant's chat list.

        Args:
            sender: User sending the message
            chat_id: Target chat
            content: Message text (trimmed, must not be empty)

        Returns:
            ServiceResult with new Message (empty read set)

        Error codes:
            EMPTY_CONTENT: Message content cannot be empty
            CONTENT_TOO_LONG: Message content exceeds the configured limit
            INVALID_ID: Malformed chat id
            CHAT_NOT_FOUND: No chat with this id
            NOT_MEMBER: Sender is not a member of the chat
        """
        content = content.strip() if isinstance(content, str) else ""
        if len(content) < MESSAGE_CONFIG.MIN_CONTENT_LENGTH:
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code="EMPTY_CONTENT",
                errors={"message": ["This field may not be blank."]},
                kind=ErrorKind.VALIDATION,
            )
        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            return ServiceResult.failure(
                f"Message content cannot exceed {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
                errors={"message": ["Message is too long."]},
                kind=ErrorKind.VALIDATION,
            )

        chat_result = cls._get_chat(chat_id)
        if not chat_result.success:
            return chat_result
        chat = chat_result.data

        denied = ChatAuthorizationService.check(sender, chat, ChatOperation.SEND_MESSAGE)
        if denied is not None:
            return denied

        with cls.atomic():
            message = Message.objects.create(chat=chat, sender=sender, content=content)
            chat.latest_message = message
            chat.save(update_fields=["latest_message", "updated_at"])

        cls.get_logger().debug(
            f"User {sender.id} sent message {message.id} to chat {chat.id}"
        )
        return ServiceResult.success(message_queryset().get(pk=message.pk))

    @classmethod
    def mark_read(cls, reader: User, message_id: str) -> ServiceResult[Message]:
        """
        Mark a message as read by reader.

        A message the reader sent, or has already read, cannot be marked
        again; both cases fail the same way as a missing message.

        Error codes:
            INVALID_ID: Malformed message id
            INVALID_READ_RECEIPT: Message absent, sent by reader, or already read
            NOT_MEMBER: Reader is not a member of the message's chat
        """
        if not is_object_id(message_id):
            return _invalid_id("messageId")

        invalid_receipt = ServiceResult.failure(
            "Invalid Message Id or Message update",
            error_code="INVALID_READ_RECEIPT",
        )

        message = (
            Message.objects.select_related("chat")
            .filter(pk=normalize_object_id(message_id))
            .exclude(sender=reader)
            .exclude(reads__user=reader)
            .first()
        )
        if message is None:
            return invalid_receipt

        denied = ChatAuthorizationService.check(
            reader, message.chat, ChatOperation.MARK_READ
        )
        if denied is not None:
            return denied

        try:
            with cls.atomic():
                MessageRead.objects.create(message=message, user=reader)
        except IntegrityError:
            cls.get_logger().info(
                f"Duplicate read receipt for message {message.id} by user {reader.id}"
            )
            return invalid_receipt

        cls.get_logger().debug(f"User {reader.id} read message {message.id}")
        return ServiceResult.success(message_queryset().get(pk=message.pk))

    @classmethod
    def get_message(cls, message_id: str) -> ServiceResult[Message]:
        """
        Load one message with sender, chat and readers.

        Error codes:
            INVALID_ID: Malformed message id
            MESSAGE_NOT_FOUND: No message with this id
        """
        if not is_object_id(message_id):
            return _invalid_id("messageId")

        message = message_queryset().filter(pk=normalize_object_id(message_id)).first()
        if message is None:
            return ServiceResult.failure(
                "Message not found",
                error_code="MESSAGE_NOT_FOUND",
                kind=ErrorKind.NOT_FOUND,
            )
        return ServiceResult.success(message)
