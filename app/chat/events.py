"""
Typed commands for client -> server socket events.

Every frame the chat socket receives looks like ``{"event": name, "data": payload}``.
The consumer looks the event name up in COMMANDS and parses the payload
with the matching ``parse`` classmethod, which returns a ServiceResult:
the command on success, a ValidationError result for a malformed payload.

Accepted payload shapes mirror what web clients send, where an entity may
be given either as its id or as an object with ``id`` (or ``_id``):

    setup             "<userId>" | {"userId": ...}
    joinChat          "<chatId>" | {"chatId": ...}
    joinNewGroupChat  {"chat": <chat>, "userId": ...}
    typing/typingOff  {"chatId": ..., "user": <user>}
    sendMessage       <message> (id or object)

Usage:
    from chat.events import COMMANDS

    parse = COMMANDS.get(content.get("event"))
    result = parse(content.get("data"))
    if result.success:
        command = result.data
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from core.exceptions import ErrorKind
from core.helpers import is_object_id, normalize_object_id
from core.services import ServiceResult


def _malformed(event: str, reason: str) -> ServiceResult:
    return ServiceResult.failure(
        f"Malformed {event} payload: {reason}",
        error_code="MALFORMED_PAYLOAD",
        kind=ErrorKind.VALIDATION,
    )


def _extract_id(value: Any, *keys: str) -> str | None:
    """
    Pull an object id out of a bare id or an object carrying one.

    Returns the normalized id, or None when no well-formed id is present.
    """
    if isinstance(value, dict):
        for key in (*keys, "id", "_id"):
            if key in value:
                value = value[key]
                break
        else:
            return None
    if is_object_id(value):
        return normalize_object_id(value)
    return None


@dataclass(frozen=True)
class SetupCommand:
    """Bind the connection to its user's personal group and mark them online."""

    event: ClassVar[str] = "setup"

    user_id: str

    @classmethod
    def parse(cls, payload: Any) -> ServiceResult[SetupCommand]:
        user_id = _extract_id(payload, "userId")
        if user_id is None:
            return _malformed(cls.event, "userId must be an object id")
        return ServiceResult.success(cls(user_id=user_id))


@dataclass(frozen=True)
class JoinChatCommand:
    """Subscribe the connection to one chat's room (typing indicators)."""

    event: ClassVar[str] = "joinChat"

    chat_id: str

    @classmethod
    def parse(cls, payload: Any) -> ServiceResult[JoinChatCommand]:
        chat_id = _extract_id(payload, "chatId")
        if chat_id is None:
            return _malformed(cls.event, "chatId must be an object id")
        return ServiceResult.success(cls(chat_id=chat_id))


@dataclass(frozen=True)
class JoinNewGroupChatCommand:
    """Join a freshly created group and announce it to its other participants."""

    event: ClassVar[str] = "joinNewGroupChat"

    chat_id: str
    user_id: str

    @classmethod
    def parse(cls, payload: Any) -> ServiceResult[JoinNewGroupChatCommand]:
        if not isinstance(payload, dict):
            return _malformed(cls.event, "expected an object")

        chat_id = _extract_id(payload.get("chat"), "chatId")
        user_id = _extract_id(payload.get("userId"))
        if chat_id is None:
            return _malformed(cls.event, "chat must carry an object id")
        if user_id is None:
            return _malformed(cls.event, "userId must be an object id")
        return ServiceResult.success(cls(chat_id=chat_id, user_id=user_id))


@dataclass(frozen=True)
class TypingCommand:
    """Typing indicator for one chat; ``active`` is False for typingOff."""

    event: ClassVar[str] = "typing"

    chat_id: str
    user_id: str | None
    active: bool = True

    @classmethod
    def parse(cls, payload: Any, active: bool = True) -> ServiceResult[TypingCommand]:
        if not isinstance(payload, dict):
            return _malformed(cls.event, "expected an object")

        chat_id = _extract_id(payload.get("chatId"))
        if chat_id is None:
            return _malformed(cls.event, "chatId must be an object id")

        user = payload.get("user")
        user_id = _extract_id(user, "userId") if user is not None else None
        if user is not None and user_id is None:
            return _malformed(cls.event, "user must carry an object id")

        return ServiceResult.success(cls(chat_id=chat_id, user_id=user_id, active=active))

    @classmethod
    def parse_off(cls, payload: Any) -> ServiceResult[TypingCommand]:
        return cls.parse(payload, active=False)


@dataclass(frozen=True)
class SendMessageCommand:
    """Relay an already persisted message to the chat's other participants."""

    event: ClassVar[str] = "sendMessage"

    message_id: str

    @classmethod
    def parse(cls, payload: Any) -> ServiceResult[SendMessageCommand]:
        message_id = _extract_id(payload, "messageId")
        if message_id is None:
            return _malformed(cls.event, "message must carry an object id")
        return ServiceResult.success(cls(message_id=message_id))


# Event name -> parser
COMMANDS = {
    "setup": SetupCommand.parse,
    "joinChat": JoinChatCommand.parse,
    "joinNewGroupChat": JoinNewGroupChatCommand.parse,
    "typing": TypingCommand.parse,
    "typingOff": TypingCommand.parse_off,
    "sendMessage": SendMessageCommand.parse,
}
