"""
WebSocket consumers for the chat application.

This module implements the WebSocket consumer for real-time chat: presence,
typing indicators, group announcements and delivery of persisted messages.

Consumers:
    ChatConsumer: One connection of one authenticated user

Authentication:
    Users are authenticated via JWT token passed as query parameter or
    subprotocol. JWTAuthMiddleware attaches the user to self.scope["user"];
    anonymous connections are closed with code 4001.

Frames (both directions):
    {"event": "<name>", "data": <payload>}

Channel Groups:
    presence        Every connection; receives onlineUsers
    user_<id>       Every connection of one user after setup
    chat_<id>       Connections that joined one chat (typing indicators)

Events (from client):
    setup, joinChat, joinNewGroupChat, typing, typingOff, sendMessage
    (payloads parsed by chat.events)

Events (to client):
    onlineUsers, joinGroupChat, startTyping, stopTyping, receiveMessage

Messages are persisted over HTTP first; sendMessage only relays a stored
message, re-read from the database, to the other participants. Malformed or
unauthorised frames are logged and dropped without closing the socket.
"""

from __future__ import annotations

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.db import DatabaseError

from authentication.serializers import SenderSerializer
from chat.constants import REALTIME_CONFIG, chat_group_name, user_group_name
from chat.events import (
    COMMANDS,
    JoinChatCommand,
    JoinNewGroupChatCommand,
    SendMessageCommand,
    SetupCommand,
    TypingCommand,
)
from chat.presence import presence_registry
from chat.serializers import ChatSerializer, MessageSerializer
from chat.services import ChatService, MessageService
from core.services import ServiceResult

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for real-time chat functionality.

    Handles:
        - Connection authentication
        - Presence (online users and their connection counts)
        - Joining chat rooms and announcing new groups
        - Typing indicators
        - Relaying persisted messages to recipients

    Attributes:
        user: Authenticated user of this connection
        profile: Compact serialized profile sent with typing events
        user_group: Personal group name once setup has run
        chat_groups: Chat room groups this connection joined
    """

    handlers = {
        SetupCommand: "handle_setup",
        JoinChatCommand: "handle_join_chat",
        JoinNewGroupChatCommand: "handle_join_new_group_chat",
        TypingCommand: "handle_typing",
        SendMessageCommand: "handle_send_message",
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None
        self.profile: dict | None = None
        self.user_group: str | None = None
        self.chat_groups: set[str] = set()

    async def connect(self):
        """
        Handle WebSocket connection.

        Rejects anonymous users with close code 4001; otherwise joins the
        presence group and accepts the connection.
        """
        user = self.scope.get("user")

        if user is None or not user.is_authenticated:
            logger.warning("Rejected unauthenticated chat socket connection")
            await self.close(code=REALTIME_CONFIG.CLOSE_UNAUTHENTICATED)
            return

        self.user = user
        self.profile = dict(SenderSerializer(user).data)

        await self.channel_layer.group_add(REALTIME_CONFIG.PRESENCE_GROUP, self.channel_name)

        subprotocol = "jwt" if "jwt" in self.scope.get("subprotocols", []) else None
        await self.accept(subprotocol=subprotocol)
        logger.info(f"User {user.id} connected on {self.channel_name}")

    async def disconnect(self, close_code):
        """
        Handle WebSocket disconnection.

        Leaves every group, unregisters presence and tells the remaining
        connections who is still online.
        """
        if self.user is None:
            return

        for group in self.chat_groups:
            await self.channel_layer.group_discard(group, self.channel_name)
        self.chat_groups.clear()

        await self.channel_layer.group_discard(REALTIME_CONFIG.PRESENCE_GROUP, self.channel_name)

        if self.user_group:
            await self.channel_layer.group_discard(self.user_group, self.channel_name)
            self.user_group = None
            online = await presence_registry.unregister(self.user.id, self.channel_name)
            await self._broadcast_presence(online)

        logger.info(f"User {self.user.id} disconnected (code {close_code})")

    @classmethod
    async def decode_json(cls, text_data):
        try:
            return json.loads(text_data)
        except json.JSONDecodeError:
            logger.warning("Dropped chat socket frame that is not valid JSON")
            return None

    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        if text_data is None:
            logger.warning("Dropped binary chat socket frame")
            return
        await super().receive(text_data=text_data, bytes_data=bytes_data, **kwargs)

    async def receive_json(self, content, **kwargs):
        """
        Parse and dispatch one client frame.

        Expected frame format:
            {"event": "setup", "data": "<userId>"}
            {"event": "typing", "data": {"chatId": "...", "user": {...}}}
        """
        if not isinstance(content, dict):
            logger.warning(f"Dropped chat socket frame from user {self.user.id}: not an object")
            return

        event = content.get("event")
        parse = COMMANDS.get(event)
        if parse is None:
            logger.warning(f"Dropped unknown chat socket event {event!r} from user {self.user.id}")
            return

        result = parse(content.get("data"))
        if not result.success:
            logger.warning(f"Dropped {event} from user {self.user.id}: {result.error}")
            return

        command = result.data
        try:
            await getattr(self, self.handlers[type(command)])(command)
        except DatabaseError:
            # Storage outages drop the frame; the socket stays open
            logger.exception(f"Dropped {event} from user {self.user.id}: database error")

    # =========================================================================
    # Client event handlers
    # =========================================================================

    async def handle_setup(self, command: SetupCommand):
        """Join the personal group, register presence, broadcast onlineUsers."""
        if command.user_id != self.user.id:
            logger.warning(
                f"User {self.user.id} tried to set up the socket as {command.user_id}"
            )
            return

        self.user_group = user_group_name(self.user.id)
        await self.channel_layer.group_add(self.user_group, self.channel_name)

        online = await presence_registry.register(self.user.id, self.channel_name)
        await self._broadcast_presence(online)

    async def handle_join_chat(self, command: JoinChatCommand):
        """Join a chat room after checking the user belongs to the chat."""
        result = await self._get_chat(command.chat_id)
        if not result.success:
            logger.warning(
                f"User {self.user.id} cannot join chat {command.chat_id}: {result.error}"
            )
            return

        await self._join_chat_group(command.chat_id)

    async def handle_join_new_group_chat(self, command: JoinNewGroupChatCommand):
        """Join a new group's room and announce the group to its other participants."""
        if command.user_id != self.user.id:
            logger.warning(
                f"User {self.user.id} tried to announce chat {command.chat_id} "
                f"as {command.user_id}"
            )
            return

        result = await self._get_serialized_chat(command.chat_id)
        if not result.success:
            logger.warning(
                f"User {self.user.id} cannot announce chat {command.chat_id}: {result.error}"
            )
            return

        chat_data, participant_ids = result.data
        await self._join_chat_group(command.chat_id)

        for participant_id in participant_ids:
            if participant_id == self.user.id:
                continue
            await self.channel_layer.group_send(
                user_group_name(participant_id),
                {"type": "chat.join_group", "chat": chat_data},
            )

    async def handle_typing(self, command: TypingCommand):
        """Relay startTyping/stopTyping to the chat room."""
        if command.user_id is not None and command.user_id != self.user.id:
            logger.warning(
                f"User {self.user.id} sent a typing event for user {command.user_id}"
            )
            return

        group = chat_group_name(command.chat_id)
        if group not in self.chat_groups:
            result = await self._get_chat(command.chat_id)
            if not result.success:
                logger.warning(
                    f"User {self.user.id} cannot type in chat {command.chat_id}: {result.error}"
                )
                return

        await self.channel_layer.group_send(
            group,
            {
                "type": "chat.typing",
                "event": "startTyping" if command.active else "stopTyping",
                "chat_id": command.chat_id,
                "user_id": self.user.id,
                "user": self.profile,
            },
        )

    async def handle_send_message(self, command: SendMessageCommand):
        """Deliver a stored message to every member and admin except its sender."""
        result = await self._get_relay(command.message_id)
        if not result.success:
            logger.warning(
                f"User {self.user.id} cannot relay message {command.message_id}: {result.error}"
            )
            return

        message_data, sender_id, recipient_ids = result.data
        if sender_id != self.user.id:
            logger.warning(
                f"User {self.user.id} tried to relay message {command.message_id} "
                f"sent by {sender_id}"
            )
            return

        for recipient_id in recipient_ids:
            await self.channel_layer.group_send(
                user_group_name(recipient_id),
                {"type": "chat.receive_message", "message": message_data},
            )

    # =========================================================================
    # Channel layer event handlers
    # =========================================================================

    async def presence_update(self, event):
        await self.send_json({"event": "onlineUsers", "data": event["online_users"]})

    async def chat_join_group(self, event):
        await self.send_json({"event": "joinGroupChat", "data": event["chat"]})

    async def chat_typing(self, event):
        """Forward a typing indicator unless this connection's user sent it."""
        if event["user_id"] == self.user.id:
            return

        await self.send_json(
            {
                "event": event["event"],
                "data": {"chatId": event["chat_id"], "user": event["user"]},
            }
        )

    async def chat_receive_message(self, event):
        await self.send_json({"event": "receiveMessage", "data": event["message"]})

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _broadcast_presence(self, online: dict[str, int]):
        await self.channel_layer.group_send(
            REALTIME_CONFIG.PRESENCE_GROUP,
            {"type": "presence.update", "online_users": online},
        )

    async def _join_chat_group(self, chat_id: str):
        group = chat_group_name(chat_id)
        if group in self.chat_groups:
            return
        await self.channel_layer.group_add(group, self.channel_name)
        self.chat_groups.add(group)
        logger.debug(f"User {self.user.id} joined {group}")

    @database_sync_to_async
    def _get_chat(self, chat_id: str) -> ServiceResult:
        return ChatService.get_chat_for_user(self.user, chat_id)

    @database_sync_to_async
    def _get_serialized_chat(self, chat_id: str) -> ServiceResult:
        """Chat payload plus the ids of its members and admins."""
        result = ChatService.get_chat_for_user(self.user, chat_id)
        if not result.success:
            return result

        chat = result.data
        if not chat.is_group_chat:
            return ServiceResult.failure(
                "Only group chats can be announced", error_code="NOT_A_GROUP_CHAT"
            )

        chat_data = json.loads(json.dumps(ChatSerializer(chat).data))
        return ServiceResult.success((chat_data, chat.participant_ids()))

    @database_sync_to_async
    def _get_relay(self, message_id: str) -> ServiceResult:
        """Message payload, its sender id and the ids of everyone who should get it."""
        result = MessageService.get_message(message_id)
        if not result.success:
            return result

        message = result.data
        participants = ChatService.get_chat_for_user(message.sender, message.chat_id)
        if not participants.success:
            # The sender has since left the chat
            return participants

        recipient_ids = [
            user_id
            for user_id in participants.data.participant_ids()
            if user_id != message.sender_id
        ]
        message_data = json.loads(json.dumps(MessageSerializer(message).data))
        return ServiceResult.success((message_data, message.sender_id, recipient_ids))
