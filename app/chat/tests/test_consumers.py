"""
Tests for the chat WebSocket consumer.

Each test drives one or more WebsocketCommunicator connections through the
same middleware stack as production (JWT auth + URL routing) and runs the
whole scenario in a single event loop via async_to_sync.

Test Organization:
    - TestConnect: authentication on connect
    - TestPresence: setup, onlineUsers, disconnect
    - TestTyping: startTyping/stopTyping relay
    - TestSendMessage: relay of persisted messages
    - TestJoinNewGroupChat: group announcements
    - TestMalformedFrames: frames that are dropped without closing

Data setup (users, chats, messages, tokens) happens synchronously before
the async scenario starts; the database must be transactional because the
consumer reads it from worker threads.
"""

from unittest import mock

import pytest
from asgiref.sync import async_to_sync
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.db import DatabaseError
from rest_framework_simplejwt.tokens import AccessToken

from chat.middleware import JWTAuthMiddleware
from chat.routing import websocket_urlpatterns
from chat.services import ChatService, MessageService
from chat.tests.conftest import ALICE_ID, BOB_ID, DAVE_ID

pytestmark = pytest.mark.django_db(transaction=True)

application = JWTAuthMiddleware(URLRouter(websocket_urlpatterns))


def token_for(user):
    return str(AccessToken.for_user(user))


async def open_socket(token=None, subprotocols=None):
    path = "/ws/chat/" if token is None else f"/ws/chat/?token={token}"
    communicator = WebsocketCommunicator(application, path, subprotocols=subprotocols)
    connected, detail = await communicator.connect()
    return communicator, connected, detail


async def open_ready_socket(token, user_id):
    """Connect and run setup, consuming the resulting onlineUsers frame."""
    communicator, connected, _ = await open_socket(token)
    assert connected
    await communicator.send_json_to({"event": "setup", "data": user_id})
    frame = await communicator.receive_json_from(timeout=2)
    assert frame["event"] == "onlineUsers"
    return communicator


# =============================================================================
# TestConnect
# =============================================================================


class TestConnect:
    """Authentication on connect."""

    def test_missing_token_closes_with_4001(self):
        async def scenario():
            _, connected, code = await open_socket()
            return connected, code

        connected, code = async_to_sync(scenario)()

        assert connected is False
        assert code == 4001

    def test_invalid_token_closes_with_4001(self):
        async def scenario():
            _, connected, code = await open_socket("garbage")
            return connected, code

        assert async_to_sync(scenario)() == (False, 4001)

    def test_inactive_user_closes_with_4001(self, alice):
        token = token_for(alice)
        alice.is_active = False
        alice.save(update_fields=["is_active"])

        async def scenario():
            _, connected, code = await open_socket(token)
            return connected, code

        assert async_to_sync(scenario)() == (False, 4001)

    def test_subprotocol_token_is_accepted(self, alice):
        """
        Browsers cannot set headers, so the token may ride in the subprotocol.

        Why it matters: The server must echo "jwt" or browsers drop the socket.
        """
        token = token_for(alice)

        async def scenario():
            communicator, connected, subprotocol = await open_socket(
                subprotocols=["jwt", token]
            )
            await communicator.disconnect()
            return connected, subprotocol

        assert async_to_sync(scenario)() == (True, "jwt")


# =============================================================================
# TestPresence
# =============================================================================


class TestPresence:
    """setup registers presence; disconnect removes it."""

    def test_setup_broadcasts_online_users(self, alice):
        token = token_for(alice)

        async def scenario():
            communicator, connected, _ = await open_socket(token)
            await communicator.send_json_to({"event": "setup", "data": ALICE_ID})
            frame = await communicator.receive_json_from(timeout=2)
            await communicator.disconnect()
            return frame

        frame = async_to_sync(scenario)()

        assert frame == {"event": "onlineUsers", "data": {ALICE_ID: 1}}

    def test_other_users_see_new_connection(self, alice, bob):
        alice_token, bob_token = token_for(alice), token_for(bob)

        async def scenario():
            alice_socket = await open_ready_socket(alice_token, ALICE_ID)
            bob_socket = await open_ready_socket(bob_token, BOB_ID)
            frame = await alice_socket.receive_json_from(timeout=2)
            await bob_socket.disconnect()
            after_leave = await alice_socket.receive_json_from(timeout=2)
            await alice_socket.disconnect()
            return frame, after_leave

        frame, after_leave = async_to_sync(scenario)()

        assert frame["data"] == {ALICE_ID: 1, BOB_ID: 1}
        assert after_leave["data"] == {ALICE_ID: 1}

    def test_setup_as_someone_else_is_ignored(self, alice):
        token = token_for(alice)

        async def scenario():
            communicator, _, _ = await open_socket(token)
            await communicator.send_json_to({"event": "setup", "data": BOB_ID})
            nothing = await communicator.receive_nothing(timeout=0.2)
            await communicator.disconnect()
            return nothing

        assert async_to_sync(scenario)() is True


# =============================================================================
# TestTyping
# =============================================================================


class TestTyping:
    """Typing indicators reach other connections in the chat room."""

    def test_typing_relayed_to_other_members(self, alice, bob, team_chat):
        alice_token, bob_token = token_for(alice), token_for(bob)
        chat_id = team_chat.id

        async def scenario():
            alice_socket = await open_ready_socket(alice_token, ALICE_ID)
            bob_socket = await open_ready_socket(bob_token, BOB_ID)
            await alice_socket.receive_json_from(timeout=2)

            await alice_socket.send_json_to({"event": "joinChat", "data": chat_id})
            await bob_socket.send_json_to({"event": "joinChat", "data": chat_id})
            await bob_socket.receive_nothing(timeout=0.2)

            await alice_socket.send_json_to(
                {"event": "typing", "data": {"chatId": chat_id, "user": {"_id": ALICE_ID}}}
            )
            started = await bob_socket.receive_json_from(timeout=2)
            alice_quiet = await alice_socket.receive_nothing(timeout=0.2)

            await alice_socket.send_json_to({"event": "typingOff", "data": {"chatId": chat_id}})
            stopped = await bob_socket.receive_json_from(timeout=2)

            await alice_socket.disconnect()
            await bob_socket.disconnect()
            return started, stopped, alice_quiet

        started, stopped, alice_quiet = async_to_sync(scenario)()

        assert started["event"] == "startTyping"
        assert started["data"]["chatId"] == chat_id
        assert started["data"]["user"]["id"] == ALICE_ID
        assert "email" not in started["data"]["user"]
        assert stopped["event"] == "stopTyping"
        assert alice_quiet is True

    def test_outsider_cannot_type_in_chat(self, alice, dave, team_chat):
        alice_token, dave_token = token_for(alice), token_for(dave)
        chat_id = team_chat.id

        async def scenario():
            alice_socket = await open_ready_socket(alice_token, ALICE_ID)
            await alice_socket.send_json_to({"event": "joinChat", "data": chat_id})
            dave_socket = await open_ready_socket(dave_token, DAVE_ID)
            await alice_socket.receive_json_from(timeout=2)

            await dave_socket.send_json_to({"event": "typing", "data": {"chatId": chat_id}})
            nothing = await alice_socket.receive_nothing(timeout=0.3)

            await alice_socket.disconnect()
            await dave_socket.disconnect()
            return nothing

        assert async_to_sync(scenario)() is True


# =============================================================================
# TestSendMessage
# =============================================================================


class TestSendMessage:
    """Persisted messages are relayed to every other participant."""

    def test_message_relayed_to_recipient(self, alice, bob, team_chat):
        message = MessageService.send_message(alice, team_chat.id, "Hello team").data
        alice_token, bob_token = token_for(alice), token_for(bob)

        async def scenario():
            alice_socket = await open_ready_socket(alice_token, ALICE_ID)
            bob_socket = await open_ready_socket(bob_token, BOB_ID)
            await alice_socket.receive_json_from(timeout=2)

            await alice_socket.send_json_to(
                {"event": "sendMessage", "data": {"_id": message.id, "content": "Hello team"}}
            )
            received = await bob_socket.receive_json_from(timeout=2)
            sender_quiet = await alice_socket.receive_nothing(timeout=0.2)

            await alice_socket.disconnect()
            await bob_socket.disconnect()
            return received, sender_quiet

        received, sender_quiet = async_to_sync(scenario)()

        assert received["event"] == "receiveMessage"
        assert received["data"]["id"] == message.id
        assert received["data"]["content"] == "Hello team"
        assert received["data"]["sender"]["id"] == ALICE_ID
        assert sender_quiet is True

    def test_relaying_someone_elses_message_is_dropped(self, alice, bob, team_chat):
        """
        Only the sender may relay a message.

        Why it matters: Otherwise any member could re-deliver old messages
        to everyone as if they were new.
        """
        message = MessageService.send_message(alice, team_chat.id, "mine").data
        alice_token, bob_token = token_for(alice), token_for(bob)

        async def scenario():
            alice_socket = await open_ready_socket(alice_token, ALICE_ID)
            bob_socket = await open_ready_socket(bob_token, BOB_ID)
            await alice_socket.receive_json_from(timeout=2)

            await bob_socket.send_json_to({"event": "sendMessage", "data": message.id})
            nothing = await alice_socket.receive_nothing(timeout=0.3)

            await alice_socket.disconnect()
            await bob_socket.disconnect()
            return nothing

        assert async_to_sync(scenario)() is True


# =============================================================================
# TestJoinNewGroupChat
# =============================================================================


class TestJoinNewGroupChat:
    """A new group is announced to its other participants."""

    def test_group_announced_to_members(self, alice, bob, carol):
        chat = ChatService.create_group_chat(alice, "Team", [bob.id, carol.id]).data
        alice_token, bob_token = token_for(alice), token_for(bob)

        async def scenario():
            alice_socket = await open_ready_socket(alice_token, ALICE_ID)
            bob_socket = await open_ready_socket(bob_token, BOB_ID)
            await alice_socket.receive_json_from(timeout=2)

            await alice_socket.send_json_to(
                {"event": "joinNewGroupChat", "data": {"chat": {"_id": chat.id}, "userId": ALICE_ID}}
            )
            announced = await bob_socket.receive_json_from(timeout=2)
            creator_quiet = await alice_socket.receive_nothing(timeout=0.2)

            await alice_socket.disconnect()
            await bob_socket.disconnect()
            return announced, creator_quiet

        announced, creator_quiet = async_to_sync(scenario)()

        assert announced["event"] == "joinGroupChat"
        assert announced["data"]["id"] == chat.id
        assert announced["data"]["chatName"] == "Team"
        assert creator_quiet is True

    def test_direct_chat_is_not_announced(self, alice, bob, direct_chat):
        alice_token, bob_token = token_for(alice), token_for(bob)

        async def scenario():
            alice_socket = await open_ready_socket(alice_token, ALICE_ID)
            bob_socket = await open_ready_socket(bob_token, BOB_ID)
            await alice_socket.receive_json_from(timeout=2)

            await alice_socket.send_json_to(
                {"event": "joinNewGroupChat", "data": {"chat": {"_id": direct_chat.id}, "userId": ALICE_ID}}
            )
            bob_quiet = await bob_socket.receive_nothing(timeout=0.3)

            await alice_socket.disconnect()
            await bob_socket.disconnect()
            return bob_quiet

        assert async_to_sync(scenario)() is True


# =============================================================================
# TestMalformedFrames
# =============================================================================


class TestMalformedFrames:
    """Bad frames are dropped and the socket stays usable."""

    def test_connection_survives_bad_frames(self, alice):
        token = token_for(alice)

        async def scenario():
            communicator, _, _ = await open_socket(token)
            await communicator.send_to(text_data="not json")
            await communicator.send_to(bytes_data=b"\x00\x01")
            await communicator.send_json_to(["not", "an", "object"])
            await communicator.send_json_to({"event": "unknown", "data": {}})
            await communicator.send_json_to({"event": "joinChat", "data": "bad-id"})
            quiet = await communicator.receive_nothing(timeout=0.2)

            await communicator.send_json_to({"event": "setup", "data": ALICE_ID})
            frame = await communicator.receive_json_from(timeout=2)
            await communicator.disconnect()
            return quiet, frame

        quiet, frame = async_to_sync(scenario)()

        assert quiet is True
        assert frame["event"] == "onlineUsers"

    def test_database_error_drops_frame_and_keeps_socket(self, alice, team_chat):
        """
        A storage failure while handling a frame drops only that frame.

        Why it matters: A short database outage must not disconnect every
        client that happens to send a frame during it.
        """
        token = token_for(alice)

        async def scenario():
            communicator, _, _ = await open_socket(token)
            await communicator.send_json_to({"event": "joinChat", "data": team_chat.id})
            quiet = await communicator.receive_nothing(timeout=0.2)

            await communicator.send_json_to({"event": "setup", "data": ALICE_ID})
            frame = await communicator.receive_json_from(timeout=2)
            await communicator.disconnect()
            return quiet, frame

        with mock.patch(
            "chat.consumers.ChatService.get_chat_for_user",
            side_effect=DatabaseError("connection lost"),
        ):
            quiet, frame = async_to_sync(scenario)()

        assert quiet is True
        assert frame["event"] == "onlineUsers"
