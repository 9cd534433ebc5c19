"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures with fixed ids for readable assertions
- Chat fixtures (direct and group)
- Message fixtures
- API client helpers for authenticated requests
- Presence registry reset between tests

Usage:
    def test_example(team_chat, alice_client):
        response = alice_client.get("/api/v1/chats/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.presence import presence_registry
from chat.tests.factories import DirectChatFactory, GroupChatFactory, MessageFactory

ALICE_ID = "a1a1a1a1a1a1a1a1a1a1a1a1"
BOB_ID = "b2b2b2b2b2b2b2b2b2b2b2b2"
CAROL_ID = "c3c3c3c3c3c3c3c3c3c3c3c3"
DAVE_ID = "d4d4d4d4d4d4d4d4d4d4d4d4"
MISSING_ID = "ffffffffffffffffffffffff"


@pytest.fixture(autouse=True)
def reset_presence():
    """Start every test with nobody online."""
    presence_registry.reset()
    yield
    presence_registry.reset()


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    return UserFactory(id=ALICE_ID, username="alice", first_name="Alice")


@pytest.fixture
def bob(db):
    return UserFactory(id=BOB_ID, username="bobby", first_name="Bob")


@pytest.fixture
def carol(db):
    return UserFactory(id=CAROL_ID, username="carol", first_name="Carol")


@pytest.fixture
def dave(db):
    """A user who is not in any fixture chat."""
    return UserFactory(id=DAVE_ID, username="davey", first_name="Dave")


# =============================================================================
# Chat Fixtures
# =============================================================================


@pytest.fixture
def direct_chat(db, alice, bob):
    """Direct chat between alice and bob."""
    return DirectChatFactory(user1=alice, user2=bob)


@pytest.fixture
def team_chat(db, alice, bob, carol):
    """
    Group "Team" created by alice.

    users=[alice, bob, carol], groupAdmins=[alice]
    """
    return GroupChatFactory(chat_name="Team", admin=alice, members=[bob, carol])


# =============================================================================
# Message Fixtures
# =============================================================================


@pytest.fixture
def bob_message(db, team_chat, bob):
    """Message from bob in the Team group."""
    return MessageFactory(chat=team_chat, sender=bob, content="Hi team")


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, some_user):
            client = authenticated_client_factory(some_user)
            response = client.get("/api/v1/chats/")
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def alice_client(authenticated_client_factory, alice):
    return authenticated_client_factory(alice)


@pytest.fixture
def bob_client(authenticated_client_factory, bob):
    return authenticated_client_factory(bob)


@pytest.fixture
def carol_client(authenticated_client_factory, carol):
    return authenticated_client_factory(carol)


@pytest.fixture
def dave_client(authenticated_client_factory, dave):
    return authenticated_client_factory(dave)
