"""
Tests for the in-process presence registry.

Features tested:
- Online snapshot with per-user connection counts
- Several connections per user
- Going offline with the last connection
- Idempotent register and unregister

Design Decisions:
- Presence lives in memory only (no database or cache writes)
- Every snapshot is a fresh dict; callers may mutate it freely
"""

from asgiref.sync import async_to_sync

from chat.presence import PresenceRegistry, presence_registry
from chat.tests.conftest import ALICE_ID, BOB_ID


def register(registry, user_id, channel):
    return async_to_sync(registry.register)(user_id, channel)


def unregister(registry, user_id, channel):
    return async_to_sync(registry.unregister)(user_id, channel)


# =============================================================================
# TestRegister
# =============================================================================


class TestRegister:
    """Tests for PresenceRegistry.register()."""

    def test_first_connection_marks_user_online(self):
        registry = PresenceRegistry()

        online = register(registry, ALICE_ID, "channel-1")

        assert online == {ALICE_ID: 1}
        assert registry.is_online(ALICE_ID) is True

    def test_counts_connections_per_user(self):
        """
        Two tabs of one user count as two connections.

        Why it matters: Closing one tab must not mark the user offline.
        """
        registry = PresenceRegistry()

        register(registry, ALICE_ID, "channel-1")
        register(registry, BOB_ID, "channel-2")
        online = register(registry, ALICE_ID, "channel-3")

        assert online == {ALICE_ID: 2, BOB_ID: 1}

    def test_registering_same_channel_twice_is_noop(self):
        registry = PresenceRegistry()

        register(registry, ALICE_ID, "channel-1")
        online = register(registry, ALICE_ID, "channel-1")

        assert online == {ALICE_ID: 1}


# =============================================================================
# TestUnregister
# =============================================================================


class TestUnregister:
    """Tests for PresenceRegistry.unregister()."""

    def test_user_stays_online_while_a_connection_remains(self):
        registry = PresenceRegistry()
        register(registry, ALICE_ID, "channel-1")
        register(registry, ALICE_ID, "channel-2")

        online = unregister(registry, ALICE_ID, "channel-1")

        assert online == {ALICE_ID: 1}
        assert registry.is_online(ALICE_ID) is True

    def test_last_connection_takes_user_offline(self):
        registry = PresenceRegistry()
        register(registry, ALICE_ID, "channel-1")

        online = unregister(registry, ALICE_ID, "channel-1")

        assert online == {}
        assert registry.is_online(ALICE_ID) is False

    def test_unknown_channel_is_ignored(self):
        registry = PresenceRegistry()
        register(registry, ALICE_ID, "channel-1")

        online = unregister(registry, BOB_ID, "channel-9")

        assert online == {ALICE_ID: 1}


# =============================================================================
# TestSnapshot
# =============================================================================


class TestSnapshot:
    """Tests for snapshot() and reset()."""

    def test_snapshot_is_a_copy(self):
        registry = PresenceRegistry()
        register(registry, ALICE_ID, "channel-1")

        snapshot = async_to_sync(registry.snapshot)()
        snapshot[BOB_ID] = 5

        assert async_to_sync(registry.snapshot)() == {ALICE_ID: 1}

    def test_reset_clears_state(self):
        register(presence_registry, ALICE_ID, "channel-1")

        presence_registry.reset()

        assert async_to_sync(presence_registry.snapshot)() == {}
