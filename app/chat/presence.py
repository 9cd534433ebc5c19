"""
In-process presence registry for chat socket connections.

Tracks which channel names (socket connections) each user has open in this
process. The registry is the only owner of presence state; consumers call
register/unregister and broadcast the snapshot it returns.

State:
    user_id -> set of channel names

Snapshot (sent to clients as ``onlineUsers``):
    {"<user_id>": <open connection count>, ...}

The registry is in memory and starts empty on every restart. With several
server processes each one sees only its own connections.

Usage:
    from chat.presence import presence_registry

    online = await presence_registry.register(user.id, self.channel_name)
    online = await presence_registry.unregister(user.id, self.channel_name)
"""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """
    Map of online users to their open connections.

    All mutations happen under an asyncio.Lock on the event loop, so a
    register racing an unregister for the same user cannot lose a channel.
    """

    def __init__(self):
        self._connections: dict[str, set[str]] = {}
        self._lock = asyncio.Lock()

    def _snapshot(self) -> dict[str, int]:
        return {user_id: len(channels) for user_id, channels in self._connections.items()}

    async def register(self, user_id: str, channel_name: str) -> dict[str, int]:
        """
        Record an open connection for user_id.

        Registering the same channel twice is a no-op.

        Returns:
            Snapshot of online users after the change
        """
        async with self._lock:
            self._connections.setdefault(user_id, set()).add(channel_name)
            snapshot = self._snapshot()

        logger.debug(f"User {user_id} online on {channel_name}")
        return snapshot

    async def unregister(self, user_id: str, channel_name: str) -> dict[str, int]:
        """
        Forget a closed connection; the user goes offline with their last one.

        Returns:
            Snapshot of online users after the change
        """
        async with self._lock:
            channels = self._connections.get(user_id)
            if channels is not None:
                channels.discard(channel_name)
                if not channels:
                    del self._connections[user_id]
            snapshot = self._snapshot()

        logger.debug(f"User {user_id} closed {channel_name}")
        return snapshot

    async def snapshot(self) -> dict[str, int]:
        """Current online users and their connection counts."""
        async with self._lock:
            return self._snapshot()

    def is_online(self, user_id: str) -> bool:
        return user_id in self._connections

    def reset(self) -> None:
        """Drop all state. Used between test runs."""
        self._connections = {}
        self._lock = asyncio.Lock()


presence_registry = PresenceRegistry()
