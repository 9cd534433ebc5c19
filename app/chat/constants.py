"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Chat naming and defaults
- Message content limits
- Realtime channel group names

Import example:
    from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG, REALTIME_CONFIG
"""

from typing import Final

from django.conf import settings


# =============================================================================
# Chat Configuration
# =============================================================================


class CHAT_CONFIG:
    """Configuration for conversations."""

    # Group names are trimmed before the length check
    MIN_GROUP_NAME_LENGTH: Final[int] = 3
    MAX_GROUP_NAME_LENGTH: Final[int] = 50

    # Placeholder stored as the name of every direct chat
    DIRECT_CHAT_NAME: Final[str] = "sender"

    DEFAULT_GROUP_ICON: Final[str] = "group-icon.png"


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    MAX_CONTENT_LENGTH: Final[int] = getattr(settings, "CHAT_MESSAGE_MAX_LENGTH", 10000)
    MIN_CONTENT_LENGTH: Final[int] = 1


# =============================================================================
# Realtime Configuration
# =============================================================================


class REALTIME_CONFIG:
    """Channel layer group names and close codes for the chat socket."""

    PRESENCE_GROUP: Final[str] = "presence"
    USER_GROUP_PREFIX: Final[str] = "user_"
    CHAT_GROUP_PREFIX: Final[str] = "chat_"

    # Close code for connections without a valid access token
    CLOSE_UNAUTHENTICATED: Final[int] = 4001


def user_group_name(user_id: str) -> str:
    """Channel layer group that reaches every connection of one user."""
    return f"{REALTIME_CONFIG.USER_GROUP_PREFIX}{user_id}"


def chat_group_name(chat_id: str) -> str:
    """Channel layer group for connections currently viewing one chat."""
    return f"{REALTIME_CONFIG.CHAT_GROUP_PREFIX}{chat_id}"
