"""
Chat application configuration.

This app provides the chat system with:
- Direct (1:1) chats, unique per user pair
- Group chats with separate member and admin sets
- Messages with read receipts and per-user unread counts
- A realtime socket for presence, typing and message delivery
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
