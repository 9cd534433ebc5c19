"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Chat management (members and admins inline)
- Direct chat pair viewing
- Message moderation (read receipts inline)
"""

from django.contrib import admin

from chat.models import Chat, ChatAdmin, ChatMembership, DirectChatPair, Message, MessageRead


class ChatMembershipInline(admin.TabularInline):
    """Inline display of members in chat admin."""

    model = ChatMembership
    extra = 0
    readonly_fields = ["joined_at"]
    raw_id_fields = ["user"]


class ChatAdminInline(admin.TabularInline):
    """Inline display of group admins in chat admin."""

    model = ChatAdmin
    extra = 0
    readonly_fields = ["granted_at"]
    raw_id_fields = ["user"]


@admin.register(Chat)
class ChatModelAdmin(admin.ModelAdmin):
    """Admin interface for Chat model."""

    list_display = [
        "id",
        "chat_name",
        "is_group_chat",
        "latest_message",
        "created_at",
        "updated_at",
    ]
    list_filter = ["is_group_chat", "created_at"]
    search_fields = ["chat_name", "id"]
    readonly_fields = ["id", "created_at", "updated_at"]
    raw_id_fields = ["latest_message"]
    inlines = [ChatMembershipInline, ChatAdminInline]
    ordering = ["-updated_at"]


@admin.register(DirectChatPair)
class DirectChatPairAdmin(admin.ModelAdmin):
    """Admin interface for DirectChatPair model."""

    list_display = ["chat", "user_lower", "user_higher"]
    raw_id_fields = ["chat", "user_lower", "user_higher"]


class MessageReadInline(admin.TabularInline):
    """Inline display of read receipts in message admin."""

    model = MessageRead
    extra = 0
    readonly_fields = ["read_at"]
    raw_id_fields = ["user"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "chat",
        "sender",
        "content_preview",
        "created_at",
    ]
    list_filter = ["created_at"]
    search_fields = ["content", "sender__email", "sender__username"]
    readonly_fields = ["id", "created_at", "updated_at"]
    raw_id_fields = ["chat", "sender"]
    inlines = [MessageReadInline]
    ordering = ["-created_at"]

    @admin.display(description="Content Preview")
    def content_preview(self, obj: Message) -> str:
        """Return truncated content for list display."""
        max_length = 50
        if len(obj.content) > max_length:
            return obj.content[:max_length] + "..."
        return obj.content
