"""
URL configuration for chat API.

URL Structure:
    Chats:
        /chats/                        GET, POST
        /chats/group/                  POST
        /chats/group/rename/           PUT
        /chats/group/add-member/       PUT
        /chats/group/remove-member/    PUT
        /chats/group/users/            PUT
        /chats/group/admins/           PUT

    Messages:
        /messages/?chatId=             GET
        /messages/                     POST
        /messages/readBy/              PUT

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import path

from chat.views import ChatViewSet, MessageViewSet

app_name = "chat"

urlpatterns = [
    path(
        "chats/",
        ChatViewSet.as_view({"get": "list", "post": "create"}),
        name="chat-list",
    ),
    path(
        "chats/group/",
        ChatViewSet.as_view({"post": "create_group"}),
        name="chat-group",
    ),
    path(
        "chats/group/rename/",
        ChatViewSet.as_view({"put": "rename"}),
        name="chat-group-rename",
    ),
    path(
        "chats/group/add-member/",
        ChatViewSet.as_view({"put": "add_member"}),
        name="chat-group-add-member",
    ),
    path(
        "chats/group/remove-member/",
        ChatViewSet.as_view({"put": "remove_member"}),
        name="chat-group-remove-member",
    ),
    path(
        "chats/group/users/",
        ChatViewSet.as_view({"put": "replace_users"}),
        name="chat-group-users",
    ),
    path(
        "chats/group/admins/",
        ChatViewSet.as_view({"put": "replace_admins"}),
        name="chat-group-admins",
    ),
    path(
        "messages/",
        MessageViewSet.as_view({"get": "list", "post": "create"}),
        name="message-list",
    ),
    path(
        "messages/readBy/",
        MessageViewSet.as_view({"put": "mark_read"}),
        name="message-read-by",
    ),
]
