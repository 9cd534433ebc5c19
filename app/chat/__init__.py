"""
Chat app for real-time messaging.

This app handles:
- Direct chats (one per user pair) and group chats with admins
- Message sending and history
- Read receipts and unread counts
- WebSocket presence, typing indicators and message relay

Related apps:
    - authentication: User model for chat participants
    - core: ServiceResult, response envelope, exception handler

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for the WebSocket handler.
    See routing.py for WebSocket URL patterns.

Usage:
    from chat.services import ChatService, MessageService

    # Get or create the direct chat with another user
    result = ChatService.get_or_create_direct_chat(requester=user, other_user_id=other.id)

    # Send message
    result = MessageService.send_message(user, result.data.id, "Hello!")
    if not result.success:
        raise result.to_exception()
"""
