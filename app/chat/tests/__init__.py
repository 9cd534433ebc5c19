"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Chat, DirectChatPair, membership and Message model tests
- test_authorization.py: Role table and relation checks
- test_services.py: ChatService and MessageService tests
- test_events.py: WebSocket frame parsing tests
- test_presence.py: Presence registry tests
- test_consumers.py: WebSocket consumer tests
- test_views.py: REST API endpoint tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_consumers.py
"""
