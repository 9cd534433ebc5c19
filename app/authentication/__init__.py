"""
Authentication application.

This app provides the email-based user model, JWT token issuance and
user lookup used by the chat app to resolve participants.

Key components:
    - User model: Custom email-based user with ObjectId primary key
    - IdentityService: User lookup and member list resolution
    - Token endpoints: SimpleJWT obtain and refresh

Usage:
    from authentication.models import User
    from authentication.services import IdentityService
"""
