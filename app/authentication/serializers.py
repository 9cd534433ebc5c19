"""
Serializers for authentication models.

This module provides DRF serializers for:
- User model (public profile fields, read only)
- User lookup path parameter validation

Related files:
    - models.py: User model
    - views.py: Views that use these serializers

Security:
    - The password hash and permission flags are never exposed
"""

from rest_framework import serializers

from authentication.models import User
from core.serializer_mixins import ObjectIdField


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for the public profile of a User.

    Used for the current-user endpoint and wherever chats and messages
    embed their members, admins and senders.
    """

    firstName = serializers.CharField(source="first_name", read_only=True)
    lastName = serializers.CharField(source="last_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "firstName",
            "lastName",
            "email",
            "avatar",
        ]
        read_only_fields = fields


class SenderSerializer(serializers.ModelSerializer):
    """Compact user representation for message senders in chat previews."""

    firstName = serializers.CharField(source="first_name", read_only=True)
    lastName = serializers.CharField(source="last_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "firstName", "lastName", "avatar"]
        read_only_fields = fields


class UserLookupSerializer(serializers.Serializer):
    """Validates the id segment of /users/<id>/."""

    id = ObjectIdField()
