"""
Serializer mixins and fields shared by DRF serializers.

Available:
    ObjectIdField: Accepts a 24-character hex id and normalises it to lowercase
    TimestampMixin: Adds camelCase createdAt/updatedAt output fields

Usage:
    from core.serializer_mixins import ObjectIdField, TimestampMixin

    class ChatRenameSerializer(serializers.Serializer):
        chatId = ObjectIdField()
        chatName = serializers.CharField(min_length=3, max_length=50)

    class ChatSerializer(TimestampMixin, serializers.ModelSerializer):
        class Meta:
            model = Chat
            fields = ["id", "createdAt", "updatedAt"]
"""

from __future__ import annotations

from rest_framework import serializers

from core.helpers import OBJECT_ID_PATTERN, normalize_object_id


class ObjectIdField(serializers.RegexField):
    """
    Serializer field for object ids.

    Any value that is not 24 hex characters fails validation with a
    field-level error, so a malformed id never reaches a lookup.
    """

    default_error_messages = {
        "invalid": "Must be a 24-character hexadecimal identifier.",
    }

    def __init__(self, **kwargs):
        super().__init__(OBJECT_ID_PATTERN, **kwargs)

    def to_internal_value(self, data):
        return normalize_object_id(super().to_internal_value(data))


class TimestampMixin(serializers.Serializer):
    """
    Add camelCase timestamp fields to serializer output.

    Works with models that inherit from core.models.BaseModel. The
    serializer's Meta.fields must list the names it wants rendered.
    """

    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
