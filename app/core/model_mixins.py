"""
Model mixins providing reusable functionality for Django models.

This module contains abstract mixin classes that can be combined with
BaseModel to add specific functionality. These are generic infrastructure
classes with no domain-specific logic.

Available Mixins:
    ObjectIdPrimaryKeyMixin: Use a 24-character hex object id as primary key

Usage:
    from core.models import BaseModel
    from core.model_mixins import ObjectIdPrimaryKeyMixin

    class Document(ObjectIdPrimaryKeyMixin, BaseModel):
        name = models.CharField(max_length=100)

Note:
    - Always list mixins before BaseModel in inheritance
    - Mixins are abstract and don't create database tables
"""

from __future__ import annotations

from django.db import models

from core.helpers import generate_object_id
from core.validators import validate_object_id


class ObjectIdPrimaryKeyMixin(models.Model):
    """
    Use an object id as primary key instead of auto-increment integer.

    Benefits:
        - Non-guessable IDs that still sort by creation time
        - Can be generated before the database insert
        - Same identifier shape for every public resource (users, chats, messages)

    Fields:
        id: 24-character lowercase hex string (auto-generated)

    Usage:
        chat = Chat.objects.create(chat_name="Team", is_group_chat=True)
        print(chat.id)  # "65f1c0de9a1b2c3d4e5f6a7b"

        # Can also provide your own id
        Chat.objects.create(id="a1a1a1a1a1a1a1a1a1a1a1a1", chat_name="sender")
    """

    id = models.CharField(
        primary_key=True,
        max_length=24,
        default=generate_object_id,
        editable=False,
        validators=[validate_object_id],
        help_text="Unique 24-character hex identifier for this record",
    )

    class Meta:
        abstract = True
