"""
Core base model providing common functionality for all domain models.

This module contains the abstract base class that should be inherited by all
domain models in the application. It is a generic infrastructure class with
no domain-specific logic.

Base Classes:
    BaseModel: Abstract model with timestamps (created_at, updated_at)

For the object id primary key, see core.model_mixins.

Usage:
    from core.models import BaseModel
    from core.model_mixins import ObjectIdPrimaryKeyMixin

    class Document(ObjectIdPrimaryKeyMixin, BaseModel):
        name = models.CharField(max_length=100)

Note:
    - Always list mixins before BaseModel in inheritance
    - ``updated_at`` only moves when the row is saved; services that change
      related rows (memberships, admins) save the parent with
      ``update_fields=["updated_at"]`` to keep it current.
"""

from __future__ import annotations

from django.db import models


class BaseModel(models.Model):
    """
    Abstract base model providing common fields for all models.

    Fields:
        created_at: Automatically set when the object is first created
        updated_at: Automatically updated whenever the object is saved
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,  # Index for efficient time-based queries
        help_text="Timestamp when this record was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when this record was last modified",
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        """Default string representation using primary key."""
        return f"{self.__class__.__name__}(id={self.pk})"

    def touch(self) -> None:
        """Bump ``updated_at`` without rewriting any other column."""
        self.save(update_fields=["updated_at"])
