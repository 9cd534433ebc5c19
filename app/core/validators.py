"""
Custom validators for Django models and DRF serializers.

This module provides domain-agnostic validators for:
- Identifier format (24-character hex object ids)

Usage:
    from core.validators import validate_object_id

    class MyModel(models.Model):
        external_id = models.CharField(max_length=24, validators=[validate_object_id])
"""

from __future__ import annotations

from django.core.exceptions import ValidationError

from core.helpers import is_object_id


def validate_object_id(value: str):
    """
    Validate that value is a 24-character hexadecimal object id.

    Args:
        value: String to validate

    Raises:
        ValidationError: If the value has any other shape
    """
    if not is_object_id(value):
        raise ValidationError(
            "Must be a 24-character hexadecimal identifier.",
            code="invalid_object_id",
        )
