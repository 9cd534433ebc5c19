"""
Authentication models.

This module defines the identity model the chat core references:
- User: Custom user model with email-based authentication and the public
  profile fields rendered alongside chats and messages

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: IdentityService lookups used by the chat app

Security:
    - User passwords hashed with Django's PBKDF2
    - The password hash is never serialized (see serializers.UserSerializer)
"""

import re

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import ObjectIdPrimaryKeyMixin

DEFAULT_AVATAR = "avatar.png"

# Reserved usernames that cannot be used
RESERVED_USERNAMES = frozenset([
    "admin", "administrator", "root", "system", "api", "support",
    "help", "security", "account", "login", "logout", "auth",
    "user", "users", "null", "undefined", "anonymous", "sender",
])


def validate_username_not_reserved(value):
    """Validate that username is not in the reserved list."""
    if value.lower() in RESERVED_USERNAMES:
        raise ValidationError(
            f"The username '{value}' is reserved and cannot be used."
        )


def validate_username_format(value):
    """Validate username format: 4-25 alphanumeric characters."""
    if not re.match(r"^[a-zA-Z0-9]{4,25}$", value):
        raise ValidationError(
            "Username must be 4-25 characters and contain only "
            "letters and numbers."
        )


class User(ObjectIdPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the login identifier.

    Fields:
        id: 24-character hex object id
        email: Login identifier, unique
        username: Unique public handle
        first_name / last_name: Display name parts
        avatar: Storage path of the avatar image
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email='user@example.com',
            password='securepassword',
            username='alice',
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (login identifier)",
    )
    username = models.CharField(
        max_length=25,
        unique=True,
        validators=[validate_username_format, validate_username_not_reserved],
        help_text="Unique public handle",
    )
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    avatar = models.CharField(
        max_length=255,
        default=DEFAULT_AVATAR,
        help_text="Storage path of the avatar image",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    # Timestamps
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    def get_full_name(self):
        """Return "first last", falling back to the username."""
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username

    def get_short_name(self):
        """Return the first name, falling back to the username."""
        return self.first_name or self.username
