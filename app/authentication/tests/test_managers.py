"""
Tests for UserManager.

The UserManager provides:
- create_user(): Creates regular users with an optional password
- create_superuser(): Creates admin users with elevated privileges

Related files:
    - managers.py: Implementation under test
    - models.py: User model that uses this manager
"""

import pytest

from authentication.models import User
from core.helpers import is_object_id


class TestUserManagerCreateUser:
    """Tests for UserManager.create_user() method."""

    def test_creates_user_with_email_and_password(self, db):
        """
        Given valid email and password
        When create_user is called
        Then a user is created with those credentials and an object id key
        """
        user = User.objects.create_user(
            email="mgr_create_user@example.com",
            password="SecurePass123!",
            username="mgrcreate",
        )

        assert is_object_id(user.pk)
        assert user.email == "mgr_create_user@example.com"
        assert user.check_password("SecurePass123!") is True

    def test_normalizes_email_domain_to_lowercase(self, db):
        """Domain part of the email is lowercased; local part is preserved."""
        user = User.objects.create_user(email="Test.User@EXAMPLE.COM", username="testuser")

        assert user.email == "Test.User@example.com"

    def test_defaults_username_to_email_local_part(self, db):
        """A missing username falls back to the local part of the email."""
        user = User.objects.create_user(email="carol@example.com")

        assert user.username == "carol"

    def test_raises_valueerror_when_email_is_empty(self, db):
        """Email is the login identifier and cannot be blank."""
        with pytest.raises(ValueError, match="Email"):
            User.objects.create_user(email="", password="SecurePass123!")

    def test_creates_user_without_password(self, db):
        """Users created without a password cannot log in with one."""
        user = User.objects.create_user(email="nopass@example.com", username="nopass")

        assert user.has_usable_password() is False

    def test_sets_default_flags_for_regular_user(self, db):
        """Regular users are active, not staff, not superuser."""
        user = User.objects.create_user(email="flags@example.com", username="flags")

        assert user.is_active is True
        assert user.is_staff is False
        assert user.is_superuser is False


class TestUserManagerCreateSuperuser:
    """Tests for UserManager.create_superuser() method."""

    def test_creates_superuser_with_elevated_flags(self, db):
        """Superusers get staff and superuser flags."""
        admin = User.objects.create_superuser(
            email="root@example.com", password="AdminPass123!", username="rootadmin"
        )

        assert admin.is_staff is True
        assert admin.is_superuser is True

    def test_rejects_superuser_without_staff_flag(self, db):
        """is_staff=False is contradictory for a superuser."""
        with pytest.raises(ValueError, match="is_staff"):
            User.objects.create_superuser(
                email="bad@example.com", password="AdminPass123!", is_staff=False
            )


class TestUserManagerActive:
    """Tests for UserManager.active()."""

    def test_excludes_deactivated_users(self, db):
        """
        Deactivated accounts drop out of participant lookups.

        Why it matters: chat services resolve member ids through active(),
        so a disabled account can no longer be added to chats.
        """
        kept = User.objects.create_user(email="kept@example.com", username="kept")
        gone = User.objects.create_user(
            email="gone@example.com", username="gone", is_active=False
        )

        active_ids = set(User.objects.active().values_list("pk", flat=True))

        assert kept.pk in active_ids
        assert gone.pk not in active_ids
