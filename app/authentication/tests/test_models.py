"""
Tests for the User model.

Covers the object id primary key, default avatar, display names and
the username validators.
"""

import pytest
from django.core.exceptions import ValidationError

from authentication.models import DEFAULT_AVATAR
from authentication.tests.factories import UserFactory
from core.helpers import is_object_id


@pytest.mark.django_db
class TestUserModel:
    """Tests for User fields and helpers."""

    def test_primary_key_is_lowercase_object_id(self):
        """
        New users get a 24-character lowercase hex id.

        Why it matters: every public identifier shares this shape, and
        clients validate ids before sending them.
        """
        user = UserFactory()

        assert is_object_id(user.pk)
        assert user.pk == user.pk.lower()

    def test_explicit_object_id_is_kept(self):
        """Fixtures and imports can pin a known id."""
        user = UserFactory(id="a1a1a1a1a1a1a1a1a1a1a1a1")

        assert user.pk == "a1a1a1a1a1a1a1a1a1a1a1a1"

    def test_default_avatar(self):
        """Users start with the shared default avatar path."""
        user = UserFactory()

        assert user.avatar == DEFAULT_AVATAR

    def test_full_name_falls_back_to_username(self):
        """Display helpers never return an empty string."""
        user = UserFactory(first_name="", last_name="", username="nameless")

        assert user.get_full_name() == "nameless"
        assert user.get_short_name() == "nameless"

    def test_full_name_joins_first_and_last(self):
        user = UserFactory(first_name="Ada", last_name="Lovelace")

        assert user.get_full_name() == "Ada Lovelace"

    def test_str_is_email(self):
        user = UserFactory(email="str@example.com")

        assert str(user) == "str@example.com"


@pytest.mark.django_db
class TestUsernameValidation:
    """Tests for username validators run by full_clean()."""

    def test_rejects_reserved_username(self):
        """Reserved handles cannot be claimed."""
        user = UserFactory.build(username="admin", email="reserved@example.com")
        user.set_password("TestPass123!")

        with pytest.raises(ValidationError) as exc_info:
            user.full_clean()

        assert "username" in exc_info.value.message_dict

    def test_rejects_non_alphanumeric_username(self):
        """Handles are 4-25 letters and digits."""
        user = UserFactory.build(username="no spaces!", email="fmt@example.com")
        user.set_password("TestPass123!")

        with pytest.raises(ValidationError) as exc_info:
            user.full_clean()

        assert "username" in exc_info.value.message_dict

    def test_accepts_valid_username(self):
        user = UserFactory.build(username="alice42", email="valid@example.com")
        user.set_password("TestPass123!")

        user.full_clean()
