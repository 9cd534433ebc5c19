"""
User manager for email-based login.

Related files:
    - models.py: User model that uses this manager
    - services.py: IdentityService, which resolves chat participants via active()
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Manager for User with email as the login identifier.

    Usage:
        user = User.objects.create_user(
            email='user@example.com',
            password='securepassword',
            username='alice',
        )

        participants = User.objects.active().filter(pk__in=ids)
    """

    def active(self):
        """Users that may log in and take part in chats."""
        return self.get_queryset().filter(is_active=True)

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a user.

        The username defaults to the local part of the email. Without a
        password the account gets an unusable one and cannot obtain tokens.

        Raises:
            ValueError: If email is missing or the username ends up empty
        """
        if not email:
            raise ValueError("The Email field must be set")

        email = self.normalize_email(email)
        extra_fields.setdefault("username", email.split("@")[0])
        if not extra_fields["username"]:
            raise ValueError("The Username field must be set")
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)
