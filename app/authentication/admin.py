"""
Django admin configuration for users.

Users are listed with the number of chats they belong to so support staff
can spot accounts that were never added anywhere.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Email login, object id key, no separate profile model."""

    list_display = (
        "email",
        "username",
        "display_name",
        "chat_count",
        "is_active",
        "date_joined",
    )
    list_filter = ("is_active", "is_staff", "date_joined")
    search_fields = ("id", "email", "username", "first_name", "last_name")
    ordering = ("-date_joined",)
    readonly_fields = ("id", "date_joined", "last_login")

    fieldsets = (
        (None, {"fields": ("id", "email", "password")}),
        ("Chat identity", {"fields": ("username", "first_name", "last_name", "avatar")}),
        ("Access", {"fields": ("is_active", "is_staff", "is_superuser", "groups")}),
        ("Activity", {"fields": ("date_joined", "last_login")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "username", "password1", "password2"),
            },
        ),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            _chat_count=Count("chat_memberships", distinct=True)
        )

    @admin.display(description="Name")
    def display_name(self, obj):
        return obj.get_full_name() or obj.username

    @admin.display(description="Chats", ordering="_chat_count")
    def chat_count(self, obj):
        return obj._chat_count
