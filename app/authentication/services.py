"""
Identity services.

The chat app never queries the user table directly; it resolves ids
through IdentityService, which is the boundary to the identity layer.

Related files:
    - models.py: User
    - chat/services.py: Consumer of these lookups
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from authentication.models import User
from core.exceptions import ErrorKind
from core.helpers import is_object_id, normalize_object_id
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Sequence


class IdentityService(BaseService):
    """
    Resolve object ids to active users.

    Usage:
        from authentication.services import IdentityService

        result = IdentityService.get_user("a1a1a1a1a1a1a1a1a1a1a1a1")
        if result.success:
            user = result.data

        result = IdentityService.resolve_users(ids, field="users")
        if not result.success:
            # result.errors == {"users[1]": ["User not found"]}
            ...
    """

    @classmethod
    def get_user(cls, user_id: str, field: str = "userId") -> ServiceResult[User]:
        """
        Look up a single active user.

        Args:
            user_id: Object id of the user
            field: Request field name reported in error details

        Returns:
            ServiceResult with the user, ValidationError for a malformed id,
            NotFound when no active user has that id
        """
        if not is_object_id(user_id):
            return ServiceResult.failure(
                "Invalid user id",
                error_code="INVALID_ID",
                errors={field: ["Must be a 24-character hexadecimal identifier."]},
                kind=ErrorKind.VALIDATION,
            )

        user = User.objects.active().filter(pk=normalize_object_id(user_id)).first()
        if user is None:
            return ServiceResult.failure(
                "UserId is not registered",
                error_code="USER_NOT_FOUND",
                errors={field: ["User not found"]},
                kind=ErrorKind.NOT_FOUND,
            )
        return ServiceResult.success(user)

    @classmethod
    def resolve_users(
        cls, user_ids: Sequence[str], field: str = "users"
    ) -> ServiceResult[list[User]]:
        """
        Resolve a list of ids, preserving the input order.

        Fails on the first malformed, duplicated or unknown id, naming its
        position as ``<field>[<index>]``.
        """
        if not user_ids:
            return ServiceResult.failure(
                "At least one user is required",
                error_code="EMPTY_USER_LIST",
                errors={field: ["This list may not be empty."]},
                kind=ErrorKind.VALIDATION,
            )

        normalized: list[str] = []
        for index, user_id in enumerate(user_ids):
            if not is_object_id(user_id):
                return ServiceResult.failure(
                    "Invalid user id",
                    error_code="INVALID_ID",
                    errors={f"{field}[{index}]": ["Must be a 24-character hexadecimal identifier."]},
                    kind=ErrorKind.VALIDATION,
                )
            user_id = normalize_object_id(user_id)
            if user_id in normalized:
                return ServiceResult.failure(
                    "Duplicate user ids are not allowed",
                    error_code="DUPLICATE_USER",
                    errors={f"{field}[{index}]": ["Duplicate user id."]},
                    kind=ErrorKind.VALIDATION,
                )
            normalized.append(user_id)

        users = User.objects.active().in_bulk(normalized)
        resolved = []
        for index, user_id in enumerate(normalized):
            user = users.get(user_id)
            if user is None:
                return ServiceResult.failure(
                    "User not found",
                    error_code="USER_NOT_FOUND",
                    errors={f"{field}[{index}]": ["User not found"]},
                    kind=ErrorKind.NOT_FOUND,
                )
            resolved.append(user)

        return ServiceResult.success(resolved)
