"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, consumers handle socket concerns, models
    handle data, services handle logic.

Pattern Comparison:
    - ServiceResult: Use for expected failures (validation, business rules)
    - Exceptions: Use for unexpected failures (database errors, bugs)

Usage:
    from core.exceptions import ErrorKind
    from core.services import BaseService, ServiceResult

    class ChatService(BaseService):
        @classmethod
        def rename_group_chat(cls, requester, chat_id, chat_name) -> ServiceResult[Chat]:
            chat = Chat.objects.filter(pk=chat_id, is_group_chat=True).first()
            if chat is None:
                return ServiceResult.failure(
                    "Group chat not found",
                    error_code="CHAT_NOT_FOUND",
                    kind=ErrorKind.NOT_FOUND,
                )

            with cls.atomic():
                chat.chat_name = chat_name
                chat.save(update_fields=["chat_name", "updated_at"])

            cls.get_logger().info("Renamed chat %s", chat.pk)
            return ServiceResult.success(chat)

    # In view
    result = ChatService.rename_group_chat(request.user, chat_id, name)
    if not result.success:
        raise result.to_exception()

Related:
    - core.exceptions: Exception classes matching each failure kind
    - core.viewset_mixins: Renders a ServiceResult as an HTTP response
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from core.exceptions import (
    EXCEPTIONS_BY_KIND,
    BaseApplicationError,
    ErrorKind,
    InvalidOperationError,
)

if TYPE_CHECKING:
    from collections.abc import Generator

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (validation errors, business rule violations).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures
        kind: Error category (see core.exceptions.ErrorKind)

    Usage:
        # Success case
        return ServiceResult.success(chat)

        # Failure case
        return ServiceResult.failure(
            "Chat not found", "CHAT_NOT_FOUND", kind=ErrorKind.NOT_FOUND
        )

        # Validation errors with field details
        return ServiceResult.failure(
            "Validation failed",
            error_code="VALIDATION_ERROR",
            errors={"users": ["Duplicate user ids are not allowed"]},
            kind=ErrorKind.VALIDATION,
        )

    Note:
        This pattern is inspired by Result types in Rust/Swift.
        It makes error handling explicit without try/except blocks.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)
    kind: str | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
        kind: str = ErrorKind.INVALID_OPERATION,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)
            kind: Error category, InvalidOperation unless stated

        Returns:
            ServiceResult with success=False and error details
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
            kind=kind,
        )

    def to_exception(self) -> BaseApplicationError:
        """
        Convert a failed result into the matching application exception.

        Views raise the returned exception so the DRF exception handler
        renders it with the right status code.
        """
        exc_class = EXCEPTIONS_BY_KIND.get(self.kind or "", InvalidOperationError)
        return exc_class(
            self.error or "Operation failed",
            error_code=self.error_code,
            details=self.errors,
        )


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services should be stateless
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.

        Example:
            with cls.atomic():
                chat = Chat.objects.create(chat_name="sender")
                ChatMembership.objects.create(chat=chat, user=user)
                # If the membership insert fails, the chat is also rolled back
        """
        from django.db import transaction

        with transaction.atomic():
            yield
