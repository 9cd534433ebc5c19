"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across HTTP and socket boundaries
- Machine-readable error codes for client handling
- A stable error ``kind`` that maps to one HTTP status

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Malformed input shape, length or format (422)
    ├── NotFoundError - Referenced chat/user/message absent (404)
    ├── ConflictError - Duplicate state, e.g. already a member (409)
    ├── PermissionDeniedError - Authority or membership check failed (403)
    ├── InvalidOperationError - Self-referential or already-satisfied request (400)
    └── ServiceUnavailableError - Storage or collaborator failure (503)

Usage:
    from core.exceptions import NotFoundError, ValidationError

    # Raise with message only
    raise ValidationError("Chat name must be 3-50 characters")

    # Raise with error code for client handling
    raise NotFoundError("Chat not found", error_code="CHAT_NOT_FOUND")

    # Raise with additional details
    raise ValidationError(
        "Validation failed",
        details={"users": ["Duplicate user ids are not allowed"]},
    )

Note:
    Services report expected failures through core.services.ServiceResult,
    which carries the same ``kind`` and converts back into these classes
    with ``ServiceResult.to_exception()``. The DRF exception handler in
    core.exception_handler renders any of them as a structured response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class ErrorKind:
    """Stable error kinds shared by exceptions, results and responses."""

    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    FORBIDDEN = "Forbidden"
    INVALID_OPERATION = "InvalidOperation"
    UNAVAILABLE = "Unavailable"


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Provides a consistent interface for error handling across the application.
    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        kind: Stable error category (class attribute)
        status_code: HTTP status used when rendered (class attribute)

    Example:
        try:
            ...
        except BaseApplicationError as e:
            logger.warning("Request rejected: %s", e)
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "APPLICATION_ERROR"
    kind: str = ErrorKind.INVALID_OPERATION
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict in the error envelope shape

        Example:
            {
                "message": "Chat not found",
                "error": True,
                "code": 404,
                "kind": "NotFound",
                "errorCode": "CHAT_NOT_FOUND",
            }
        """
        result: dict[str, Any] = {
            "message": self.message,
            "error": True,
            "code": self.status_code,
            "kind": self.kind,
            "errorCode": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Malformed object ids (anything but 24 hex characters)
    - Out-of-range lengths (chat names, message content)
    - Empty or duplicated id lists

    Example:
        raise ValidationError(
            "Validation failed",
            details={"chatName": ["Ensure this field has at least 3 characters."]},
        )

    Note:
        A malformed id is always a ValidationError, never a NotFoundError.
    """

    default_error_code: str = "VALIDATION_ERROR"
    kind = ErrorKind.VALIDATION
    status_code = 422


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        chat = Chat.objects.filter(pk=chat_id, is_group_chat=True).first()
        if not chat:
            raise NotFoundError(
                "Group chat not found",
                error_code="CHAT_NOT_FOUND",
                details={"chatId": chat_id},
            )
    """

    default_error_code: str = "NOT_FOUND"
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Adding a user who is already a member or admin
    - Unique constraint violations
    """

    default_error_code: str = "CONFLICT"
    kind = ErrorKind.CONFLICT
    status_code = 409


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the requester lacks authority for an operation.

    Use for:
    - Non-admins mutating a group chat
    - Non-members reading or writing a chat

    Note:
        For authentication failures (missing/invalid token), DRF's
        NotAuthenticated/AuthenticationFailed apply. Use this for
        authorization failures.
    """

    default_error_code: str = "PERMISSION_DENIED"
    kind = ErrorKind.FORBIDDEN
    status_code = 403


class InvalidOperationError(BaseApplicationError):
    """
    Raised when a request is self-referential or its precondition is already satisfied.

    Use for:
    - Opening a direct chat with yourself
    - The sole admin leaving a group
    - Marking a message read twice

    Example:
        raise InvalidOperationError(
            "Duplicate UserId. User Not able to create chat with itself",
            error_code="SAME_USER",
        )
    """

    default_error_code: str = "INVALID_OPERATION"
    kind = ErrorKind.INVALID_OPERATION
    status_code = 400


class ServiceUnavailableError(BaseApplicationError):
    """
    Raised when storage or a collaborator fails.

    Use for:
    - Database connection failures and timeouts
    - Channel layer failures

    Note:
        Log the original error for debugging but don't expose
        internal details to clients.
    """

    default_error_code: str = "SERVICE_UNAVAILABLE"
    kind = ErrorKind.UNAVAILABLE
    status_code = 503


EXCEPTIONS_BY_KIND: dict[str, type[BaseApplicationError]] = {
    exc.kind: exc
    for exc in (
        ValidationError,
        NotFoundError,
        ConflictError,
        PermissionDeniedError,
        InvalidOperationError,
        ServiceUnavailableError,
    )
}
