"""
DRF exception handler rendering every failure in one envelope.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Responses look like:

    {
        "message": "Group chat not found",
        "error": true,
        "code": 404,
        "kind": "NotFound",
        "errorCode": "CHAT_NOT_FOUND",
        "details": {...}            # only when present
    }

Mapping:
    core.exceptions.BaseApplicationError  -> its own kind and status
    DRF ValidationError                   -> ValidationError (422) with field details
    DRF auth/permission/404 exceptions    -> their DRF status, matching kind
    django.db.DatabaseError               -> Unavailable (503)
    anything else                         -> logged, 500
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import DatabaseError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import (
    BaseApplicationError,
    ErrorKind,
    ServiceUnavailableError,
)
from core.helpers import get_client_ip

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

_DRF_KINDS = {
    status.HTTP_401_UNAUTHORIZED: ("Unauthorized", "NOT_AUTHENTICATED"),
    status.HTTP_403_FORBIDDEN: (ErrorKind.FORBIDDEN, "PERMISSION_DENIED"),
    status.HTTP_404_NOT_FOUND: (ErrorKind.NOT_FOUND, "NOT_FOUND"),
    status.HTTP_405_METHOD_NOT_ALLOWED: (ErrorKind.INVALID_OPERATION, "METHOD_NOT_ALLOWED"),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: (ErrorKind.VALIDATION, "UNSUPPORTED_MEDIA_TYPE"),
    status.HTTP_429_TOO_MANY_REQUESTS: ("RateLimited", "RATE_LIMIT_EXCEEDED"),
}


def _first_message(detail: Any) -> str:
    """Pull the first human-readable message out of a DRF error detail."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    return str(detail)


def _error_body(
    message: str,
    status_code: int,
    kind: str,
    error_code: str,
    details: dict | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "message": message,
        "error": True,
        "code": status_code,
        "kind": kind,
        "errorCode": error_code,
    }
    if details:
        body["details"] = details
    return body


def application_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    Convert exceptions raised inside DRF views to the error envelope.

    Args:
        exc: The raised exception
        context: DRF handler context (view, request, args, kwargs)

    Returns:
        Response with the structured error body
    """
    request = context.get("request")
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, DatabaseError):
        logger.error(
            "Storage failure in %s from %s: %s",
            view_name,
            get_client_ip(request) if request is not None else "-",
            exc,
            exc_info=True,
        )
        exc = ServiceUnavailableError(
            "Storage is temporarily unavailable",
            error_code="STORAGE_UNAVAILABLE",
        )

    if isinstance(exc, BaseApplicationError):
        logger.info("%s rejected request: %s", view_name, exc)
        return Response(exc.to_dict(), status=exc.status_code)

    if isinstance(exc, drf_exceptions.ValidationError):
        detail = exc.detail if isinstance(exc.detail, dict) else {"non_field_errors": exc.detail}
        body = _error_body(
            _first_message(detail),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            ErrorKind.VALIDATION,
            "VALIDATION_ERROR",
            details=detail,
        )
        return Response(body, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

    response = drf_exception_handler(exc, context)
    if response is not None:
        kind, error_code = _DRF_KINDS.get(
            response.status_code, (ErrorKind.INVALID_OPERATION, "REQUEST_ERROR")
        )
        message = _first_message(getattr(exc, "detail", response.data))
        if isinstance(exc, Http404):
            message = "Not found."
        response.data = _error_body(message, response.status_code, kind, error_code)
        return response

    logger.exception("Unhandled error in %s", view_name)
    body = _error_body(
        "Internal Server Error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalError",
        "INTERNAL_ERROR",
    )
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
