"""
ViewSet mixins for common DRF functionality.

This module provides generic, non-domain-specific mixins for viewsets:
- EnvelopeResponseMixin: Wrap successful payloads in the API envelope
- ServiceResultMixin: Turn a ServiceResult into a response or an exception

Success envelope:
    {
        "message": "Success",
        "error": false,
        "code": 200,
        "result": {"chat": {...}}
    }

Failures are raised as core.exceptions and rendered by
core.exception_handler, so both halves of the API share one shape.

Usage:
    from core.viewset_mixins import ServiceResultMixin

    class ChatViewSet(ServiceResultMixin, viewsets.ViewSet):
        def rename(self, request):
            result = ChatService.rename_group_chat(...)
            return self.render_result(result, ChatSerializer, key="chat")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework import status
from rest_framework.response import Response

if TYPE_CHECKING:
    from typing import Any

    from core.services import ServiceResult

logger = logging.getLogger(__name__)


class EnvelopeResponseMixin:
    """
    Build success responses in the shared envelope.

    Usage:
        return self.envelope({"user": UserSerializer(user).data})
        return self.envelope(message="User exists")
    """

    def envelope(
        self,
        result: dict[str, Any] | None = None,
        message: str = "Success",
        status_code: int = status.HTTP_200_OK,
    ) -> Response:
        body: dict[str, Any] = {
            "message": message,
            "error": False,
            "code": status_code,
        }
        if result is not None:
            body["result"] = result
        return Response(body, status=status_code)


class ServiceResultMixin(EnvelopeResponseMixin):
    """
    Render ServiceResult objects returned by the service layer.

    A failed result is raised as its matching application exception; a
    successful one is serialized with ``serializer_class`` and placed in the
    envelope under ``key``.
    """

    def get_serializer_context(self) -> dict[str, Any]:
        return {"request": getattr(self, "request", None), "view": self}

    def render_result(
        self,
        result: ServiceResult,
        serializer_class: Any,
        key: str,
        many: bool = False,
        status_code: int = status.HTTP_200_OK,
    ) -> Response:
        if not result.success:
            raise result.to_exception()

        data = serializer_class(
            result.data, many=many, context=self.get_serializer_context()
        ).data
        return self.envelope({key: data}, status_code=status_code)
