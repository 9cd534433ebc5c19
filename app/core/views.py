"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the business domain but are
essential for application infrastructure, such as health checks.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)

HEALTH_PROBE_TYPE = "health.probe"


def _channel_layer_reachable() -> bool:
    """Round-trip one message through a fresh channel on the default layer."""
    layer = get_channel_layer()
    if layer is None:
        return False

    async def probe():
        channel = await layer.new_channel()
        await layer.send(channel, {"type": HEALTH_PROBE_TYPE})
        message = await layer.receive(channel)
        return message.get("type") == HEALTH_PROBE_TYPE

    return async_to_sync(probe)()


def health_check(request):
    """
    Health check for load balancers and container orchestration.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - channel_layer: "connected" or "disconnected"

    HTTP Status Codes:
        200: Database reachable (socket delivery may still be degraded)
        503: Database unreachable

    A broken channel layer only stops realtime delivery; the REST API keeps
    working, so it is reported but does not fail the check.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "channel_layer": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        logger.warning("Health check could not reach the database", exc_info=True)
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    try:
        reachable = _channel_layer_reachable()
    except Exception:
        # Redis outages surface as connection errors of several types
        logger.warning("Health check could not reach the channel layer", exc_info=True)
        reachable = False
    health_status["channel_layer"] = "connected" if reachable else "disconnected"

    status_code = 200 if is_healthy else 503

    return JsonResponse(health_status, status=status_code)
