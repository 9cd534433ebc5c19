"""
ASGI entry point serving both the HTTP API and the chat socket.

Protocols:
    http        Django (REST API, admin, schema, health)
    websocket   /ws/chat/ -> chat.consumers.ChatConsumer

Socket stack, outermost first:
    AllowedHostsOriginValidator  rejects origins outside ALLOWED_HOSTS
    JWTAuthMiddleware            puts the token's user (or AnonymousUser) in scope
    URLRouter                    dispatches chat.routing.websocket_urlpatterns

Run with any ASGI server, e.g. ``daphne config.asgi:application`` or
``uvicorn config.asgi:application``.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# Django must be set up before consumers import models
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402

from chat.middleware import JWTAuthMiddleware  # noqa: E402
from chat.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": AllowedHostsOriginValidator(
            JWTAuthMiddleware(URLRouter(websocket_urlpatterns))
        ),
    }
)
