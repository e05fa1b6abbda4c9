"""
ASGI config for civic_chat project.

It exposes the ASGI callable as a module-level variable named ``application``.
"""
# Load secrets (if configured) before Django settings are loaded
import civic_chat.env_bootstrap  # noqa: F401

import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "civic_chat.settings")

from channels.auth import AuthMiddlewareStack
from channels.routing import ProtocolTypeRouter, URLRouter
from django.conf import settings
from django.core.asgi import get_asgi_application

# Django must be set up before the routing (and the realtime app's hub) is imported.
django_asgi_app = get_asgi_application()

from civic_chat.routing import websocket_urlpatterns  # noqa: E402
from civic_chat.ws_origin import AllowedHostsOrForwardedHostOriginValidator  # noqa: E402

# AuthMiddlewareStack resolves the Django session cookie into scope["user"];
# ChatConsumer rejects sockets whose user is anonymous.
websocket_app = AuthMiddlewareStack(URLRouter(websocket_urlpatterns))
if not settings.DEBUG:
    websocket_app = AllowedHostsOrForwardedHostOriginValidator(websocket_app)

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": websocket_app,
    }
)
