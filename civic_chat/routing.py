"""
Project-level Channels routing.

Keeping routing in the Django project package ensures `civic_chat.asgi` can import it.
"""

from realtime.routing import get_websocket_urlpatterns

websocket_urlpatterns = get_websocket_urlpatterns()

__all__ = ["websocket_urlpatterns"]
