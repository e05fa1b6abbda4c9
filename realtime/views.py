"""
REST views for the realtime app.

- GET /api/chat/presence/: who is connected to this instance's chat room.
"""

from __future__ import annotations

from django.apps import apps
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods


@require_http_methods(["GET"])
def chat_presence(request):
    if not request.user.is_authenticated:
        return JsonResponse({"detail": "Authentication required"}, status=401)

    hub = apps.get_app_config("realtime").hub
    members = hub.presence()
    return JsonResponse(
        {
            "count": len(members),
            "members": [
                {
                    "connection_id": m.connection_id,
                    "user_id": m.user_id,
                    "display_name": m.display_name,
                    "connected_at": m.connected_at,
                }
                for m in members
            ],
        }
    )
