from __future__ import annotations

import os
import time

from django.apps import apps
from django.http import JsonResponse


def health(request):
    """
    Load balancer health check endpoint.

    Keep it cheap and dependency-free: no DB query.
    """

    return JsonResponse(
        {
            "status": "ok",
            "ts": int(time.time()),
            "instance_id": os.environ.get("INSTANCE_ID", "unknown-instance"),
            "connections": len(apps.get_app_config("realtime").hub),
        }
    )
