"""
HTTP middleware for civic_chat.

- HealthCheckAllowHttpMiddleware: lets load balancer probes reach /health/ over
  plain HTTP. It must run before SecurityMiddleware (no SSL redirect), skips CSRF,
  and answers with a permissive CORS header.
"""

from __future__ import annotations


def _is_health_path(request) -> bool:
    path = (request.path or "").rstrip("/") or "/"
    return path == "/health"


class HealthCheckAllowHttpMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        is_health = _is_health_path(request)
        if is_health:
            # SecurityMiddleware treats the request as already secure
            request.META["HTTP_X_FORWARDED_PROTO"] = "https"
            request.csrf_processing_done = True
        response = self.get_response(request)
        if is_health:
            response["Access-Control-Allow-Origin"] = "*"
        return response
