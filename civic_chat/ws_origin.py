"""
WebSocket origin validator for deployments behind a proxy (load balancer, nginx).

Channels' AllowedHostsOriginValidator rejects handshakes without an Origin header.
Behind a proxy the Origin can be dropped, so this validator accepts when:
- Origin's host is in ALLOWED_HOSTS, or
- Host or X-Forwarded-Host is in ALLOWED_HOSTS, or
- there is no Origin and Host is a private IPv4 address (the balancer talking to the task).
Denials are logged with origin/host values only.
"""
from __future__ import annotations

import ipaddress
import logging
from typing import Iterable, Optional
from urllib.parse import urlparse

from channels.security.websocket import WebsocketDenier
from django.conf import settings
from django.http.request import is_same_domain

logger = logging.getLogger(__name__)

_denier_app = WebsocketDenier.as_asgi()


def get_header(scope: dict, name: str) -> Optional[str]:
    want = name.lower().encode("ascii")
    for key, value in scope.get("headers") or []:
        if key.lower() == want:
            return value.decode("utf-8", errors="replace").strip()
    return None


def strip_port(host: str) -> str:
    if not host:
        return ""
    if host.startswith("["):
        # [::1]:8000
        return host.split("]", 1)[0].lstrip("[").lower()
    return host.split(":", 1)[0].strip().lower()


def _pattern_hostname(pattern: str) -> Optional[str]:
    if pattern.startswith("."):
        # Django's subdomain wildcard form; is_same_domain understands it as-is.
        return pattern.lower()
    if "://" in pattern:
        return urlparse(pattern).hostname
    return urlparse("//" + pattern).hostname or pattern.lower()


def host_allowed(hostname: str, allowed_hosts: Iterable[str]) -> bool:
    if not hostname:
        return False
    for pattern in allowed_hosts:
        if pattern == "*":
            return True
        pattern_host = _pattern_hostname(pattern)
        if pattern_host and is_same_domain(hostname, pattern_host):
            return True
    return False


def origin_allowed(origin: str, allowed_hosts: Iterable[str]) -> bool:
    try:
        hostname = urlparse(origin).hostname
    except ValueError:
        return False
    return bool(hostname) and host_allowed(hostname, allowed_hosts)


def is_private_ipv4(hostname: str) -> bool:
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return ip.version == 4 and ip.is_private and not ip.is_loopback


class AllowedHostsOrForwardedHostOriginValidator:
    """ASGI middleware that validates the WebSocket handshake's origin."""

    def __init__(self, application):
        self.application = application

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "websocket":
            raise ValueError("AllowedHostsOrForwardedHostOriginValidator only supports WebSocket")

        allowed_hosts = list(getattr(settings, "ALLOWED_HOSTS", None) or [])
        if settings.DEBUG and not allowed_hosts:
            allowed_hosts = ["localhost", "127.0.0.1", "[::1]"]

        origin = get_header(scope, "origin")
        host = get_header(scope, "host")
        forwarded_host = get_header(scope, "x-forwarded-host")
        if forwarded_host:
            forwarded_host = forwarded_host.split(",")[0].strip()

        if self.is_allowed(origin, host, forwarded_host, allowed_hosts):
            return await self.application(scope, receive, send)

        logger.warning(
            "WebSocket origin denied: origin=%s host=%s x_forwarded_host=%s allowed_hosts=%s path=%s",
            origin or "(none)",
            host or "(none)",
            forwarded_host or "(none)",
            allowed_hosts,
            scope.get("path") or "",
        )
        return await _denier_app(scope, receive, send)

    @staticmethod
    def is_allowed(
        origin: Optional[str],
        host: Optional[str],
        forwarded_host: Optional[str],
        allowed_hosts: list[str],
    ) -> bool:
        if origin and origin_allowed(origin, allowed_hosts):
            return True
        for candidate in (host, forwarded_host):
            if candidate and host_allowed(strip_port(candidate), allowed_hosts):
                return True
        return bool(not origin and host and is_private_ipv4(strip_port(host)))
