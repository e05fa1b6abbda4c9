"""
Reasons a realtime connection is refused before it becomes active.

Each carries the WebSocket close code and the reason string sent in the
close frame. Nothing here is ever retried.
"""

from __future__ import annotations

# RFC 6455 close codes
POLICY_VIOLATION = 1008
INTERNAL_ERROR = 1011


class ConnectionRejected(Exception):
    code: int = POLICY_VIOLATION
    reason: str = "Connection rejected"

    def __init__(self, reason: str | None = None, *, code: int | None = None):
        if reason is not None:
            self.reason = reason
        if code is not None:
            self.code = code
        super().__init__(self.reason)


class AuthenticationRequired(ConnectionRejected):
    """No signed-in user was attached to the handshake."""

    reason = "Authentication required"


class UserNotFound(ConnectionRejected):
    """The handshake carried a user id that has no stored record."""

    reason = "User not found"


class UserLookupTimeout(ConnectionRejected):
    code = INTERNAL_ERROR
    reason = "User lookup timed out"
