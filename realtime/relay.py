"""
Best-effort fan-out of one outbound message to every registered connection.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from .registry import SessionRegistry
from .serializers import OutboundMessage

logger = logging.getLogger(__name__)


class Connection(Protocol):
    @property
    def is_open(self) -> bool: ...

    async def send_message(self, message: OutboundMessage) -> None: ...


class BroadcastRelay:
    """
    At-most-once delivery: connections that are not writable are skipped, and a
    failed send to one recipient never stops delivery to the others.
    """

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    async def broadcast(self, message: OutboundMessage, exclude: Optional[Any] = None) -> int:
        """Send `message` to all open connections except `exclude`. Returns the delivered count."""
        delivered = 0
        # Snapshot: connections may close while we await their peers' sends.
        for connection, session in self.registry.items():
            if connection is exclude or not connection.is_open:
                continue
            try:
                await connection.send_message(message)
            except Exception:
                logger.debug(
                    "Broadcast delivery failed (connection_id=%s)", session.connection_id, exc_info=True
                )
                continue
            delivered += 1
        return delivered
