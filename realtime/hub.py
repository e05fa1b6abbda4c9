"""
Single owner of the session registry and the relay bound to it.

One hub exists per process (see `RealtimeConfig.hub`); consumers and views get it
injected instead of reaching for module state.
"""

from __future__ import annotations

from typing import List

from .registry import ChatSession, SessionRegistry
from .relay import BroadcastRelay


class ChatHub:
    def __init__(self, registry: SessionRegistry | None = None):
        self.registry = registry if registry is not None else SessionRegistry()
        self.relay = BroadcastRelay(self.registry)

    def presence(self) -> List[ChatSession]:
        """Active sessions, oldest first (stable ordering for clients)."""
        return sorted(self.registry.sessions(), key=lambda s: (s.connected_at, s.connection_id))

    def __len__(self) -> int:
        return len(self.registry)
