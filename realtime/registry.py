"""
Live table of connection -> chat session bindings.

Entries are created when a socket becomes active and removed exactly once when
it closes. Everything runs on the ASGI server's event loop, so mutations only
happen between awaits and no lock is needed. The table is per process.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Optional, Tuple


@dataclass(frozen=True)
class ChatSession:
    connection_id: str
    user_id: int
    display_name: str
    connected_at: int = field(default_factory=lambda: int(time.time()))


class SessionRegistry:
    """
    Maps an open connection (keyed by object identity) to the session bound to it.
    """

    def __init__(self):
        self._sessions: Dict[Hashable, ChatSession] = {}

    def insert(self, connection: Hashable, session: ChatSession) -> None:
        """Bind a session to a connection. A connection holds at most one session."""
        if connection in self._sessions:
            raise ValueError(f"connection {session.connection_id} already has a session")
        self._sessions[connection] = session

    def remove(self, connection: Hashable) -> Optional[ChatSession]:
        """Unbind and return the connection's session, or None if it had none."""
        return self._sessions.pop(connection, None)

    def get(self, connection: Hashable) -> Optional[ChatSession]:
        return self._sessions.get(connection)

    def for_each(self, visitor: Callable[[Hashable, ChatSession], None]) -> None:
        for connection, session in self.items():
            visitor(connection, session)

    def items(self) -> List[Tuple[Hashable, ChatSession]]:
        """Snapshot of the current entries; safe to hold across awaits."""
        return list(self._sessions.items())

    def sessions(self) -> List[ChatSession]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, connection: Hashable) -> bool:
        return connection in self._sessions
