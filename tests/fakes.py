from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Dict, List, Optional

from realtime.storage import UserRecord


def signed_in(user_id: int) -> SimpleNamespace:
    """Stand-in for the user AuthMiddlewareStack puts on the scope."""
    return SimpleNamespace(pk=user_id, is_authenticated=True)


class InMemoryUserStorage:
    def __init__(self, users: Dict[int, str]):
        self.users = dict(users)
        self.lookups: List[int] = []

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        self.lookups.append(user_id)
        name = self.users.get(user_id)
        if name is None:
            return None
        return UserRecord(id=user_id, name=name)


class HangingUserStorage:
    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        await asyncio.Event().wait()


class FakeConnection:
    """Records what the relay delivers to it."""

    def __init__(self, is_open: bool = True, fail: bool = False):
        self.is_open = is_open
        self.fail = fail
        self.received = []

    async def send_message(self, message) -> None:
        if self.fail:
            raise ConnectionResetError("peer went away")
        self.received.append(message)


class GatedUserStorage(InMemoryUserStorage):
    """Holds every lookup until `release()` is called."""

    def __init__(self, users: Dict[int, str]):
        super().__init__(users)
        self.gate = asyncio.Event()
        self.started = asyncio.Event()
        self.cancelled = False

    def release(self) -> None:
        self.gate.set()

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        self.started.set()
        try:
            await self.gate.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return await super().get_user_by_id(user_id)
