"""
User lookup used to resolve the identity attached to a WebSocket handshake.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from channels.db import database_sync_to_async
from django.contrib.auth import get_user_model


@dataclass(frozen=True)
class UserRecord:
    id: int
    name: str


class UserStorage(Protocol):
    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]: ...


class DjangoUserStorage:
    """Reads users from the configured Django user model."""

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        return await database_sync_to_async(self._get_user_by_id)(user_id)

    @staticmethod
    def _get_user_by_id(user_id: int) -> Optional[UserRecord]:
        user = get_user_model().objects.filter(pk=user_id).first()
        if user is None:
            return None
        return UserRecord(id=user.pk, name=user.get_full_name())
