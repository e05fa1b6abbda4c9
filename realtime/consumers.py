"""
WebSocket consumer for the community chat room.

Key behavior:
- URL: /ws
- The signed-in user is attached to the scope upstream (AuthMiddlewareStack).
- Each socket walks CONNECTING -> AUTHENTICATING -> ACTIVE -> CLOSED, never backwards.
- Every chat message is relayed to all active sockets, the sender included.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from enum import Enum
from typing import Any, Optional

from channels.generic.websocket import AsyncWebsocketConsumer
from django.apps import apps
from pydantic import ValidationError

from .config import config
from .exceptions import (
    INTERNAL_ERROR,
    AuthenticationRequired,
    ConnectionRejected,
    UserLookupTimeout,
    UserNotFound,
)
from .hub import ChatHub
from .registry import ChatSession
from .serializers import ChatMessage, InboundMessage, OutboundMessage, departure, welcome
from .storage import DjangoUserStorage, UserRecord, UserStorage

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    ACTIVE = "active"
    CLOSED = "closed"


class ChatConsumer(AsyncWebsocketConsumer):
    """
    Binds one socket to one chat session and relays its messages through the hub.

    `hub`, `storage` and `user_lookup_timeout` may be injected through
    `ChatConsumer.as_asgi(...)`; by default the realtime app's hub, the Django
    user table and `CHAT_USER_LOOKUP_TIMEOUT` are used.
    """

    hub: Optional[ChatHub] = None
    storage: Optional[UserStorage] = None
    user_lookup_timeout: Optional[float] = None

    def __init__(
        self,
        *args: Any,
        hub: Optional[ChatHub] = None,
        storage: Optional[UserStorage] = None,
        user_lookup_timeout: Optional[float] = None,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.hub = hub if hub is not None else apps.get_app_config("realtime").hub
        self.storage = storage if storage is not None else DjangoUserStorage()
        self.user_lookup_timeout = (
            user_lookup_timeout if user_lookup_timeout is not None else config.USER_LOOKUP_TIMEOUT
        )
        self.connection_id: str = uuid.uuid4().hex  # server-assigned per-connection id
        self.state = ConnectionState.CONNECTING
        self.session: Optional[ChatSession] = None
        self.handshake_task: Optional[asyncio.Task] = None
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    async def connect(self) -> None:
        # Accept first so the rejection reaches the client as a close frame with a code.
        await self.accept()
        self._open = True
        # The lookup runs off the dispatch path so a disconnect can interrupt it.
        self.handshake_task = asyncio.create_task(self._handshake())

    async def _handshake(self) -> None:
        try:
            record = await self._authenticate()
        except ConnectionRejected as exc:
            if self.state is ConnectionState.CLOSED:
                return
            logger.info(
                "Chat connection rejected (connection_id=%s, code=%s): %s",
                self.connection_id,
                exc.code,
                exc.reason,
            )
            self.state = ConnectionState.CLOSED
            self._open = False
            await self.close(code=exc.code, reason=exc.reason)
            return
        except Exception:
            logger.exception("User lookup failed (connection_id=%s)", self.connection_id)
            self.state = ConnectionState.CLOSED
            self._open = False
            await self.close(code=INTERNAL_ERROR)
            return

        if self.state is ConnectionState.CLOSED:
            return
        await self._activate(record)

    async def _authenticate(self) -> UserRecord:
        user = self.scope.get("user")
        user_id = getattr(user, "pk", None)
        if user is None or not getattr(user, "is_authenticated", False) or user_id is None:
            raise AuthenticationRequired()

        self.state = ConnectionState.AUTHENTICATING
        try:
            record = await asyncio.wait_for(
                self.storage.get_user_by_id(int(user_id)), timeout=self.user_lookup_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "User lookup timed out after %ss (connection_id=%s, user_id=%s)",
                self.user_lookup_timeout,
                self.connection_id,
                user_id,
            )
            raise UserLookupTimeout() from None

        if record is None:
            raise UserNotFound()
        return record

    async def _activate(self, record: UserRecord) -> None:
        display_name = record.name or config.ANONYMOUS_NAME
        self.session = ChatSession(
            connection_id=self.connection_id,
            user_id=record.id,
            display_name=display_name,
        )
        self.hub.registry.insert(self, self.session)
        self.state = ConnectionState.ACTIVE
        logger.info(
            "Chat session active (connection_id=%s, user_id=%s, active=%d)",
            self.connection_id,
            record.id,
            len(self.hub.registry),
        )

        # Welcome goes to this socket only.
        await self.send_message(welcome(display_name))

    async def receive(self, text_data: Optional[str] = None, bytes_data: Optional[bytes] = None) -> None:
        if self.state is not ConnectionState.ACTIVE or self.session is None:
            return
        if text_data is None:
            # Binary frames carry no chat payload.
            return

        try:
            inbound = InboundMessage.model_validate_json(text_data)
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed chat payload (connection_id=%s, errors=%d)",
                self.connection_id,
                exc.error_count(),
            )
            return

        message = ChatMessage(sender=self.session.display_name, content=inbound.content)
        await self.hub.relay.broadcast(message, exclude=None)

    async def disconnect(self, close_code: int) -> None:
        self._open = False
        self.state = ConnectionState.CLOSED

        task = self.handshake_task
        if task is not None and not task.done():
            # Closed mid-handshake; a pending lookup must never activate the socket.
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        session = self.hub.registry.remove(self)
        if session is None:
            # Never activated, or already cleaned up.
            return

        self.session = None
        logger.info(
            "Chat session closed (connection_id=%s, user_id=%s, code=%s)",
            session.connection_id,
            session.user_id,
            close_code,
        )
        await self.hub.relay.broadcast(departure(session.display_name))

    async def send_message(self, message: OutboundMessage) -> None:
        """Send one outbound frame to this socket."""
        await self.send(text_data=message.model_dump_json())
