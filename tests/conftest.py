from __future__ import annotations

import pytest
from channels.testing import WebsocketCommunicator

from realtime.consumers import ChatConsumer
from realtime.hub import ChatHub
from tests.fakes import InMemoryUserStorage, signed_in

USERS = {1: "Alice", 2: "Bob", 3: "Carol", 4: ""}


@pytest.fixture
def hub():
    return ChatHub()


@pytest.fixture
def storage():
    return InMemoryUserStorage(USERS)


@pytest.fixture
def communicator_for(hub, storage):
    """Build a communicator for a consumer bound to the test hub."""

    def _make(user=None, **initkwargs):
        initkwargs.setdefault("hub", hub)
        initkwargs.setdefault("storage", storage)
        communicator = WebsocketCommunicator(ChatConsumer.as_asgi(**initkwargs), "/ws")
        if user is not None:
            communicator.scope["user"] = user
        return communicator

    return _make


@pytest.fixture
def join(communicator_for):
    """Connect as `user_id` and consume the welcome frame."""

    async def _join(user_id: int):
        communicator = communicator_for(signed_in(user_id))
        connected, _ = await communicator.connect()
        assert connected
        welcome = await communicator.receive_json_from()
        return communicator, welcome

    return _join
