from __future__ import annotations

import pytest

from realtime.hub import ChatHub
from realtime.registry import ChatSession, SessionRegistry
from tests.fakes import FakeConnection


def _session(n: int, connected_at: int = 100) -> ChatSession:
    return ChatSession(connection_id=f"c{n}", user_id=n, display_name=f"user{n}", connected_at=connected_at)


def test_insert_get_remove():
    registry = SessionRegistry()
    connection = FakeConnection()
    session = _session(1)

    registry.insert(connection, session)

    assert registry.get(connection) is session
    assert connection in registry
    assert len(registry) == 1
    assert registry.remove(connection) is session
    assert registry.get(connection) is None
    assert len(registry) == 0


def test_remove_is_exactly_once():
    registry = SessionRegistry()
    connection = FakeConnection()
    registry.insert(connection, _session(1))

    assert registry.remove(connection) is not None
    assert registry.remove(connection) is None


def test_one_session_per_connection():
    registry = SessionRegistry()
    connection = FakeConnection()
    registry.insert(connection, _session(1))

    with pytest.raises(ValueError):
        registry.insert(connection, _session(2))
    assert registry.get(connection).user_id == 1


def test_for_each_visits_every_entry():
    registry = SessionRegistry()
    for n in (1, 2, 3):
        registry.insert(FakeConnection(), _session(n))
    seen = []

    registry.for_each(lambda connection, session: seen.append(session.user_id))

    assert sorted(seen) == [1, 2, 3]


def test_items_is_a_snapshot():
    registry = SessionRegistry()
    first = FakeConnection()
    registry.insert(first, _session(1))

    snapshot = registry.items()
    registry.insert(FakeConnection(), _session(2))
    registry.remove(first)

    assert [s.user_id for _, s in snapshot] == [1]


def test_connected_at_defaults_to_now():
    session = ChatSession(connection_id="c1", user_id=1, display_name="Alice")

    assert session.connected_at > 0


def test_hub_presence_is_ordered_oldest_first():
    hub = ChatHub()
    hub.registry.insert(FakeConnection(), _session(3, connected_at=300))
    hub.registry.insert(FakeConnection(), _session(1, connected_at=100))
    hub.registry.insert(FakeConnection(), _session(2, connected_at=100))

    assert [s.connection_id for s in hub.presence()] == ["c1", "c2", "c3"]
    assert len(hub) == 3
