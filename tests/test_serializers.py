from __future__ import annotations

import json
import re

import pytest
from pydantic import ValidationError

from realtime.serializers import (
    ChatMessage,
    InboundMessage,
    SystemMessage,
    departure,
    outbound_adapter,
    utc_timestamp,
    welcome,
)

ISO_MILLIS_Z = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def test_timestamp_is_iso8601_utc_millis():
    assert ISO_MILLIS_Z.match(utc_timestamp())


def test_system_message_has_no_sender_on_the_wire():
    frame = json.loads(welcome("Alice").model_dump_json())

    assert frame["type"] == "system"
    assert frame["content"] == "Welcome Alice!"
    assert "sender" not in frame
    assert ISO_MILLIS_Z.match(frame["timestamp"])


def test_departure_text():
    assert departure("Bob").content == "Bob left the chat"


def test_chat_message_wire_shape():
    frame = json.loads(ChatMessage(sender="Alice", content="hi", timestamp="2024-01-01T00:00:00.000Z").model_dump_json())

    assert frame == {"type": "message", "sender": "Alice", "content": "hi", "timestamp": "2024-01-01T00:00:00.000Z"}


def test_outbound_frames_parse_to_their_variant():
    system = outbound_adapter.validate_json('{"type":"system","content":"x","timestamp":"t"}')
    message = outbound_adapter.validate_json('{"type":"message","sender":"A","content":"x","timestamp":"t"}')

    assert isinstance(system, SystemMessage)
    assert isinstance(message, ChatMessage)


def test_message_variant_requires_sender():
    with pytest.raises(ValidationError):
        outbound_adapter.validate_json('{"type":"message","content":"x","timestamp":"t"}')


def test_outbound_messages_are_immutable():
    message = ChatMessage(sender="Alice", content="hi")

    with pytest.raises(ValidationError):
        message.content = "edited"


def test_inbound_ignores_extra_fields():
    inbound = InboundMessage.model_validate_json('{"content":"hi","sender":"spoofed","type":"system"}')

    assert inbound.content == "hi"
    assert not hasattr(inbound, "sender")


def test_inbound_requires_string_content():
    with pytest.raises(ValidationError):
        InboundMessage.model_validate_json('{"content": null}')
