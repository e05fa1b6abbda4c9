"""
Pydantic models for the chat wire protocol.

Inbound frames carry only `content`; anything else the client sends is ignored.
Outbound frames are a tagged union on `type`:
- {"type":"system","content":...,"timestamp":...}
- {"type":"message","sender":...,"content":...,"timestamp":...}
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class InboundMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: str


class SystemMessage(BaseModel):
    """Server notice (welcome, departure)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["system"] = "system"
    content: str
    timestamp: str = Field(default_factory=utc_timestamp)


class ChatMessage(BaseModel):
    """A user's message, stamped with the sender's display name."""

    model_config = ConfigDict(frozen=True)

    type: Literal["message"] = "message"
    sender: str
    content: str
    timestamp: str = Field(default_factory=utc_timestamp)


OutboundMessage = Annotated[Union[SystemMessage, ChatMessage], Field(discriminator="type")]

outbound_adapter: TypeAdapter[OutboundMessage] = TypeAdapter(OutboundMessage)


def welcome(display_name: str) -> SystemMessage:
    return SystemMessage(content=f"Welcome {display_name}!")


def departure(display_name: str) -> SystemMessage:
    return SystemMessage(content=f"{display_name} left the chat")


__all__ = [
    "InboundMessage",
    "SystemMessage",
    "ChatMessage",
    "OutboundMessage",
    "outbound_adapter",
    "utc_timestamp",
    "welcome",
    "departure",
]
