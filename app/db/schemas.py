"""Feed records and API response schemas."""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """One synthetic unread message. Immutable once created."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    sender: str = Field(alias="from")
    subject: str
    body: str
    avatar: str
    received: int


class BroadcastEvent(BaseModel):
    """Summary pushed to stream subscribers after a producer tick."""
    model_config = ConfigDict(frozen=True)

    type: Literal["new_unread_messages"] = "new_unread_messages"
    count: int
    total: int
    timestamp: int


class UnreadOut(BaseModel):
    status: str = "ok"
    timestamp: int
    messages: list[Message] = []


class ClearOut(BaseModel):
    status: str = "ok"
    message: str = "All unread messages cleared"


class StatsOut(BaseModel):
    """Store, producer and hub counters."""
    size: int = 0
    capacity: int = 0
    producer: str = "stopped"
    ticks: int = 0
    errors: int = 0
    subscribers: int = 0
    evicted: int = 0
