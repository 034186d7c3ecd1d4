from __future__ import annotations

import itertools
from typing import Any

import pytest

from app.db.schemas import Message
from app.services.live_broadcast import BroadcastHub, SinkClosedError
from app.services.message_store import MessageStore

_ids = itertools.count(1)


def make_message(**overrides: Any) -> Message:
    n = next(_ids)
    fields = {
        "id": f"msg-{n}",
        "sender": f"user{n}@example.com",
        "subject": "Quarterly report",
        "body": "Please see the attached numbers.",
        "avatar": "https://example.com/avatar.png",
        "received": 1_700_000_000 + n,
    }
    fields.update(overrides)
    return Message(**fields)


def make_messages(n: int) -> list[Message]:
    return [make_message() for _ in range(n)]


class RecordingSink:
    """Sink that remembers every payload it was sent."""

    def __init__(self) -> None:
        self.received: list[dict] = []

    def send(self, payload: dict) -> None:
        self.received.append(payload)


class DeadSink:
    """Sink whose connection is already gone."""

    def __init__(self) -> None:
        self.attempts = 0
        self.closed = False

    def send(self, payload: dict) -> None:
        self.attempts += 1
        raise SinkClosedError("connection reset")

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def store() -> MessageStore:
    return MessageStore(capacity=5)


@pytest.fixture
def hub() -> BroadcastHub:
    return BroadcastHub()
