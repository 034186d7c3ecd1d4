"""
Bounded in-memory store of unread messages.

- Insertion order is arrival order; no per-message deletion.
- Appends past capacity are rejected; the producer clips batches first.
"""
import logging
import threading
from typing import Sequence

from app.db.schemas import Message

logger = logging.getLogger("feed.store")


class FeedError(Exception):
    """Base error for the unread feed."""


class CapacityExceededError(FeedError):
    """Raised when an append would push the store past its capacity."""


class MessageStore:
    """Append-only message list capped at `capacity` entries."""

    def __init__(self, capacity: int = 50):
        self._capacity = max(0, capacity)
        self._messages: list[Message] = []
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, messages: Sequence[Message]) -> int:
        """Append messages in order. All-or-nothing; returns the appended count."""
        with self._lock:
            free = self._capacity - len(self._messages)
            if len(messages) > free:
                raise CapacityExceededError(
                    f"cannot append {len(messages)} messages, {free} slots left"
                )
            self._messages.extend(messages)
            return len(messages)

    def size(self) -> int:
        with self._lock:
            return len(self._messages)

    def remaining_capacity(self) -> int:
        with self._lock:
            return max(0, self._capacity - len(self._messages))

    def snapshot(self) -> tuple[Message, ...]:
        with self._lock:
            return tuple(self._messages)

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._messages)
            self._messages.clear()
        logger.info("Unread messages cleared (%d removed)", dropped)
