"""
Shared in-process feed state (message store, broadcast hub, producer).

Set at app lifespan start; read by API routes.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from app.services.live_broadcast import BroadcastHub
from app.services.message_store import MessageStore

if TYPE_CHECKING:
    from worker.producer import ProducerLoop

_store: Optional[MessageStore] = None
_hub: Optional[BroadcastHub] = None
_producer: Optional[ProducerLoop] = None


def set_store(s: MessageStore) -> None:
    global _store
    _store = s


def get_store() -> MessageStore:
    if _store is None:
        raise RuntimeError("Feed state not initialized")
    return _store


def set_hub(h: BroadcastHub) -> None:
    global _hub
    _hub = h


def get_hub() -> BroadcastHub:
    if _hub is None:
        raise RuntimeError("Feed state not initialized")
    return _hub


def set_producer(p: ProducerLoop) -> None:
    global _producer
    _producer = p


def get_producer() -> ProducerLoop:
    if _producer is None:
        raise RuntimeError("Feed state not initialized")
    return _producer


def reset_state() -> None:
    """Drop all references (app shutdown)."""
    global _store, _hub, _producer
    _store = None
    _hub = None
    _producer = None
