from app.services.live_broadcast import BroadcastHub, QueueSink, SinkClosedError
from app.services.message_store import CapacityExceededError, FeedError, MessageStore
from app.services.feed_state import (
    get_hub,
    get_producer,
    get_store,
    reset_state,
    set_hub,
    set_producer,
    set_store,
)

__all__ = [
    "BroadcastHub",
    "CapacityExceededError",
    "FeedError",
    "MessageStore",
    "QueueSink",
    "SinkClosedError",
    "get_hub",
    "get_producer",
    "get_store",
    "reset_state",
    "set_hub",
    "set_producer",
    "set_store",
]
