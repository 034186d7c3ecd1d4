"""
In-memory subscriber registry for SSE fanout.

- Each stream client registers a sink; the producer broadcasts events to all sinks.
- A sink whose write fails is treated as disconnected and evicted.
"""
import asyncio
import logging
import threading
import uuid
from typing import Any, Dict, Protocol

from app.db.schemas import BroadcastEvent

logger = logging.getLogger("feed.broadcast")


class SinkClosedError(Exception):
    """Raised by a sink that can no longer accept payloads."""


class Sink(Protocol):
    def send(self, payload: Dict[str, Any]) -> None: ...


class QueueSink:
    """Sink backed by a bounded asyncio.Queue, drained by one SSE response."""

    def __init__(self, maxsize: int = 100):
        self._queue: asyncio.Queue[Dict[str, Any] | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    def send(self, payload: Dict[str, Any]) -> None:
        if self._closed:
            raise SinkClosedError("sink closed")
        try:
            self._queue.put_nowait(payload)
        except asyncio.QueueFull as exc:
            raise SinkClosedError("subscriber queue full") from exc

    async def get(self) -> Dict[str, Any] | None:
        """Next payload, or None once the sink has been closed."""
        return await self._queue.get()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            # Reader still has queued payloads; it stops once `drained`.
            pass

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def drained(self) -> bool:
        """Closed and nothing left to read."""
        return self._closed and self._queue.empty()


class BroadcastHub:
    """Registry of live subscribers: register/unregister/broadcast, all thread-safe."""

    def __init__(self):
        self._sinks: Dict[str, Sink] = {}
        self._lock = threading.Lock()
        # Serialises whole broadcasts so each subscriber sees events in call order.
        self._broadcast_lock = threading.Lock()
        self._evicted = 0

    def register(self, sink: Sink) -> str:
        subscriber_id = uuid.uuid4().hex
        with self._lock:
            self._sinks[subscriber_id] = sink
            count = len(self._sinks)
        logger.info("Subscriber %s connected (%d live)", subscriber_id, count)
        return subscriber_id

    def unregister(self, subscriber_id: str) -> bool:
        """Remove a subscriber. Unknown or already removed ids are ignored."""
        with self._lock:
            sink = self._sinks.pop(subscriber_id, None)
            count = len(self._sinks)
        if sink is None:
            return False
        logger.info("Subscriber %s disconnected (%d live)", subscriber_id, count)
        return True

    def broadcast(self, event: BroadcastEvent) -> int:
        """
        Deliver event to every registered subscriber; returns successful deliveries.
        Never raises: failing sinks are evicted and delivery continues.
        """
        payload = event.model_dump()
        delivered = 0
        with self._broadcast_lock:
            with self._lock:
                targets = list(self._sinks.items())
            for subscriber_id, sink in targets:
                with self._lock:
                    if self._sinks.get(subscriber_id) is not sink:
                        continue
                try:
                    sink.send(dict(payload))
                except Exception as exc:
                    self._evict(subscriber_id, sink, exc)
                else:
                    delivered += 1
        logger.debug(
            "Broadcast %s count=%d total=%d to %d subscribers",
            event.type, event.count, event.total, delivered,
        )
        return delivered

    def _evict(self, subscriber_id: str, sink: Sink, exc: Exception) -> None:
        if self.unregister(subscriber_id):
            self._evicted += 1
            logger.info("Evicted subscriber %s after failed write: %s", subscriber_id, exc)
        close = getattr(sink, "close", None)
        if callable(close):
            try:
                close()
            except Exception as close_exc:
                logger.debug("Closing evicted sink failed: %s", close_exc)

    @property
    def evicted(self) -> int:
        return self._evicted

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._sinks)
