"""
SSE stream sessions: one per connected client.

Handshake first, then register a queue sink with the hub; the sink is
unregistered exactly once when the client goes away.
"""
import asyncio
import json
import logging
import time
from typing import Any, AsyncGenerator, Dict, Optional

from app.services.live_broadcast import BroadcastHub, QueueSink

logger = logging.getLogger("feed.stream")


def sse_frame(payload: Dict[str, Any]) -> str:
    """`event:` line named after the payload type, then one JSON `data:` line."""
    event = payload.get("type", "message")
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


class StreamSession:
    def __init__(self, hub: BroadcastHub, queue_maxsize: int = 100):
        self._hub = hub
        self._sink = QueueSink(maxsize=queue_maxsize)
        self._subscriber_id: Optional[str] = None
        self._closed = False

    @property
    def subscriber_id(self) -> Optional[str]:
        return self._subscriber_id

    def open(self) -> str:
        if self._subscriber_id is None:
            self._subscriber_id = self._hub.register(self._sink)
        return self._subscriber_id

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._subscriber_id is not None:
            self._hub.unregister(self._subscriber_id)
        self._sink.close()

    def handshake(self) -> Dict[str, Any]:
        return {"type": "connected", "timestamp": int(time.time())}

    async def events(self, heartbeat_sec: float = 15.0) -> AsyncGenerator[str, None]:
        """
        Yield SSE frames until the client disconnects or the hub evicts us.
        Heartbeat comment every heartbeat_sec if no event.
        """
        try:
            yield sse_frame(self.handshake())
            self.open()
            while not self._sink.drained:
                try:
                    payload = await asyncio.wait_for(self._sink.get(), timeout=heartbeat_sec)
                except asyncio.TimeoutError:
                    yield ": heartbeat\n\n"
                    continue
                if payload is None:
                    break
                yield sse_frame(payload)
        finally:
            self.close()
            logger.debug("Stream %s closed", self._subscriber_id)
