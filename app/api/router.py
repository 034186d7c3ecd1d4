"""
Unread feed API (in-memory store; no DB).

- GET /messages/unread    - current unread messages
- DELETE /messages/unread - clear the store (producer is not restarted)
- GET /messages/stream    - SSE stream of new-message notifications
- GET /stats              - store, producer and subscriber counters
"""
import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse

from app.api.stream import StreamSession
from app.core.config import settings
from app.db.schemas import ClearOut, StatsOut, UnreadOut
from app.services.feed_state import get_hub, get_producer, get_store

router = APIRouter()
logger = logging.getLogger("feed.api")


@router.get("/messages/unread", response_model=UnreadOut)
async def unread_messages():
    """Snapshot of all unread messages in arrival order."""
    try:
        messages = get_store().snapshot()
        out = UnreadOut(timestamp=int(time.time()), messages=list(messages))
    except Exception:
        error_message = "Failed to retrieve unread messages"
        logger.exception(error_message)
        return JSONResponse(status_code=500, content={"error": error_message})
    logger.info("Sent %d unread messages to client", len(messages))
    return out


@router.delete("/messages/unread", response_model=ClearOut)
async def clear_unread_messages():
    get_store().clear()
    return ClearOut()


@router.get("/messages/stream", summary="New unread message notifications via Server-Sent Events")
async def message_stream():
    """
    Emits a `connected` event, then `new_unread_messages` events as the producer adds messages.
    Connect with EventSource or: curl -N http://localhost:7070/messages/stream
    """
    session = StreamSession(get_hub(), queue_maxsize=settings.SSE_QUEUE_MAXSIZE)
    return StreamingResponse(
        session.events(heartbeat_sec=settings.SSE_HEARTBEAT_SEC),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )


@router.get("/stats", response_model=StatsOut)
async def stats():
    store = get_store()
    hub = get_hub()
    producer = get_producer()
    return StatsOut(
        size=store.size(),
        capacity=store.capacity,
        producer=producer.state.value,
        ticks=producer.stats["ticks"],
        errors=producer.stats["errors"],
        subscribers=hub.subscriber_count,
        evicted=hub.evicted,
    )
