"""Health endpoints: liveness and readiness."""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.services.feed_state import get_hub, get_producer, get_store

router = APIRouter(tags=["health"])
logger = logging.getLogger("feed.health")


@router.get("/health/live")
async def liveness():
    """Liveness: process is running. No dependencies checked."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness():
    """Readiness: feed state is wired up and the producer timer is alive (or done because the store is full)."""
    errors = []
    producer = None
    try:
        get_store()
        get_hub()
        producer = get_producer()
    except RuntimeError as e:
        logger.warning("Readiness check failed: %s", e)
        errors.append("feed")

    if producer is not None and not producer.healthy:
        logger.warning("Readiness check failed: producer is %s without a live timer", producer.state.value)
        errors.append("producer")

    if errors:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "errors": errors},
        )
    return {"status": "ok", "producer": producer.state.value}
