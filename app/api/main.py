"""
FastAPI application for the unread message feed (in-memory; no DB).

- Health: /health/live, /health/ready
- API: /messages/unread, /messages/stream, /stats
"""
import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.health import router as health_router
from app.api.router import router as api_router
from app.services.feed_state import reset_state, set_hub, set_producer, set_store
from app.services.live_broadcast import BroadcastHub
from app.services.message_store import MessageStore
from worker.producer import ProducerLoop

http_logger = logging.getLogger("feed.http")


def _setup_logging() -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    _setup_logging()

    store = MessageStore(capacity=settings.MAX_MESSAGES)
    hub = BroadcastHub()
    producer = ProducerLoop(store, hub, interval_sec=settings.INTERVAL_SEC)

    set_store(store)
    set_hub(hub)
    set_producer(producer)

    await producer.start()

    yield

    await producer.stop()
    reset_state()


app = FastAPI(
    title="Unread Feed API",
    description="Synthetic unread messages with a live SSE notification stream",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    t0 = time.perf_counter()
    response = await call_next(request)
    http_logger.info(
        "%s %s %d %dms",
        request.method,
        request.url.path,
        response.status_code,
        round((time.perf_counter() - t0) * 1000),
    )
    return response


app.include_router(health_router)
app.include_router(api_router)


def main() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
