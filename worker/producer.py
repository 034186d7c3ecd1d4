"""
Unread message producer.

- Every INTERVAL_SEC: generate a batch, clip it to the store's free space, append.
- Broadcasts a summary event when something was added and anyone is listening.
- Stops for good once the store is full; only an explicit restart() re-arms it.
"""
import asyncio
import logging
import time
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from app.db.schemas import BroadcastEvent, Message
from app.services.live_broadcast import BroadcastHub
from app.services.message_store import MessageStore
from worker.generator import generate_batch

logger = logging.getLogger("feed.producer")


class ProducerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class ProducerLoop:
    def __init__(
        self,
        store: MessageStore,
        hub: BroadcastHub,
        interval_sec: float = 15.0,
        generate: Callable[[], Sequence[Message]] = generate_batch,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._hub = hub
        self._interval = interval_sec
        self._generate = generate
        self._clock = clock
        self._state = ProducerState.IDLE
        self._task: Optional[asyncio.Task[Any]] = None
        self.stats = {
            "ticks": 0,
            "appended": 0,
            "broadcasts": 0,
            "errors": 0,
        }

    @property
    def state(self) -> ProducerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is ProducerState.RUNNING

    @property
    def task(self) -> Optional[asyncio.Task[Any]]:
        return self._task

    @property
    def healthy(self) -> bool:
        """Timer task alive, or stopped because the store filled up."""
        if self._state is ProducerState.STOPPED:
            return True
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self._state is ProducerState.STOPPED:
            logger.info("Producer is stopped; restart() required to run again")
            return
        if self._task is not None and not self._task.done():
            return
        if self._store.remaining_capacity() <= 0:
            self._halt()
            logger.info("Store already full (%d messages); producer not started", self._store.size())
            return
        self._state = ProducerState.RUNNING
        self._task = asyncio.create_task(self._run(), name="feed-producer")
        logger.info(
            "Producer started: every %.1fs, capacity %d",
            self._interval,
            self._store.capacity,
        )

    async def stop(self) -> None:
        task = self._task
        self._halt()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        logger.info("Producer stopped")

    async def restart(self) -> None:
        """Re-arm a stopped producer (typically right after clearing the store)."""
        if self._state is ProducerState.RUNNING and self._task is not None and not self._task.done():
            return
        self._state = ProducerState.IDLE
        await self.start()

    def tick(self) -> int:
        """One producer firing; returns the number of messages appended."""
        if self._state is ProducerState.STOPPED:
            return 0
        self.stats["ticks"] += 1

        free = self._store.remaining_capacity()
        if free <= 0:
            self._halt()
            logger.info("Store full (%d messages); producer stopped", self._store.size())
            return 0

        try:
            batch = list(self._generate())
        except Exception as exc:
            self.stats["errors"] += 1
            logger.warning("generate error: %s", exc)
            return 0

        appended = self._store.append(batch[:free])
        total = self._store.size()
        self.stats["appended"] += appended
        logger.info("Added %d new unread messages. Total: %d", appended, total)

        if appended > 0 and self._hub.subscriber_count > 0:
            event = BroadcastEvent(
                count=appended,
                total=total,
                timestamp=int(self._clock()),
            )
            self._hub.broadcast(event)
            self.stats["broadcasts"] += 1
        return appended

    async def _run(self) -> None:
        while self._state is ProducerState.RUNNING:
            await asyncio.sleep(self._interval)
            try:
                self.tick()
            except Exception as exc:
                self.stats["errors"] += 1
                logger.warning("tick error: %s", exc)

    def _halt(self) -> None:
        """IDLE/RUNNING -> STOPPED; cancels the timer task unless we are running inside it."""
        self._state = ProducerState.STOPPED
        task, self._task = self._task, None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
