import asyncio
import json

import pytest

from app.api.stream import StreamSession, sse_frame
from app.db.schemas import BroadcastEvent
from app.services.live_broadcast import BroadcastHub


async def _next(gen):
    return await gen.__anext__()


def _data(frame: str) -> dict:
    line = next(l for l in frame.splitlines() if l.startswith("data: "))
    return json.loads(line[len("data: "):])


class TestSseFrame:
    def test_frame_uses_type_as_event_name(self):
        frame = sse_frame({"type": "connected", "timestamp": 5})
        assert frame == 'event: connected\ndata: {"type": "connected", "timestamp": 5}\n\n'


class TestStreamSession:
    @pytest.mark.asyncio
    async def test_handshake_precedes_registration(self):
        hub = BroadcastHub()
        session = StreamSession(hub)
        gen = session.events(heartbeat_sec=5)

        first = await _next(gen)
        assert first.startswith("event: connected\n")
        assert _data(first)["type"] == "connected"
        assert hub.subscriber_count == 0

        pending = asyncio.create_task(_next(gen))
        await asyncio.sleep(0)
        assert hub.subscriber_count == 1

        hub.broadcast(BroadcastEvent(count=3, total=3, timestamp=1))
        frame = await asyncio.wait_for(pending, 1)
        assert frame.startswith("event: new_unread_messages\n")
        assert _data(frame) == {"type": "new_unread_messages", "count": 3, "total": 3, "timestamp": 1}

        await gen.aclose()
        assert hub.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_heartbeat_when_idle(self):
        hub = BroadcastHub()
        gen = StreamSession(hub).events(heartbeat_sec=0.01)
        await _next(gen)
        assert await asyncio.wait_for(_next(gen), 1) == ": heartbeat\n\n"
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_disconnect_cancellation_unregisters(self):
        hub = BroadcastHub()
        gen = StreamSession(hub).events(heartbeat_sec=5)
        await _next(gen)
        pending = asyncio.create_task(_next(gen))
        await asyncio.sleep(0)
        assert hub.subscriber_count == 1

        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending
        assert hub.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_evicted_session_ends_stream(self):
        hub = BroadcastHub()
        gen = StreamSession(hub, queue_maxsize=1).events(heartbeat_sec=5)
        await _next(gen)
        pending = asyncio.create_task(_next(gen))
        await asyncio.sleep(0)

        hub.broadcast(BroadcastEvent(count=1, total=1, timestamp=1))
        hub.broadcast(BroadcastEvent(count=1, total=2, timestamp=2))
        assert hub.subscriber_count == 0
        assert hub.evicted == 1

        frame = await asyncio.wait_for(pending, 1)
        assert _data(frame)["total"] == 1
        with pytest.raises(StopAsyncIteration):
            await _next(gen)

    def test_close_unregisters_once(self):
        hub = BroadcastHub()
        session = StreamSession(hub)
        sid = session.open()
        assert session.open() == sid
        other = hub.register(object())
        session.close()
        session.close()
        assert hub.subscriber_count == 1
        assert hub.unregister(other) is True

    @pytest.mark.asyncio
    async def test_evicted_session_drains_queued_frames(self):
        hub = BroadcastHub()
        gen = StreamSession(hub, queue_maxsize=3).events(heartbeat_sec=5)
        await _next(gen)
        pending = asyncio.create_task(_next(gen))
        await asyncio.sleep(0)

        delivered = [hub.broadcast(BroadcastEvent(count=1, total=n, timestamp=n)) for n in range(1, 5)]
        assert delivered == [1, 1, 1, 0]
        assert hub.subscriber_count == 0

        frames = [await asyncio.wait_for(pending, 1)]
        async for frame in gen:
            frames.append(frame)
        assert [_data(f)["total"] for f in frames] == [1, 2, 3]
