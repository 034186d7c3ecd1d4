import random
import time
import uuid

from app.db.schemas import Message
from worker.generator import MAX_BATCH, generate_batch, generate_message


class FixedRng:
    def __init__(self, value: int):
        self.value = value
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return self.value


class TestGenerator:
    def test_batch_size_comes_from_rng(self):
        rng = FixedRng(7)
        batch = generate_batch(rng=rng)
        assert len(batch) == 7
        assert rng.calls == [(0, MAX_BATCH)]

    def test_batch_size_within_bounds(self):
        rng = random.Random(42)
        sizes = {len(generate_batch(rng=rng)) for _ in range(40)}
        assert sizes <= set(range(0, MAX_BATCH + 1))

    def test_empty_batch(self):
        assert generate_batch(rng=FixedRng(0)) == []

    def test_message_fields(self):
        msg = generate_message()
        assert isinstance(msg, Message)
        uuid.UUID(msg.id)
        assert "@" in msg.sender
        assert msg.subject
        assert "\n\n" in msg.body
        assert msg.avatar.startswith("http")
        assert msg.received <= int(time.time())

    def test_serialises_sender_as_from(self):
        dumped = generate_message().model_dump(by_alias=True)
        assert set(dumped) == {"id", "from", "subject", "body", "avatar", "received"}

    def test_ids_are_unique(self):
        batch = generate_batch(rng=FixedRng(10))
        assert len({m.id for m in batch}) == 10
