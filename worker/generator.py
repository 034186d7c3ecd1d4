"""Synthetic unread message generation (Faker-backed)."""
import random
import uuid
from typing import Optional

from faker import Faker

from app.db.schemas import Message

MAX_BATCH = 10

_faker = Faker()


def generate_message(faker: Optional[Faker] = None) -> Message:
    fake = faker or _faker
    received = fake.date_time_between(start_date="-1y", end_date="now")
    return Message(
        id=str(uuid.uuid4()),
        sender=fake.email(),
        subject=fake.sentence(),
        body="\n\n".join(fake.paragraphs(nb=2)),
        avatar=fake.image_url(width=128, height=128),
        received=int(received.timestamp()),
    )


def generate_batch(
    faker: Optional[Faker] = None,
    rng: Optional[random.Random] = None,
) -> list[Message]:
    """Between 0 and MAX_BATCH messages, count drawn uniformly."""
    count = (rng or random).randint(0, MAX_BATCH)
    return [generate_message(faker) for _ in range(count)]
