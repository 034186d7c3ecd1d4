from app.db.schemas import BroadcastEvent, ClearOut, Message, StatsOut, UnreadOut

__all__ = [
    "BroadcastEvent",
    "ClearOut",
    "Message",
    "StatsOut",
    "UnreadOut",
]
