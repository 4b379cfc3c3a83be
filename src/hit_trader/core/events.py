from __future__ import annotations

import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict

from hit_trader.constants import EVENT_JOURNAL_SIZE
from hit_trader.core.logger import logger


def utc_ts() -> str:
    """Get current UTC timestamp in ISO format with 'Z' suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class EventJournal:
    """Bounded in-memory record of domain events (oldest dropped first)."""

    def __init__(self, maxlen: int = EVENT_JOURNAL_SIZE) -> None:
        self._events: Deque[Dict[str, Any]] = deque(maxlen=maxlen)

    def append_event(self, obj: Dict[str, Any]) -> Dict[str, Any]:
        obj.setdefault("event_id", uuid.uuid4().hex)
        obj.setdefault("timestamp", utc_ts())
        event_name = obj.get("event", "UnnamedEvent")
        logger.info(f"EVENT: {event_name}", obj)
        self._events.append(obj)
        return obj

    def count(self, event_name: str) -> int:
        return sum(1 for e in self._events if e.get("event") == event_name)

    def __len__(self) -> int:
        return len(self._events)
