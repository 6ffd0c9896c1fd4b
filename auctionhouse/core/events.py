"""
Notifications emitted by the engine.

Events are fire-and-forget: they are numbered in emission order,
kept in a bounded history and handed to every subscriber. A failing
subscriber is logged and skipped; it never affects the operation
that emitted the event.
"""

import itertools
import time
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Deque, Dict, List, Optional

from auctionhouse.utils.logger import get_logger

logger = get_logger("events")

DEFAULT_HISTORY_SIZE = 10_000


class EventType(IntEnum):
    """Kinds of notifications."""
    IDENTITY_REGISTERED = 0
    AUCTION_CREATED = 1
    BID_PLACED = 2
    DEADLINE_EXTENDED = 3
    WITHDRAWAL_SUCCEEDED = 4
    WITHDRAWAL_FAILED = 5
    SETTLEMENT_SUCCEEDED = 6
    SETTLEMENT_FAILED = 7
    OWNERSHIP_TRANSFERRED = 8


@dataclass(frozen=True)
class Event:
    """A single notification."""
    sequence: int
    event_type: EventType
    payload: Dict[str, Any] = field(default_factory=dict)
    timestamp: int = field(default_factory=lambda: int(time.time()))

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]


Subscriber = Callable[[Event], None]


class EventBus:
    """Ordered, in-process notification fan-out."""

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE):
        self._sequence = itertools.count()
        self._subscribers: List[Subscriber] = []
        self.history: Deque[Event] = deque(maxlen=history_size)

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(self, event_type: EventType, timestamp: Optional[int] = None, **payload: Any) -> Event:
        """Record an event and deliver it to subscribers."""
        event = Event(
            sequence=next(self._sequence),
            event_type=event_type,
            payload=payload,
            timestamp=timestamp if timestamp is not None else int(time.time()),
        )
        self.history.append(event)

        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Subscriber failed on {event_type.name} #{event.sequence}")

        return event

    def events(self, event_type: Optional[EventType] = None) -> List[Event]:
        """History, optionally filtered by type."""
        if event_type is None:
            return list(self.history)
        return [e for e in self.history if e.event_type == event_type]


__all__ = ["Event", "EventBus", "EventType", "Subscriber"]
