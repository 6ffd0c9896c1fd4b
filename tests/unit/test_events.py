"""
Tests for the notification bus.
"""

import pytest

from auctionhouse.core.events import EventBus, EventType


class TestEventBus:
    """Ordered fire-and-forget delivery."""

    def test_sequence_numbers_increase(self):
        bus = EventBus()

        first = bus.emit(EventType.IDENTITY_REGISTERED, identity="alice")
        second = bus.emit(EventType.IDENTITY_REGISTERED, identity="bob")

        assert second.sequence == first.sequence + 1
        assert [e["identity"] for e in bus.events()] == ["alice", "bob"]

    def test_subscribers_receive_events(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)

        bus.emit(EventType.BID_PLACED, timestamp=10, bidder="alice", amount=5)

        assert len(received) == 1
        assert received[0].timestamp == 10
        assert received[0]["amount"] == 5

    def test_failing_subscriber_is_isolated(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("subscriber down")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        event = bus.emit(EventType.BID_PLACED, bidder="alice", amount=5)

        assert received == [event]

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)
        bus.unsubscribe(received.append)

        bus.emit(EventType.BID_PLACED)

        assert received == []

    def test_filter_and_bounded_history(self):
        bus = EventBus(history_size=3)
        for i in range(5):
            bus.emit(EventType.BID_PLACED if i % 2 else EventType.AUCTION_CREATED, n=i)

        assert [e["n"] for e in bus.events()] == [2, 3, 4]
        assert [e["n"] for e in bus.events(EventType.BID_PLACED)] == [3]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
