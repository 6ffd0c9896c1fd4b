"""
Tests for the Identity Registry and engine-level bookkeeping.

Tests cover:
1. Registration and duplicate rejection
2. Lookup of registered profiles
3. Paging over identities and auctions
4. Auction creation preconditions
5. Ownership transfer
"""

import pytest

from auctionhouse.core.clock import ManualClock
from auctionhouse.core.engine import AuctionEngine
from auctionhouse.core.errors import PreconditionViolation
from auctionhouse.core.events import EventType
from auctionhouse.core.registry import IdentityRegistry


@pytest.fixture
def engine():
    return AuctionEngine(owner="operator", clock=ManualClock(start=100))


class TestIdentityRegistry:
    """Registry in isolation."""

    def test_register(self):
        registry = IdentityRegistry()

        user = registry.register("alice", timestamp=42)

        assert registry.is_registered("alice")
        assert user.registered_at == 42
        assert user.bid_count == 0
        assert len(registry) == 1

    def test_register_duplicate(self):
        registry = IdentityRegistry()
        registry.register("alice")

        with pytest.raises(PreconditionViolation, match="already registered"):
            registry.register("alice")

        assert len(registry) == 1

    def test_get_unregistered(self):
        registry = IdentityRegistry()

        assert not registry.is_registered("ghost")
        with pytest.raises(PreconditionViolation, match="not registered"):
            registry.get_user("ghost")

    def test_page(self):
        registry = IdentityRegistry()
        for name in ("a", "b", "c"):
            registry.register(name)

        assert registry.page(0, 2) == ["a", "b"]
        assert registry.page(2, 5) == ["c"]
        with pytest.raises(PreconditionViolation):
            registry.page(4, 1)


class TestEngineRegistration:
    """register_identity through the engine."""

    def test_register_counts_user(self, engine):
        engine.register_identity("alice")

        assert engine.is_registered("alice")
        assert engine.global_stats.total_users == 1
        event = engine.events.events(EventType.IDENTITY_REGISTERED)[0]
        assert event["identity"] == "alice"
        assert event.timestamp == 100

    def test_duplicate_does_not_count(self, engine):
        engine.register_identity("alice")

        with pytest.raises(PreconditionViolation):
            engine.register_identity("alice")

        assert engine.global_stats.total_users == 1

    @pytest.mark.parametrize("identity", ["", "   ", None, 7, "x" * 129])
    def test_invalid_identity(self, engine, identity):
        with pytest.raises(PreconditionViolation):
            engine.register_identity(identity)

    def test_get_users_paging(self, engine):
        for name in ("a", "b", "c"):
            engine.register_identity(name)

        assert engine.get_users() == ["a", "b", "c"]
        assert engine.get_users(1, 1) == ["b"]
        with pytest.raises(PreconditionViolation):
            engine.get_users(-1, 1)
        with pytest.raises(PreconditionViolation):
            engine.get_users(10, 1)


class TestCreateAuction:
    """create_auction preconditions and effects."""

    def test_create(self, engine):
        engine.register_identity("seller")

        auction_id = engine.create_auction("seller", "Lamp", "Brass", 3600, 100)

        auction = engine.get_auction(auction_id)
        assert auction.owner == "seller"
        assert auction.end_time == 3700
        assert engine.get_user("seller").auctions_created == 1
        assert engine.global_stats.total_auctions == 1
        assert engine.events.events(EventType.AUCTION_CREATED)[0]["auction_id"] == auction_id

    def test_unregistered_owner(self, engine):
        with pytest.raises(PreconditionViolation, match="not registered"):
            engine.create_auction("seller", "Lamp", "", 3600, 100)

    @pytest.mark.parametrize("duration", [0, -5])
    def test_duration_must_be_positive(self, engine, duration):
        engine.register_identity("seller")

        with pytest.raises(PreconditionViolation, match="bidding_duration"):
            engine.create_auction("seller", "Lamp", "", duration, 100)

        assert engine.global_stats.total_auctions == 0

    def test_negative_reserve(self, engine):
        engine.register_identity("seller")

        with pytest.raises(PreconditionViolation, match="reserve_price"):
            engine.create_auction("seller", "Lamp", "", 60, -1)

    def test_name_too_long(self, engine):
        engine.register_identity("seller")

        with pytest.raises(PreconditionViolation, match="name"):
            engine.create_auction("seller", "x" * 1000, "", 60, 1)

    def test_get_auctions_paging(self, engine):
        engine.register_identity("seller")
        ids = [engine.create_auction("seller", f"Item {i}", "", 60, 1) for i in range(4)]

        assert engine.get_auctions() == ids
        assert engine.get_auctions(2, 1) == [ids[2]]


class TestOwnership:
    """Process owner handover."""

    def test_transfer(self, engine):
        engine.transfer_ownership("operator", "new-operator")

        assert engine.owner == "new-operator"
        event = engine.events.events(EventType.OWNERSHIP_TRANSFERRED)[0]
        assert event["previous_owner"] == "operator"

    def test_only_owner(self, engine):
        with pytest.raises(PreconditionViolation, match="Only the owner"):
            engine.transfer_ownership("mallory", "mallory")

        assert engine.owner == "operator"

    def test_old_owner_loses_rights(self, engine):
        engine.transfer_ownership("operator", "new-operator")

        with pytest.raises(PreconditionViolation):
            engine.transfer_ownership("operator", "operator")

    def test_invalid_new_owner(self, engine):
        with pytest.raises(PreconditionViolation):
            engine.transfer_ownership("operator", "")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
