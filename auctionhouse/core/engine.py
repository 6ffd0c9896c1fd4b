"""
Auction Engine - The external interface of the system.

Wires the collaborators together and exposes every operation as a
plain method call:

- register_identity / create_auction / transfer_ownership
- place_bid
- withdraw / settle / retry_settlement (reentrancy-guarded)
- paginated and point queries

Callers are identified by an already-authenticated opaque identity.
Operations either commit completely or raise before changing anything.
"""

from typing import Dict, List, Optional, Tuple

from auctionhouse.core.auction import (
    Auction,
    AuctionLedger,
    BidEngine,
    BidReceipt,
    EscrowSettlement,
    SettlementResult,
)
from auctionhouse.core.clock import SystemClock
from auctionhouse.core.config import EngineConfig
from auctionhouse.core.errors import PreconditionViolation
from auctionhouse.core.events import EventBus, EventType
from auctionhouse.core.guard import ReentrancyGuard
from auctionhouse.core.registry import IdentityRegistry, UserProfile
from auctionhouse.core.stats import GlobalStats, RankingAggregator, RankKind
from auctionhouse.core.transfer import InMemoryTransferGateway, TransferGateway
from auctionhouse.utils.logger import get_logger
from auctionhouse.utils.validation import (
    validate_amount,
    validate_duration,
    validate_identity,
    validate_page,
    validate_string,
)

logger = get_logger("engine")


def _require(result: Tuple[bool, str]) -> None:
    valid, err = result
    if not valid:
        raise PreconditionViolation(err)


class AuctionEngine:
    """
    Process-wide auction engine.

    Attributes:
        owner: Identity allowed to transfer engine ownership
        held_funds: Value received with bids and not yet paid out
    """

    def __init__(
        self,
        owner: str,
        config: Optional[EngineConfig] = None,
        gateway: Optional[TransferGateway] = None,
        clock=None,
    ):
        _require(validate_identity(owner, "owner"))

        self.owner = owner
        self.config = config or EngineConfig()
        self.gateway = gateway if gateway is not None else InMemoryTransferGateway()
        self.clock = clock or SystemClock()

        self.registry = IdentityRegistry()
        self.ledger = AuctionLedger()
        self.global_stats = GlobalStats()
        self.ranking = RankingAggregator()
        self.events = EventBus()
        self.guard = ReentrancyGuard()

        self.bids = BidEngine(
            ledger=self.ledger,
            registry=self.registry,
            stats=self.global_stats,
            ranking=self.ranking,
            events=self.events,
            config=self.config,
        )
        self.escrow = EscrowSettlement(
            ledger=self.ledger,
            registry=self.registry,
            gateway=self.gateway,
            events=self.events,
            guard=self.guard,
        )

        self.held_funds = 0

        logger.info(f"AuctionEngine initialized with owner={owner}")

    # =========================================================================
    # Registration
    # =========================================================================

    def register_identity(self, identity: str) -> UserProfile:
        """
        Register a caller identity.

        Raises:
            PreconditionViolation: invalid or already registered identity
        """
        _require(validate_identity(identity))

        now = self.clock.now()
        user = self.registry.register(identity, timestamp=now)
        self.global_stats.record_user()

        self.events.emit(EventType.IDENTITY_REGISTERED, timestamp=now, identity=identity)
        return user

    def is_registered(self, identity: str) -> bool:
        return self.registry.is_registered(identity)

    # =========================================================================
    # Auctions
    # =========================================================================

    def create_auction(
        self,
        caller: str,
        name: str,
        description: str,
        bidding_duration: int,
        reserve_price: int,
    ) -> int:
        """
        Open an auction owned by the caller.

        Args:
            caller: Authenticated caller identity (becomes the owner)
            name: Display name
            description: Display description
            bidding_duration: Seconds until the deadline (> 0)
            reserve_price: Minimum acceptable bid

        Returns:
            New auction id
        """
        user = self.registry.get_user(caller)
        _require(validate_string(name, "name", self.config.max_name_length))
        _require(validate_string(description, "description", self.config.max_description_length))
        _require(validate_duration(bidding_duration))
        _require(validate_amount(reserve_price, "reserve_price"))

        now = self.clock.now()
        auction = self.ledger.create(
            owner=caller,
            name=name,
            description=description,
            bidding_duration=bidding_duration,
            reserve_price=reserve_price,
            now=now,
        )
        user.auctions_created += 1
        self.global_stats.record_auction()

        self.events.emit(
            EventType.AUCTION_CREATED,
            timestamp=now,
            auction_id=auction.auction_id,
            owner=caller,
            name=name,
            end_time=auction.end_time,
            reserve_price=reserve_price,
        )
        return auction.auction_id

    # =========================================================================
    # Bidding
    # =========================================================================

    def place_bid(
        self,
        auction_id: int,
        caller: str,
        amount: int,
        transferred_value: Optional[int] = None,
    ) -> BidReceipt:
        """
        Place a bid, attaching `transferred_value` (must equal `amount`).

        Omitting `transferred_value` means exactly `amount` was attached.

        Raises:
            PreconditionViolation: bid rejected, nothing changed
        """
        _require(validate_amount(amount))
        if transferred_value is None:
            transferred_value = amount
        if transferred_value != amount:
            raise PreconditionViolation(
                f"Transferred value {transferred_value} must equal bid amount {amount}"
            )

        receipt = self.bids.place_bid(auction_id, caller, amount, self.clock.now())
        self.held_funds += amount
        return receipt

    # =========================================================================
    # Payouts
    # =========================================================================

    def withdraw(self, auction_id: int, caller: str) -> SettlementResult:
        """Pull the caller's escrowed refund for one auction."""
        result = self.escrow.withdraw(auction_id, caller, now=self.clock.now())
        if result.success:
            self.held_funds -= result.amount
        return result

    def settle(self, auction_id: int, caller: str) -> SettlementResult:
        """End an auction past its deadline and pay the owner."""
        result = self.escrow.settle(auction_id, caller, self.clock.now())
        if result.success:
            self.held_funds -= result.amount
        return result

    def retry_settlement(self, auction_id: int, caller: str) -> SettlementResult:
        """Retry a failed owner payout."""
        result = self.escrow.retry_settlement(auction_id, caller, now=self.clock.now())
        if result.success:
            self.held_funds -= result.amount
        return result

    # =========================================================================
    # Ownership
    # =========================================================================

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """
        Hand engine ownership to another identity.

        Raises:
            PreconditionViolation: caller is not the owner, or bad identity
        """
        if caller != self.owner:
            raise PreconditionViolation("Only the owner can transfer ownership")
        _require(validate_identity(new_owner, "new_owner"))

        previous = self.owner
        self.owner = new_owner

        logger.info(f"Ownership transferred: {previous} -> {new_owner}")
        self.events.emit(
            EventType.OWNERSHIP_TRANSFERRED,
            timestamp=self.clock.now(),
            previous_owner=previous,
            new_owner=new_owner,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_user(self, identity: str) -> UserProfile:
        return self.registry.get_user(identity)

    def get_auction(self, auction_id: int) -> Auction:
        return self.ledger.get(auction_id)

    def escrow_balance(self, auction_id: int, identity: str) -> int:
        return self.ledger.escrow_balance(auction_id, identity)

    def proceeds_owed(self, auction_id: int) -> int:
        self.ledger.get(auction_id)
        return self.ledger.proceeds_owed(auction_id)

    def get_users(self, offset: int = 0, limit: Optional[int] = None) -> List[str]:
        """Registered identities, in registration order."""
        if limit is None:
            limit = self.config.default_page_size
        _require(validate_page(offset, limit))
        return self.registry.page(offset, limit)

    def get_auctions(self, offset: int = 0, limit: Optional[int] = None) -> List[int]:
        """Auction ids, in creation order."""
        if limit is None:
            limit = self.config.default_page_size
        _require(validate_page(offset, limit))
        return self.ledger.page(offset, limit)

    def leaderboard(self, kind: RankKind = RankKind.SPENDER, limit: int = 10) -> List[Tuple[str, int]]:
        return self.ranking.leaderboard(RankKind(kind), limit)

    def check_conservation(self) -> bool:
        """Every unit received is escrowed, leading an open auction, or owed to an owner."""
        accounted = (
            self.ledger.total_escrowed()
            + self.ledger.total_open_bids()
            + self.ledger.total_proceeds_owed()
        )
        return accounted == self.held_funds

    def stats(self) -> Dict[str, object]:
        """Engine statistics."""
        bidder = self.ranking.leader(RankKind.BIDDER)
        spender = self.ranking.leader(RankKind.SPENDER)
        return {
            "global": self.global_stats.to_dict(),
            "ledger": self.ledger.stats(),
            "registry": self.registry.stats(),
            "held_funds": self.held_funds,
            "top_bidder": bidder.identity,
            "top_spender": spender.identity,
            "events": len(self.events.history),
        }


__all__ = ["AuctionEngine"]
