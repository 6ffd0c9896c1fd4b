"""
Bid Engine - Validation and application of bids.

A bid is accepted only if every check passes; otherwise nothing
changes. Checks:
1. Caller is registered
2. Auction exists
3. amount >= reserve price
4. amount > current highest bid
5. Auction is OPEN and its deadline has not passed

Effects, in order:
1. Anti-snipe: with less than `extension_threshold` seconds left the
   deadline becomes now + `extension_grant`
2. The previous leader's bid is credited to their escrow
3. The new leading bid is installed on the auction
4. Bidder profile, global statistics and rankings are updated
5. Notifications are emitted
"""

from dataclasses import dataclass
from typing import Optional

from auctionhouse.core.auction.ledger import AuctionLedger
from auctionhouse.core.config import EngineConfig
from auctionhouse.core.errors import PreconditionViolation
from auctionhouse.core.events import EventBus, EventType
from auctionhouse.core.registry import IdentityRegistry
from auctionhouse.core.stats import GlobalStats, RankingAggregator
from auctionhouse.utils.logger import get_logger

logger = get_logger("bids")


@dataclass
class BidReceipt:
    """Outcome of an accepted bid."""
    auction_id: int
    bidder: str
    amount: int
    previous_bidder: Optional[str] = None
    refund_credited: int = 0
    extended: bool = False
    end_time: int = 0
    new_record: bool = False


class BidEngine:
    """
    Applies bids to the ledger.

    Owns the deadline-extension rule. Collaborators are shared with the
    engine facade; the bid engine never touches escrow except through
    the ledger.
    """

    def __init__(
        self,
        ledger: AuctionLedger,
        registry: IdentityRegistry,
        stats: GlobalStats,
        ranking: RankingAggregator,
        events: EventBus,
        config: Optional[EngineConfig] = None,
    ):
        self.ledger = ledger
        self.registry = registry
        self.stats = stats
        self.ranking = ranking
        self.events = events
        self.config = config or EngineConfig()

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_bid(self, auction_id: int, bidder: str, amount: int, now: int):
        """
        Run every precondition without changing state.

        Returns:
            (auction, user) on success

        Raises:
            PreconditionViolation: first failing check
        """
        user = self.registry.get_user(bidder)
        auction = self.ledger.get(auction_id)

        if amount < auction.reserve_price:
            raise PreconditionViolation(
                f"Bid {amount} below reserve price {auction.reserve_price}"
            )

        if amount <= auction.highest_bid:
            raise PreconditionViolation(
                f"Bid {amount} does not exceed highest bid {auction.highest_bid}"
            )

        if auction.ended:
            raise PreconditionViolation("Auction already ended")

        if now > auction.end_time:
            raise PreconditionViolation(f"Bidding closed at {auction.end_time}")

        return auction, user

    def needs_extension(self, time_remaining: int) -> bool:
        """Anti-snipe rule: too little time left before the deadline."""
        return time_remaining < self.config.extension_threshold

    # =========================================================================
    # Application
    # =========================================================================

    def place_bid(self, auction_id: int, bidder: str, amount: int, now: int) -> BidReceipt:
        """
        Validate and apply a bid.

        Args:
            auction_id: Target auction
            bidder: Authenticated caller identity
            amount: Bid amount in integral units
            now: Current time (unix seconds)

        Returns:
            BidReceipt

        Raises:
            PreconditionViolation: bid rejected, nothing changed
        """
        auction, user = self.validate_bid(auction_id, bidder, amount, now)

        receipt = BidReceipt(auction_id=auction_id, bidder=bidder, amount=amount)

        # Anti-snipe extension
        if self.needs_extension(auction.time_remaining(now)):
            self.ledger.extend_deadline(auction, now, self.config.extension_grant)
            receipt.extended = True

        # Refund the previous leader through escrow
        if auction.highest_bidder is not None:
            receipt.previous_bidder = auction.highest_bidder
            receipt.refund_credited = auction.highest_bid
            self.ledger.credit_escrow(auction_id, auction.highest_bidder, auction.highest_bid)

        self.ledger.record_bid(auction, bidder, amount)
        receipt.end_time = auction.end_time

        user.record_bid(amount, self.config.bid_reputation_points)
        receipt.new_record = self.stats.record_bid(bidder, amount)

        try:
            self.ranking.update(user)
        except Exception:
            logger.exception(f"Ranking update failed for {bidder}; bid on #{auction_id} stands")

        logger.info(f"Bid accepted: auction #{auction_id} {bidder} amount={amount}")

        if receipt.extended:
            self.events.emit(
                EventType.DEADLINE_EXTENDED,
                timestamp=now,
                auction_id=auction_id,
                end_time=auction.end_time,
                additional_time=auction.additional_time,
            )
        self.events.emit(
            EventType.BID_PLACED,
            timestamp=now,
            auction_id=auction_id,
            bidder=bidder,
            amount=amount,
        )

        return receipt


__all__ = ["BidEngine", "BidReceipt"]
