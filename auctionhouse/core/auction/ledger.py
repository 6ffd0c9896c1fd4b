"""
Auction Ledger - Per-auction records and the escrow they hold.

Conceptual Background:
---------------------
Every auction is a small state machine with two states:

    OPEN  --(settle, deadline reached)-->  ENDED

OPEN accepts bids; ENDED is terminal. Once ENDED the outcome fields
(highest bid, highest bidder, winner) are frozen.

Escrow:
------
When a bidder is outbid, the amount they had bid stays with the engine
and is owed back to them. The ledger keeps these debts in a two-level
mapping (auction id -> identity -> amount) that nothing else can reach:
the only way in is `credit_escrow`, the only way out is
`debit_escrow`. The same holds for the proceeds owed to an auction's
owner after settlement.
"""

import itertools
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional

from auctionhouse.core.errors import PreconditionViolation
from auctionhouse.utils.logger import get_logger

logger = get_logger("ledger")


class AuctionState(IntEnum):
    """Lifecycle of an auction."""
    OPEN = 0
    ENDED = 1


# =============================================================================
# Auction Record
# =============================================================================


@dataclass
class Auction:
    """
    A single time-boxed listing.

    Attributes:
        auction_id: Sequence id assigned at creation
        owner: Identity receiving the proceeds
        reserve_price: Minimum acceptable bid
        bidding_duration: Seconds between creation and the original deadline
        additional_time: Seconds granted by anti-snipe extensions
        end_time: Current deadline (moves when late bids arrive)
        highest_bid / highest_bidder: Current leading bid
        total_value_bid: Sum of every accepted bid on this auction
        winner: Set once, at settlement
    """
    auction_id: int
    owner: str
    name: str
    description: str
    reserve_price: int
    bidding_duration: int
    created_at: int
    end_time: int
    additional_time: int = 0
    highest_bid: int = 0
    highest_bidder: Optional[str] = None
    total_value_bid: int = 0
    winner: Optional[str] = None
    state: AuctionState = AuctionState.OPEN
    bid_count: int = 0

    @property
    def ended(self) -> bool:
        return self.state == AuctionState.ENDED

    def time_remaining(self, now: int) -> int:
        return self.end_time - now

    def is_accepting_bids(self, now: int) -> bool:
        return not self.ended and now <= self.end_time

    def deadline_reached(self, now: int) -> bool:
        return now >= self.end_time

    # Mutators are called by the ledger only, after all checks have passed.

    def _record_bid(self, bidder: str, amount: int) -> None:
        self.highest_bid = amount
        self.highest_bidder = bidder
        self.total_value_bid += amount
        self.bid_count += 1

    def _extend(self, now: int, grant: int) -> None:
        self.end_time = now + grant
        self.additional_time += grant

    def _close(self) -> None:
        self.state = AuctionState.ENDED
        self.winner = self.highest_bidder

    def to_dict(self) -> dict:
        return {
            "auction_id": self.auction_id,
            "owner": self.owner,
            "name": self.name,
            "description": self.description,
            "reserve_price": self.reserve_price,
            "bidding_duration": self.bidding_duration,
            "additional_time": self.additional_time,
            "created_at": self.created_at,
            "end_time": self.end_time,
            "highest_bid": self.highest_bid,
            "highest_bidder": self.highest_bidder,
            "total_value_bid": self.total_value_bid,
            "winner": self.winner,
            "state": self.state.name,
        }


# =============================================================================
# Ledger
# =============================================================================


class AuctionLedger:
    """
    Owner of every auction record, its escrow and its unpaid proceeds.
    """

    def __init__(self):
        self._auctions: Dict[int, Auction] = {}
        self._ids = itertools.count()

        # auction_id -> identity -> refundable amount
        self._escrow: Dict[int, Dict[str, int]] = {}

        # auction_id -> proceeds owed to the owner after settlement
        self._proceeds: Dict[int, int] = {}

    # =========================================================================
    # Auctions
    # =========================================================================

    def create(
        self,
        owner: str,
        name: str,
        description: str,
        bidding_duration: int,
        reserve_price: int,
        now: int,
    ) -> Auction:
        """Open a new auction ending `bidding_duration` seconds from now."""
        auction_id = next(self._ids)
        auction = Auction(
            auction_id=auction_id,
            owner=owner,
            name=name,
            description=description,
            reserve_price=reserve_price,
            bidding_duration=bidding_duration,
            created_at=now,
            end_time=now + bidding_duration,
        )
        self._auctions[auction_id] = auction
        self._escrow[auction_id] = {}

        logger.info(f"Auction #{auction_id} opened by {owner}: reserve={reserve_price}, ends={auction.end_time}")
        return auction

    def get(self, auction_id: int) -> Auction:
        """
        Raises:
            PreconditionViolation: unknown auction id
        """
        valid_id = isinstance(auction_id, int) and not isinstance(auction_id, bool)
        auction = self._auctions.get(auction_id) if valid_id else None
        if auction is None:
            raise PreconditionViolation(f"Invalid auction id: {auction_id}")
        return auction

    def __contains__(self, auction_id: int) -> bool:
        return auction_id in self._auctions

    def __len__(self) -> int:
        return len(self._auctions)

    def page(self, offset: int, limit: int) -> List[int]:
        """Auction ids in creation order."""
        if offset > len(self._auctions):
            raise PreconditionViolation(f"Offset {offset} out of range (total {len(self._auctions)})")
        ids = sorted(self._auctions)
        return ids[offset:offset + limit]

    # =========================================================================
    # State Transitions
    # =========================================================================

    def record_bid(self, auction: Auction, bidder: str, amount: int) -> None:
        """Install a new leading bid (already validated)."""
        if auction.ended:
            raise PreconditionViolation("Auction already ended")
        auction._record_bid(bidder, amount)

    def extend_deadline(self, auction: Auction, now: int, grant: int) -> None:
        if auction.ended:
            raise PreconditionViolation("Auction already ended")
        auction._extend(now, grant)
        logger.debug(f"Auction #{auction.auction_id} extended to {auction.end_time} (+{auction.additional_time}s total)")

    def close(self, auction: Auction) -> None:
        """
        The single OPEN -> ENDED transition.

        Moves the winning bid into the owner's proceeds.
        """
        if auction.ended:
            raise PreconditionViolation("Auction already ended")
        auction._close()
        self._proceeds[auction.auction_id] = auction.highest_bid

    # =========================================================================
    # Escrow
    # =========================================================================

    def _book(self, auction_id: int) -> Dict[str, int]:
        return self._escrow[self.get(auction_id).auction_id]

    def credit_escrow(self, auction_id: int, identity: str, amount: int) -> int:
        """Add to an identity's refundable balance. Returns the new balance."""
        if amount < 0:
            raise ValueError("Escrow credit must be non-negative")
        book = self._book(auction_id)
        book[identity] = book.get(identity, 0) + amount
        logger.debug(f"Escrow credit: auction #{auction_id} {identity} +{amount} -> {book[identity]}")
        return book[identity]

    def debit_escrow(self, auction_id: int, identity: str) -> int:
        """Zero an identity's refundable balance and return what it held."""
        book = self._book(auction_id)
        amount = book.get(identity, 0)
        book[identity] = 0
        return amount

    def escrow_balance(self, auction_id: int, identity: str) -> int:
        return self._book(auction_id).get(identity, 0)

    def escrow_snapshot(self, auction_id: int) -> Dict[str, int]:
        """Copy of one auction's escrow book."""
        return dict(self._book(auction_id))

    # =========================================================================
    # Proceeds
    # =========================================================================

    def debit_proceeds(self, auction_id: int) -> int:
        """Zero the owner's unpaid proceeds and return them."""
        amount = self._proceeds.get(auction_id, 0)
        self._proceeds[auction_id] = 0
        return amount

    def credit_proceeds(self, auction_id: int, amount: int) -> None:
        if amount < 0:
            raise ValueError("Proceeds credit must be non-negative")
        self._proceeds[auction_id] = self._proceeds.get(auction_id, 0) + amount

    def proceeds_owed(self, auction_id: int) -> int:
        return self._proceeds.get(auction_id, 0)

    # =========================================================================
    # Totals
    # =========================================================================

    def total_escrowed(self) -> int:
        return sum(sum(book.values()) for book in self._escrow.values())

    def total_open_bids(self) -> int:
        return sum(a.highest_bid for a in self._auctions.values() if not a.ended)

    def total_proceeds_owed(self) -> int:
        return sum(self._proceeds.values())

    def stats(self) -> dict:
        open_count = sum(1 for a in self._auctions.values() if not a.ended)
        return {
            "total_auctions": len(self._auctions),
            "open_auctions": open_count,
            "ended_auctions": len(self._auctions) - open_count,
            "total_escrowed": self.total_escrowed(),
            "total_open_bids": self.total_open_bids(),
            "total_proceeds_owed": self.total_proceeds_owed(),
        }


__all__ = ["Auction", "AuctionLedger", "AuctionState"]
