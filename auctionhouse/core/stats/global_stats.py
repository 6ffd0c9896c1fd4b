"""
Global Statistics - Running aggregates over every bid on every auction.
"""

from dataclasses import dataclass
from typing import Optional

from auctionhouse.core.stats.rules import safe_div


@dataclass
class GlobalStats:
    """
    Engine-wide counters.

    `average_bid` is recomputed on every bid as
    total_value_bid // total_bids (0 while no bid exists).
    """
    total_auctions: int = 0
    total_users: int = 0
    total_bids: int = 0
    total_value_bid: int = 0
    highest_bid: int = 0
    highest_bidder: Optional[str] = None
    average_bid: int = 0

    def record_user(self) -> None:
        self.total_users += 1

    def record_auction(self) -> None:
        self.total_auctions += 1

    def record_bid(self, bidder: str, amount: int) -> bool:
        """
        Fold one accepted bid into the aggregates.

        Returns:
            True if the bid set a new all-time high
        """
        new_record = amount > self.highest_bid
        if new_record:
            self.highest_bid = amount
            self.highest_bidder = bidder

        self.total_bids += 1
        self.total_value_bid += amount
        self.average_bid = safe_div(self.total_value_bid, self.total_bids)
        return new_record

    def to_dict(self) -> dict:
        return {
            "total_auctions": self.total_auctions,
            "total_users": self.total_users,
            "total_bids": self.total_bids,
            "total_value_bid": self.total_value_bid,
            "highest_bid": self.highest_bid,
            "highest_bidder": self.highest_bidder,
            "average_bid": self.average_bid,
        }
