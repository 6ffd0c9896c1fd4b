"""
Auction Module.

This module provides the bid/escrow/settlement state machine:
- Auction records and the escrow ledger
- Bid validation and the anti-snipe deadline rule
- Refund withdrawal and settlement payouts
"""

from auctionhouse.core.auction.ledger import (
    Auction,
    AuctionLedger,
    AuctionState,
)

from auctionhouse.core.auction.bid_engine import (
    BidEngine,
    BidReceipt,
)

from auctionhouse.core.auction.settlement import (
    EscrowSettlement,
    SettlementResult,
)

__all__ = [
    # Ledger
    "Auction",
    "AuctionLedger",
    "AuctionState",
    # Bids
    "BidEngine",
    "BidReceipt",
    # Payouts
    "EscrowSettlement",
    "SettlementResult",
]
