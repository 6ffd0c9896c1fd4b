"""
Identity Registry - Registered parties and their running profile.

This module provides:
- One-time registration of opaque caller identities
- The per-user profile mutated by bids and settlements
- Bounds-checked paging over registered identities
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from auctionhouse.core.errors import PreconditionViolation
from auctionhouse.core.stats.rules import safe_div
from auctionhouse.utils.logger import get_logger

logger = get_logger("registry")


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class UserProfile:
    """
    A registered party.

    Attributes:
        identity: Opaque caller identity
        reputation: Reputation points (earned per accepted bid)
        bid_count: Accepted bids placed
        total_value_bid: Sum of all accepted bid amounts
        auctions_created: Auctions this user opened
        auctions_participated: Participation count (one per accepted bid)
        auctions_won: Settlements credited to this user
        average_bid: total_value_bid // bid_count
        win_rate: auctions_participated // auctions_won
    """
    identity: str
    registered: bool = True
    reputation: int = 0
    bid_count: int = 0
    total_value_bid: int = 0
    auctions_created: int = 0
    auctions_participated: int = 0
    auctions_won: int = 0
    average_bid: int = 0
    win_rate: int = 0
    registered_at: int = field(default_factory=lambda: int(time.time()))

    def record_bid(self, amount: int, reputation_points: int) -> None:
        """Apply the profile effects of an accepted bid."""
        self.bid_count += 1
        self.total_value_bid += amount
        self.auctions_participated += 1
        self.reputation += reputation_points
        self.average_bid = safe_div(self.total_value_bid, self.bid_count)

    def record_win(self) -> None:
        """Apply the profile effects of a credited settlement."""
        self.auctions_won += 1
        self.win_rate = safe_div(self.auctions_participated, self.auctions_won)


# =============================================================================
# Identity Registry
# =============================================================================


class IdentityRegistry:
    """
    Registry of known identities.

    The engine only ever asks it whether a caller is registered and for
    the caller's profile; everything else is bookkeeping.
    """

    def __init__(self):
        # identity -> UserProfile
        self.users: Dict[str, UserProfile] = {}

        # Registration order, for paging
        self._order: List[str] = []

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, identity: str, timestamp: Optional[int] = None) -> UserProfile:
        """
        Register a new identity.

        Raises:
            PreconditionViolation: identity already registered
        """
        if identity in self.users:
            raise PreconditionViolation("Identity already registered")

        user = UserProfile(identity=identity)
        if timestamp is not None:
            user.registered_at = timestamp

        self.users[identity] = user
        self._order.append(identity)

        logger.info(f"Registered identity {identity}")
        return user

    # =========================================================================
    # Lookup
    # =========================================================================

    def is_registered(self, identity: str) -> bool:
        user = self.users.get(identity)
        return user is not None and user.registered

    def get_user(self, identity: str) -> UserProfile:
        """Profile of a registered identity."""
        if not self.is_registered(identity):
            raise PreconditionViolation("Caller is not registered")
        return self.users[identity]

    def __len__(self) -> int:
        return len(self._order)

    def page(self, offset: int, limit: int) -> List[str]:
        """
        Identities in registration order.

        Raises:
            PreconditionViolation: offset beyond the end
        """
        if offset > len(self._order):
            raise PreconditionViolation(f"Offset {offset} out of range (total {len(self._order)})")
        return self._order[offset:offset + limit]

    # =========================================================================
    # Statistics
    # =========================================================================

    def stats(self) -> dict:
        return {
            "total_users": len(self.users),
            "total_reputation": sum(u.reputation for u in self.users.values()),
            "total_wins": sum(u.auctions_won for u in self.users.values()),
        }


__all__ = ["IdentityRegistry", "UserProfile"]
