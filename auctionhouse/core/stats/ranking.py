"""
Ranking Aggregator - Leaderboard standing refreshed after every bid.

Two tables are kept:
- top bidders: identity -> accepted bid count
- top spenders: identity -> cumulative value bid

Each table also tracks its current leader. A challenger takes the lead
only by strictly exceeding the leader's value, so the incumbent keeps
ties. Leaderboards are ordered by value descending, then identity
ascending, which is a total order.

Standing is a signal, not a source of truth: an update error is logged
by the caller and never fails the bid that triggered it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from auctionhouse.utils.logger import get_logger

if TYPE_CHECKING:
    from auctionhouse.core.registry import UserProfile

logger = get_logger("ranking")


class RankKind(str, Enum):
    """Which leaderboard."""
    BIDDER = "bidder"
    SPENDER = "spender"


@dataclass
class Leader:
    identity: Optional[str] = None
    value: int = 0


class RankingAggregator:
    """Maintains the bidder and spender leaderboards."""

    def __init__(self):
        self.tables: Dict[RankKind, Dict[str, int]] = {
            RankKind.BIDDER: {},
            RankKind.SPENDER: {},
        }
        self.leaders: Dict[RankKind, Leader] = {
            RankKind.BIDDER: Leader(),
            RankKind.SPENDER: Leader(),
        }

    def update(self, user: "UserProfile") -> None:
        """Refresh standing for one user after an accepted bid."""
        self._refresh(RankKind.BIDDER, user.identity, user.bid_count)
        self._refresh(RankKind.SPENDER, user.identity, user.total_value_bid)

    def _refresh(self, kind: RankKind, identity: str, value: int) -> None:
        self.tables[kind][identity] = value

        leader = self.leaders[kind]
        if leader.identity == identity:
            leader.value = value
        elif value > leader.value:
            logger.debug(f"New top {kind.value}: {identity} ({value}) replaces {leader.identity} ({leader.value})")
            leader.identity = identity
            leader.value = value

    # =========================================================================
    # Queries
    # =========================================================================

    def leader(self, kind: RankKind) -> Leader:
        current = self.leaders[kind]
        return Leader(identity=current.identity, value=current.value)

    def standing(self, kind: RankKind, identity: str) -> int:
        return self.tables[kind].get(identity, 0)

    def leaderboard(self, kind: RankKind, limit: int = 10) -> List[Tuple[str, int]]:
        """Top entries as (identity, value), highest first."""
        entries = sorted(self.tables[kind].items(), key=lambda item: (-item[1], item[0]))
        return entries[:limit]


__all__ = ["RankingAggregator", "RankKind", "Leader"]
