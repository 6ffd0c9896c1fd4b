"""Global aggregates and leaderboards"""
from auctionhouse.core.stats.rules import safe_div
from auctionhouse.core.stats.global_stats import GlobalStats
from auctionhouse.core.stats.ranking import RankingAggregator, RankKind, Leader

__all__ = [
    "safe_div",
    "GlobalStats",
    "RankingAggregator",
    "RankKind",
    "Leader",
]
