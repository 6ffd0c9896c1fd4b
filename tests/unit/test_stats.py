"""
Tests for derived statistics and rankings.

Tests cover:
1. Integer-division rule (truncation, zero divisor)
2. Global running aggregates
3. Ranking tables, leaders and tie handling
4. Profile-derived averages and win rates
"""

import pytest

from auctionhouse.core.registry import UserProfile
from auctionhouse.core.stats import GlobalStats, RankingAggregator, RankKind, safe_div


class TestSafeDiv:
    """Division rule for derived statistics."""

    @pytest.mark.parametrize(
        "numerator,denominator,expected",
        [
            (7, 2, 3),
            (6, 3, 2),
            (1, 3, 0),
            (0, 5, 0),
            (5, 0, 0),
            (0, 0, 0),
            (-7, 2, -3),
            (7, -2, -3),
        ],
    )
    def test_truncates_toward_zero(self, numerator, denominator, expected):
        assert safe_div(numerator, denominator) == expected


class TestGlobalStats:
    """Engine-wide aggregates."""

    def test_empty_average_is_zero(self):
        stats = GlobalStats()

        assert stats.average_bid == 0
        assert stats.highest_bidder is None

    def test_running_average(self):
        stats = GlobalStats()
        stats.record_bid("alice", 100)
        stats.record_bid("bob", 101)
        stats.record_bid("alice", 102)

        assert stats.total_bids == 3
        assert stats.total_value_bid == 303
        assert stats.average_bid == 101

    def test_record_requires_strictly_higher(self):
        stats = GlobalStats()

        assert stats.record_bid("alice", 500)
        assert not stats.record_bid("bob", 500)
        assert stats.highest_bidder == "alice"

    def test_counters(self):
        stats = GlobalStats()
        stats.record_user()
        stats.record_user()
        stats.record_auction()

        assert stats.to_dict()["total_users"] == 2
        assert stats.to_dict()["total_auctions"] == 1


class TestUserProfile:
    """Per-user derived values."""

    def test_average_bid(self):
        user = UserProfile(identity="alice")
        user.record_bid(100, 10)
        user.record_bid(155, 10)

        assert user.average_bid == 127
        assert user.reputation == 20

    def test_win_rate_is_participations_over_wins(self):
        user = UserProfile(identity="alice")
        for amount in (10, 20, 30, 40, 50):
            user.record_bid(amount, 10)

        user.record_win()
        assert user.win_rate == 5

        user.record_win()
        assert user.win_rate == 2

    def test_win_rate_zero_participations(self):
        user = UserProfile(identity="alice")
        user.record_win()

        assert user.win_rate == 0


class TestRanking:
    """Leaderboards use a total order on cumulative value."""

    def _user(self, identity, *amounts):
        user = UserProfile(identity=identity)
        for amount in amounts:
            user.record_bid(amount, 10)
        return user

    def test_tables_track_counters(self):
        ranking = RankingAggregator()
        ranking.update(self._user("alice", 100, 200))

        assert ranking.standing(RankKind.BIDDER, "alice") == 2
        assert ranking.standing(RankKind.SPENDER, "alice") == 300
        assert ranking.standing(RankKind.SPENDER, "nobody") == 0

    def test_leader_replaced_by_strictly_higher(self):
        ranking = RankingAggregator()
        ranking.update(self._user("alice", 300))
        ranking.update(self._user("bob", 301))

        assert ranking.leader(RankKind.SPENDER).identity == "bob"
        assert ranking.leader(RankKind.SPENDER).value == 301

    def test_tie_keeps_incumbent(self):
        ranking = RankingAggregator()
        ranking.update(self._user("bob", 300))
        ranking.update(self._user("alice", 300))

        assert ranking.leader(RankKind.SPENDER).identity == "bob"
        assert ranking.leader(RankKind.BIDDER).identity == "bob"

    def test_spend_and_count_ranked_separately(self):
        ranking = RankingAggregator()
        ranking.update(self._user("whale", 10_000))
        ranking.update(self._user("busy", 1, 2, 3))

        assert ranking.leader(RankKind.SPENDER).identity == "whale"
        assert ranking.leader(RankKind.BIDDER).identity == "busy"

    def test_leader_value_follows_own_updates(self):
        ranking = RankingAggregator()
        alice = self._user("alice", 100)
        ranking.update(alice)
        alice.record_bid(50, 10)
        ranking.update(alice)

        assert ranking.leader(RankKind.SPENDER).value == 150

    def test_leaderboard_order(self):
        ranking = RankingAggregator()
        ranking.update(self._user("carol", 200))
        ranking.update(self._user("alice", 200))
        ranking.update(self._user("bob", 500))

        assert ranking.leaderboard(RankKind.SPENDER) == [
            ("bob", 500),
            ("alice", 200),
            ("carol", 200),
        ]
        assert ranking.leaderboard(RankKind.SPENDER, limit=1) == [("bob", 500)]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
