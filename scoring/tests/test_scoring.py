"""
Unit Tests for the scoring package

Tests cover:
1. Ranking order and tie-breaks
2. Reward tier evaluation
3. Catalog loading
4. Population analytics
"""

import json
import pytest
from dataclasses import dataclass
from decimal import Decimal

from scoring import (
    DEFAULT_CATALOG,
    RankingEngine,
    RewardTier,
    RewardsEvaluator,
    load_catalog,
    summarize,
)


@dataclass
class Member:
    id: int
    total_raised: Decimal


def population(*totals):
    return [Member(id=i, total_raised=Decimal(str(t))) for i, t in enumerate(totals, start=1)]


class TestRankingEngine:
    """Tests for leaderboard ordering."""

    def test_orders_by_total_descending(self):
        """Test that higher totals rank first."""
        members = population(100, 300, 200)

        ranked = RankingEngine().ranked(members)

        assert [m.id for m, _ in ranked] == [2, 3, 1]
        assert [rank for _, rank in ranked] == [1, 2, 3]

    def test_ties_keep_insertion_order(self):
        """Test that the earlier member wins a tie."""
        members = population(100, 100)

        ranked = RankingEngine().ranked(members)

        assert [(m.id, rank) for m, rank in ranked] == [(1, 1), (2, 2)]

    def test_rank_matches_formula(self):
        """Test rank = 1 + strictly greater + earlier ties."""
        members = population(50, 200, 50, 0, 200, 50)
        engine = RankingEngine()

        for position, member in enumerate(members):
            greater = sum(1 for m in members if m.total_raised > member.total_raised)
            earlier_ties = sum(1 for m in members[:position] if m.total_raised == member.total_raised)
            assert engine.rank_of(members, member.id) == 1 + greater + earlier_ties

    def test_ranks_are_contiguous_and_unique(self):
        """Test that ranks cover 1..N exactly once."""
        members = population(10, 10, 30, 0, 20, 30, 10)
        engine = RankingEngine()

        ranks = sorted(engine.rank_of(members, m.id) for m in members)

        assert ranks == list(range(1, len(members) + 1))

    def test_limit_keeps_global_rank(self):
        """Test that truncation happens after ranking."""
        members = population(10, 40, 30, 20)

        top = RankingEngine().ranked(members, limit=2)

        assert [(m.id, rank) for m, rank in top] == [(2, 1), (3, 2)]

    def test_repeated_ranking_is_deterministic(self):
        """Test that an unchanged population ranks the same every time."""
        members = population(5, 5, 5, 7)
        engine = RankingEngine()

        first = [(m.id, r) for m, r in engine.ranked(members)]
        second = [(m.id, r) for m, r in engine.ranked(members)]

        assert first == second

    def test_rank_of_unknown_member(self):
        """Test that an unknown id has no rank."""
        assert RankingEngine().rank_of(population(1, 2), 99) is None


class TestRewardsEvaluator:
    """Tests for reward tier unlocking."""

    def test_rewards_for_500(self):
        """Test the default catalog at exactly the second threshold."""
        result = RewardsEvaluator().rewards_for(Decimal("500"))

        assert [tier.threshold for tier, _ in result] == [1, 500, 1000, 2500, 5000, 10000]
        assert [unlocked for _, unlocked in result] == [True, True, False, False, False, False]

    def test_nothing_unlocked_at_zero(self):
        """Test that a fresh user has no rewards."""
        assert RewardsEvaluator().unlocked(Decimal("0")) == []

    @pytest.mark.parametrize("low,high", [(0, 1), (499, 500), (999.99, 1000), (2500, 9999), (5000, 20000)])
    def test_unlocking_is_monotonic(self, low, high):
        """Test that raising more never locks a tier."""
        evaluator = RewardsEvaluator()

        at_low = set(t.id for t in evaluator.unlocked(Decimal(str(low))))
        at_high = set(t.id for t in evaluator.unlocked(Decimal(str(high))))

        assert at_low <= at_high

    def test_custom_catalog(self):
        """Test an injected catalog replaces the defaults."""
        tier = RewardTier(id=1, title="Starter", description="Raise $10", threshold=Decimal("10"))
        evaluator = RewardsEvaluator([tier])

        assert evaluator.rewards_for(Decimal("10")) == [(tier, True)]


class TestCatalogLoading:
    """Tests for reading a reward catalog from JSON."""

    def test_load_sorts_by_threshold(self, tmp_path):
        """Test that tiers come back ordered by threshold."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([
            {"id": 2, "title": "Big", "description": "Raise $100", "threshold": 100, "icon": "*"},
            {"id": 1, "title": "Small", "description": "Raise $5", "threshold": "5"},
        ]))

        catalog = load_catalog(path)

        assert [t.id for t in catalog] == [1, 2]
        assert catalog[0].threshold == Decimal("5")
        assert catalog[0].icon == ""

    def test_load_rejects_empty_catalog(self, tmp_path):
        """Test that an empty list is not a catalog."""
        path = tmp_path / "catalog.json"
        path.write_text("[]")

        with pytest.raises(ValueError):
            load_catalog(path)

    def test_load_rejects_non_positive_threshold(self, tmp_path):
        """Test that thresholds must be positive."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{"id": 1, "title": "Free", "threshold": 0}]))

        with pytest.raises(ValueError):
            load_catalog(path)

    def test_tier_dict_round_trip(self):
        """Test to_dict/from_dict on a default tier."""
        tier = DEFAULT_CATALOG[3]
        assert RewardTier.from_dict(tier.to_dict()) == tier


class TestSummarize:
    """Tests for population analytics."""

    def test_totals_and_average(self):
        """Test totals and a rounded average."""
        members = population(100, 50, 0)

        summary = summarize(members, donations=[object(), object()])

        assert summary.total_users == 3
        assert summary.total_raised == Decimal("150")
        assert summary.total_donations == 2
        assert summary.average_per_user == Decimal("50.00")

    def test_average_rounds_half_up(self):
        """Test rounding to cents."""
        members = population("0.01", "0.00")

        assert summarize(members, []).average_per_user == Decimal("0.01")

    def test_empty_population_averages_zero(self):
        """Test that no users means an average of 0.00 rather than an error."""
        summary = summarize([], [])

        assert summary.total_users == 0
        assert summary.total_raised == Decimal("0")
        assert summary.average_per_user == Decimal("0.00")
