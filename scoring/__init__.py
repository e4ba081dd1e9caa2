"""
Scoring Package

Pure ranking, reward-tier and analytics computations over user totals.
Nothing in here touches storage or HTTP; callers pass in the population.
"""

from .analytics import PopulationSummary, summarize
from .ranking import RankingEngine
from .rewards import (
    DEFAULT_CATALOG,
    RewardTier,
    RewardsEvaluator,
    load_catalog,
)

__all__ = [
    "DEFAULT_CATALOG",
    "PopulationSummary",
    "RankingEngine",
    "RewardTier",
    "RewardsEvaluator",
    "load_catalog",
    "summarize",
]
