from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional, Union
import json


@dataclass(frozen=True)
class RewardTier:
    id: int
    title: str
    description: str
    threshold: Decimal
    icon: str = ""

    def is_unlocked(self, total_raised: Decimal) -> bool:
        return total_raised >= self.threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id, "title": self.title, "description": self.description,
            "threshold": str(self.threshold), "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RewardTier":
        return cls(
            id=int(data["id"]), title=data["title"], description=data.get("description", ""),
            threshold=Decimal(str(data["threshold"])), icon=data.get("icon", ""),
        )


DEFAULT_CATALOG: tuple[RewardTier, ...] = (
    RewardTier(id=1, title="First Donation", description="Receive your first donation", threshold=Decimal("1"), icon="🎯"),
    RewardTier(id=2, title="Fundraising Rookie", description="Raise $500", threshold=Decimal("500"), icon="🌟"),
    RewardTier(id=3, title="Rising Star", description="Raise $1,000", threshold=Decimal("1000"), icon="⭐"),
    RewardTier(id=4, title="Fundraising Pro", description="Raise $2,500", threshold=Decimal("2500"), icon="🏆"),
    RewardTier(id=5, title="Top Performer", description="Raise $5,000", threshold=Decimal("5000"), icon="👑"),
    RewardTier(id=6, title="Fundraising Legend", description="Raise $10,000", threshold=Decimal("10000"), icon="🎖️"),
)


def load_catalog(path: Union[str, Path]) -> tuple[RewardTier, ...]:
    """Read a JSON list of tier objects, ordered by threshold ascending."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list) or not data:
        raise ValueError(f"Reward catalog at {path} must be a non-empty JSON list")
    tiers = [RewardTier.from_dict(item) for item in data]
    for tier in tiers:
        if tier.threshold <= 0:
            raise ValueError(f"Reward tier {tier.id} has non-positive threshold {tier.threshold}")
    tiers.sort(key=lambda t: t.threshold)
    return tuple(tiers)


class RewardsEvaluator:
    def __init__(self, catalog: Optional[Iterable[RewardTier]] = None):
        self.catalog: tuple[RewardTier, ...] = tuple(catalog) if catalog is not None else DEFAULT_CATALOG

    def rewards_for(self, total_raised: Decimal) -> list[tuple[RewardTier, bool]]:
        return [(tier, tier.is_unlocked(total_raised)) for tier in self.catalog]

    def unlocked(self, total_raised: Decimal) -> list[RewardTier]:
        return [tier for tier, unlocked in self.rewards_for(total_raised) if unlocked]
