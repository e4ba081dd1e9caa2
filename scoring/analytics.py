from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PopulationSummary:
    total_users: int
    total_raised: Decimal
    total_donations: int
    average_per_user: Decimal


def summarize(users: Sequence, donations: Sequence) -> PopulationSummary:
    """Population-wide totals. An empty population averages to 0.00."""
    total_users = len(users)
    total_raised = sum((u.total_raised for u in users), Decimal("0"))
    if total_users:
        average = (total_raised / total_users).quantize(CENTS, rounding=ROUND_HALF_UP)
    else:
        average = Decimal("0.00")
    return PopulationSummary(
        total_users=total_users,
        total_raised=total_raised,
        total_donations=len(donations),
        average_per_user=average,
    )
