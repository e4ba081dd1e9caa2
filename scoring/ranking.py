from operator import attrgetter
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")


class RankingEngine:
    """Orders a population by total raised, highest first.

    Equal totals keep the order the population was given in, which for the
    user store is registration order. Python's sort is stable even with
    ``reverse=True``, so the first-registered of two tied users ranks higher.
    """

    def __init__(self, key: Callable[[T], object] = attrgetter("total_raised"),
                 identity: Callable[[T], object] = attrgetter("id")):
        self.key = key
        self.identity = identity

    def order(self, population: Sequence[T]) -> list[T]:
        return sorted(population, key=self.key, reverse=True)

    def ranked(self, population: Sequence[T], limit: Optional[int] = None) -> list[tuple[T, int]]:
        # Rank against the whole population first, then truncate.
        ranked = [(member, position) for position, member in enumerate(self.order(population), start=1)]
        if limit is not None:
            ranked = ranked[:limit]
        return ranked

    def rank_of(self, population: Sequence[T], member_id: object) -> Optional[int]:
        for position, member in enumerate(self.order(population), start=1):
            if self.identity(member) == member_id:
                return position
        return None
