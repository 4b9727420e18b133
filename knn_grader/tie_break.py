"""
Deterministic resolution of the winning label.

The decision runs in three stages:
1. a unique vote maximum wins outright (majority);
2. otherwise the configured strategy keeps the tied labels with the smallest
   total, mean or nearest distance;
3. if several labels are still tied, the alphabetically smallest one wins.
"""

from operator import attrgetter
from typing import Dict, Tuple, Union

from .models.data_models import LabelStats, TieBreakReason, TieBreakStrategy

_STATISTIC = {
    TieBreakStrategy.SUM: attrgetter("sum_distance"),
    TieBreakStrategy.MEAN: attrgetter("mean_distance"),
    TieBreakStrategy.NEAREST: attrgetter("nearest_distance"),
}


class TieBreakResolver:
    """Picks the winning label from per-label vote statistics."""

    def __init__(self, strategy: Union[TieBreakStrategy, str, None] = TieBreakStrategy.SUM):
        self.strategy = TieBreakStrategy.parse(strategy)

    def resolve(self, stats: Dict[str, LabelStats]) -> Tuple[str, TieBreakReason]:
        """
        Decide the winning label.

        Args:
            stats: Mapping label -> LabelStats of the selected neighbors

        Returns:
            Tuple of (winning label, reason)

        Raises:
            ValueError: If stats is empty
        """
        if not stats:
            raise ValueError("Label statistics cannot be empty")

        max_votes = max(s.count for s in stats.values())
        tied = [label for label, s in stats.items() if s.count == max_votes]
        if len(tied) == 1:
            return tied[0], TieBreakReason.MAJORITY

        statistic = _STATISTIC[self.strategy]
        best = min(statistic(stats[label]) for label in tied)
        tied = [label for label in tied if statistic(stats[label]) == best]
        if len(tied) == 1:
            return tied[0], self.strategy.reason

        return min(tied), TieBreakReason.ALPHABETICAL
