"""
Vote aggregation over a selected neighbor set.
"""

from typing import Dict, Sequence
import numpy as np

from .models.data_models import LabelStats, Neighbor


class VoteAggregator:
    """
    Tallies votes and distance statistics per label.

    Labels are encoded as integer indices once, when the aggregator is built
    for a training set, so queries only deal with label indices.
    """

    def __init__(self, labels: Sequence[str]):
        """
        Initialize the aggregator for a training set.

        Args:
            labels: Label of each training point
        """
        self.label_names = list(dict.fromkeys(labels))
        index_of = {label: i for i, label in enumerate(self.label_names)}
        self._codes = np.array([index_of[label] for label in labels], dtype=np.intp)
        self._codes.setflags(write=False)

    def aggregate(self, neighbors: Sequence[Neighbor]) -> Dict[str, LabelStats]:
        """
        Compute count, sum, mean and minimum distance for every label in the set.

        Args:
            neighbors: Selected neighbors, closest first

        Returns:
            Mapping label -> LabelStats in order of first appearance among the neighbors
        """
        if not neighbors:
            return {}

        codes = self._codes[[n.index for n in neighbors]]
        distances = np.array([n.distance for n in neighbors], dtype=np.float64)
        size = len(self.label_names)

        counts = np.bincount(codes, minlength=size)
        sums = np.bincount(codes, weights=distances, minlength=size)
        nearest = np.full(size, np.inf)
        np.minimum.at(nearest, codes, distances)

        _, first_seen = np.unique(codes, return_index=True)
        stats: Dict[str, LabelStats] = {}
        for code in codes[np.sort(first_seen)]:
            count = int(counts[code])
            total = float(sums[code])
            stats[self.label_names[code]] = LabelStats(
                label=self.label_names[code],
                count=count,
                sum_distance=total,
                mean_distance=total / count,
                nearest_distance=float(nearest[code]),
            )
        return stats
