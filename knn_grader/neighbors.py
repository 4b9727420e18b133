"""
Neighbor ranking for k-NN classification.

Ranks every training point by its distance to a query and selects the
neighbor set for a given k. Points tied with the k-th distance are always
kept, so the selected set may hold more than k points.
"""

import logging
from typing import List, Sequence
import numpy as np

from .distance import distances_to
from .exceptions import EmptyTrainingSetError
from .models.data_models import Neighbor, Point

logger = logging.getLogger(__name__)


class NeighborRanking:
    """
    Orders training points by distance to query points.

    The training matrix is copied and frozen on construction.
    """

    def __init__(self, points: Sequence[Point], labels: Sequence[str], p: int):
        """
        Initialize the ranking with a training set.

        Args:
            points: Training points
            labels: Label of each training point (same length as points)
            p: Minkowski order of the distance
        """
        self._points = np.array(points, dtype=np.int64).reshape(-1, 2)
        self._points.setflags(write=False)
        self._labels = tuple(labels)
        self.p = p

    def __len__(self) -> int:
        return len(self._labels)

    def rank(self, query: Point) -> List[Neighbor]:
        """
        Rank all training points by distance to the query, closest first.

        Equal distances keep their training-set order.

        Args:
            query: Query point

        Returns:
            List of Neighbor objects for every training point

        Raises:
            EmptyTrainingSetError: If there are no training points
        """
        if len(self._labels) == 0:
            raise EmptyTrainingSetError("Cannot rank neighbors: training set is empty")

        distances = distances_to(query, self._points, self.p)
        order = np.argsort(distances, kind="stable")
        return [
            Neighbor(index=int(i), label=self._labels[i], distance=float(distances[i]))
            for i in order
        ]

    def select(self, query: Point, k: int) -> List[Neighbor]:
        """
        Select the neighbor set of a query.

        The cutoff is the distance at rank min(k, n) - 1; every training point
        within the cutoff is selected.

        Args:
            query: Query point
            k: Number of neighbors requested (>= 1)

        Returns:
            Selected neighbors, closest first

        Raises:
            EmptyTrainingSetError: If there are no training points
        """
        ranked = self.rank(query)
        kth_distance = ranked[min(k, len(ranked)) - 1].distance
        selected = [n for n in ranked if n.distance <= kth_distance]

        if len(selected) > k:
            logger.debug(f"{len(selected) - k} extra neighbor(s) tied at cutoff {kth_distance:.4f} for {query}")
        return selected
