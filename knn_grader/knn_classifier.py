"""
Main KnnClassifier class for 2D k-nearest-neighbor classification.

This module provides the KnnClassifier facade that combines neighbor ranking,
vote aggregation and tie-break resolution into explainable classifications.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, Union

from .exceptions import EmptyTrainingSetError, InvalidArgumentError
from .models.data_models import (
    ClassificationResult,
    ClassifierConfig,
    Point,
    TieBreakStrategy
)
from .neighbors import NeighborRanking
from .tie_break import TieBreakResolver
from .voting import VoteAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _TrainingSnapshot:
    """Training data captured by a single fit() call."""
    points: Tuple[Point, ...]
    labels: Tuple[str, ...]
    ranking: NeighborRanking
    aggregator: VoteAggregator


class KnnClassifier:
    """
    Transparent k-NN classifier for 2D integer points.

    A classifier is constructed with an immutable configuration, fitted with a
    training set and then queried any number of times. Each result carries the
    selected neighbors, the vote tally and the reason for the decision.
    """

    def __init__(
        self,
        k: int = 3,
        p: int = 2,
        tiebreaker: Union[TieBreakStrategy, str, None] = TieBreakStrategy.SUM,
        config: Optional[ClassifierConfig] = None
    ):
        """
        Initialize the classifier.

        Args:
            k: Number of neighbors
            p: Minkowski order (1 = Manhattan, 2 = Euclidean, >= 3 = Minkowski)
            tiebreaker: Tie-break strategy name ("sum", "mean" or "nearest")
            config: Complete configuration; overrides k, p and tiebreaker when given

        Raises:
            ConfigurationError: If k or p is invalid
        """
        self.config = config if config is not None else ClassifierConfig(k=k, p=p, tiebreaker=tiebreaker)
        self._snapshot: Optional[_TrainingSnapshot] = None

    @property
    def k(self) -> int:
        return self.config.k

    @property
    def p(self) -> int:
        return self.config.p

    @property
    def tiebreaker(self) -> TieBreakStrategy:
        return self.config.tiebreaker

    def fit(self, points: Sequence[Sequence[int]], labels: Sequence[str]) -> 'KnnClassifier':
        """
        Fit the classifier to a training set.

        The training data is copied into a new immutable snapshot; a previous
        snapshot is replaced as a whole, never modified.

        Args:
            points: Training points (x, y)
            labels: Label of each training point

        Returns:
            The classifier itself

        Raises:
            InvalidArgumentError: If points and labels differ in length or a point is not 2D
        """
        if len(points) != len(labels):
            raise InvalidArgumentError(
                f"Point and label lists must be of equal length, got {len(points)} points "
                f"and {len(labels)} labels"
            )

        frozen_points = []
        for i, point in enumerate(points):
            if len(point) != 2:
                raise InvalidArgumentError(f"Training point {i} must have exactly 2 coordinates, got {len(point)}")
            frozen_points.append((int(point[0]), int(point[1])))
        frozen_labels = tuple(str(label) for label in labels)

        self._snapshot = _TrainingSnapshot(
            points=tuple(frozen_points),
            labels=frozen_labels,
            ranking=NeighborRanking(frozen_points, frozen_labels, self.p),
            aggregator=VoteAggregator(frozen_labels),
        )
        logger.info(
            f"Fitted k-NN classifier (k={self.k}, p={self.p}, tiebreaker={self.tiebreaker.value}) "
            f"on {len(frozen_points)} points with {len(set(frozen_labels))} labels"
        )
        return self

    def with_config(self, **changes) -> 'KnnClassifier':
        """
        Create a new classifier with changed configuration, fitted on the same training data.

        Args:
            **changes: ClassifierConfig fields to replace (k, p, tiebreaker)

        Returns:
            New KnnClassifier; this classifier is left unchanged
        """
        classifier = KnnClassifier(config=replace(self.config, **changes))
        if self._snapshot is not None:
            classifier.fit(self._snapshot.points, self._snapshot.labels)
        return classifier

    def is_fitted(self) -> bool:
        """
        Check whether the classifier holds training data.

        Returns:
            True if fit() was called with a non-empty training set
        """
        return self._snapshot is not None and len(self._snapshot.labels) > 0

    @property
    def training_points(self) -> Tuple[Point, ...]:
        return self._snapshot.points if self._snapshot else ()

    @property
    def training_labels(self) -> Tuple[str, ...]:
        return self._snapshot.labels if self._snapshot else ()

    def explain(
        self,
        point: Sequence[int],
        strategy_override: Union[TieBreakStrategy, str, None] = None
    ) -> ClassificationResult:
        """
        Classify a single point and explain the decision.

        Args:
            point: Query point (x, y)
            strategy_override: Tie-break strategy for this call only; the configured
                               strategy is used when None

        Returns:
            ClassificationResult with prediction, neighbors, votes and tie-break reason

        Raises:
            EmptyTrainingSetError: If the classifier has no training data
        """
        if not self.is_fitted():
            raise EmptyTrainingSetError("Classifier has no training data; call fit() with a non-empty training set first")

        query = (int(point[0]), int(point[1]))
        strategy = self.tiebreaker if strategy_override is None else strategy_override

        neighbors = self._snapshot.ranking.select(query, self.k)
        stats = self._snapshot.aggregator.aggregate(neighbors)
        prediction, reason = TieBreakResolver(strategy).resolve(stats)

        logger.debug(f"Classified {query} as '{prediction}' ({reason.value}) using {len(neighbors)} neighbors")

        return ClassificationResult(
            query=query,
            prediction=prediction,
            neighbors=tuple(neighbors),
            votes={label: s.count for label, s in stats.items()},
            label_stats=stats,
            tie_break_reason=reason,
        )

    def classify(self, point: Sequence[int]) -> ClassificationResult:
        """
        Classify a single point with the configured tie-break strategy.

        Args:
            point: Query point (x, y)

        Returns:
            ClassificationResult

        Raises:
            EmptyTrainingSetError: If the classifier has no training data
        """
        return self.explain(point)

    def classify_all(self, points: Sequence[Sequence[int]]) -> List[ClassificationResult]:
        """
        Classify several points, preserving input order.

        Args:
            points: Query points

        Returns:
            One ClassificationResult per input point

        Raises:
            EmptyTrainingSetError: If the classifier has no training data
        """
        return [self.explain(point) for point in points]

    def predict(self, points: Sequence[Sequence[int]]) -> List[str]:
        """
        Predict the label of each point.

        Args:
            points: Query points

        Returns:
            Predicted labels in input order
        """
        return [result.prediction for result in self.classify_all(points)]
