"""
Core data models for the k-NN grader.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import List, Optional, Dict, Any, Mapping, Tuple, Union

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# A training or test point: (x, y) integer coordinates
Point = Tuple[int, int]


class TieBreakReason(str, Enum):
    """Reason attached to a classification result explaining how the label was chosen."""
    MAJORITY = "majority"
    SUM_DISTANCE = "sumDistance"
    MEAN_DISTANCE = "meanDistance"
    NEAREST_NEIGHBOR = "nearestNeighbor"
    ALPHABETICAL = "alphabetical"

    @property
    def description(self) -> str:
        """Human-readable description of the reason."""
        return _REASON_DESCRIPTIONS[self]


_REASON_DESCRIPTIONS = {
    TieBreakReason.MAJORITY: "Majority vote",
    TieBreakReason.SUM_DISTANCE: "Tie resolved by smallest total distance of the tied classes",
    TieBreakReason.MEAN_DISTANCE: "Tie resolved by smallest mean distance of the tied classes",
    TieBreakReason.NEAREST_NEIGHBOR: "Tie resolved by the single nearest neighbor of the tied classes",
    TieBreakReason.ALPHABETICAL: "Tie still unresolved, alphabetically first class chosen",
}


class TieBreakStrategy(str, Enum):
    """Strategy used to resolve equal vote counts."""
    SUM = "sum"
    MEAN = "mean"
    NEAREST = "nearest"

    @property
    def reason(self) -> TieBreakReason:
        """Reason reported when this strategy decides a tie."""
        return {
            TieBreakStrategy.SUM: TieBreakReason.SUM_DISTANCE,
            TieBreakStrategy.MEAN: TieBreakReason.MEAN_DISTANCE,
            TieBreakStrategy.NEAREST: TieBreakReason.NEAREST_NEIGHBOR,
        }[self]

    @classmethod
    def parse(cls, value: Union[str, 'TieBreakStrategy', None]) -> 'TieBreakStrategy':
        """
        Resolve a loosely typed strategy name.

        Absent, blank and unknown names resolve to SUM. "alphabetical" also
        resolves to SUM since the alphabetical rule always runs last anyway.

        Args:
            value: Strategy name or instance

        Returns:
            TieBreakStrategy member
        """
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return cls.SUM

        name = str(value).strip().lower()
        for strategy in cls:
            if strategy.value == name:
                return strategy

        if name != "alphabetical":
            logger.warning(f"Unknown tie-break strategy '{value}', falling back to '{cls.SUM.value}'")
        return cls.SUM


class DistanceMetric(str, Enum):
    """Named members of the Minkowski distance family."""
    MANHATTAN = "manhattan"
    EUCLIDEAN = "euclidean"
    MINKOWSKI = "minkowski"

    @classmethod
    def order_for(cls, metric: Union[str, int, 'DistanceMetric']) -> int:
        """
        Resolve a metric name or an explicit order to a Minkowski order p.

        Args:
            metric: "manhattan", "euclidean", "minkowski", or an integer order >= 1

        Returns:
            Minkowski order p

        Raises:
            ConfigurationError: If the metric is unknown or the order is below 1
        """
        from ..config import config

        if isinstance(metric, bool):
            raise ConfigurationError(f"Invalid distance metric: {metric!r}")

        if isinstance(metric, int):
            order = metric
        elif isinstance(metric, str) and metric.strip().lstrip("-").isdigit():
            order = int(metric.strip())
        elif isinstance(metric, str):
            name = metric.strip().lower()
            if name == cls.MANHATTAN.value:
                return 1
            if name == cls.EUCLIDEAN.value:
                return 2
            if name == cls.MINKOWSKI.value:
                order = config.classifier.minkowski_order
            else:
                valid = [m.value for m in cls]
                raise ConfigurationError(f"Unknown distance metric '{metric}', expected one of {valid} or an integer order")
        else:
            raise ConfigurationError(f"Invalid distance metric: {metric!r}")

        if order < 1:
            raise ConfigurationError(f"Distance order must be at least 1, got {order}")
        return order


@dataclass(frozen=True)
class ClassifierConfig:
    """Immutable configuration of a k-NN classifier."""
    k: int = 3
    p: int = 2
    tiebreaker: TieBreakStrategy = TieBreakStrategy.SUM

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.k, bool) or not isinstance(self.k, int) or self.k < 1:
            raise ConfigurationError(f"k must be a positive integer, got {self.k!r}")
        if isinstance(self.p, bool) or not isinstance(self.p, int) or self.p < 1:
            raise ConfigurationError(f"Distance order p must be a positive integer, got {self.p!r}")
        object.__setattr__(self, "tiebreaker", TieBreakStrategy.parse(self.tiebreaker))

    @classmethod
    def from_task_settings(
        cls,
        k: Optional[int] = None,
        metric: Union[str, int, None] = None,
        tiebreaker: Optional[str] = None
    ) -> 'ClassifierConfig':
        """
        Create a configuration from the loose settings stored with a task.

        Missing values fall back to the library defaults.
        """
        from ..config import config

        defaults = config.classifier
        return cls(
            k=defaults.default_k if k is None else k,
            p=DistanceMetric.order_for(defaults.default_metric if metric is None else metric),
            tiebreaker=defaults.default_tiebreaker if tiebreaker is None else tiebreaker,
        )


@dataclass(frozen=True)
class Neighbor:
    """A training point selected for a query, with its distance."""
    index: int  # Position in the training set
    label: str
    distance: float


@dataclass(frozen=True)
class LabelStats:
    """Vote count and distance statistics of one label within the selected neighbors."""
    label: str
    count: int
    sum_distance: float
    mean_distance: float
    nearest_distance: float


@dataclass(frozen=True)
class ClassificationResult:
    """Represents the classification of one query point with its explanation."""
    query: Point
    prediction: str
    neighbors: Tuple[Neighbor, ...]
    votes: Mapping[str, int]
    label_stats: Mapping[str, LabelStats]
    tie_break_reason: TieBreakReason

    def __post_init__(self):
        """Freeze the neighbor sequence and the per-label mappings."""
        object.__setattr__(self, "neighbors", tuple(self.neighbors))
        object.__setattr__(self, "votes", MappingProxyType(dict(self.votes)))
        object.__setattr__(self, "label_stats", MappingProxyType(dict(self.label_stats)))

    @property
    def winning_votes(self) -> int:
        """Number of votes the predicted label received."""
        return self.votes.get(self.prediction, 0)

    def format_result(self) -> str:
        """
        Format the classification result as a human-readable string.

        Returns:
            Formatted result string
        """
        lines = [f"Point {self.query} classified as '{self.prediction}'"]
        lines.append("Neighbors:")
        for row, neighbor in enumerate(self.neighbors, 1):
            lines.append(f"  {row}. #{neighbor.index} {neighbor.label} ({neighbor.distance:.2f})")
        votes = ", ".join(f"{label}: {count}" for label, count in self.votes.items())
        lines.append(f"Votes: {votes}")
        lines.append(f"Decision: {self.tie_break_reason.description}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the classification result to a dictionary.

        Returns:
            Dictionary representation of the result
        """
        return {
            "query": list(self.query),
            "prediction": self.prediction,
            "neighbors": [
                {"index": n.index, "label": n.label, "distance": n.distance}
                for n in self.neighbors
            ],
            "votes": dict(self.votes),
            "label_stats": {
                label: {
                    "count": stats.count,
                    "sum_distance": stats.sum_distance,
                    "mean_distance": stats.mean_distance,
                    "nearest_distance": stats.nearest_distance,
                }
                for label, stats in self.label_stats.items()
            },
            "tie_break_reason": self.tie_break_reason.value,
        }


@dataclass
class KnnTask:
    """A k-NN exercise: training data, test points, classifier settings and grading data."""
    train_points: Dict[str, List[Point]] = field(default_factory=dict)
    test_points: List[Point] = field(default_factory=list)
    k: Optional[int] = None
    metric: Optional[str] = None
    tiebreaker: Optional[str] = None
    max_points: Decimal = Decimal("10")
    solution: Optional[str] = None  # Comma-joined labels, one per test point
    solution_image: Optional[str] = None  # Base64 PNG of the solution plot

    def __post_init__(self):
        """Normalise points and validate max points."""
        try:
            self.max_points = Decimal(str(self.max_points))
        except InvalidOperation:
            raise ConfigurationError(f"Invalid max points: {self.max_points!r}")
        if not self.max_points.is_finite() or self.max_points < 0:
            raise ConfigurationError(f"Max points must be a non-negative number, got {self.max_points}")

        self.train_points = {
            label: [tuple(point) for point in points]
            for label, points in (self.train_points or {}).items()
        }
        self.test_points = [tuple(point) for point in (self.test_points or [])]

    @property
    def labels(self) -> List[str]:
        """Labels present in the training data."""
        return list(self.train_points.keys())

    def flatten(self) -> Tuple[List[Point], List[str]]:
        """
        Flatten the label-to-points mapping into parallel point and label lists.

        Returns:
            Tuple of (points, labels) of equal length
        """
        points: List[Point] = []
        labels: List[str] = []
        for label, label_points in self.train_points.items():
            points.extend(label_points)
            labels.extend([label] * len(label_points))
        return points, labels

    def classifier_config(self) -> ClassifierConfig:
        """Classifier configuration derived from the task settings."""
        return ClassifierConfig.from_task_settings(self.k, self.metric, self.tiebreaker)


class SubmissionMode(str, Enum):
    """How a submission is evaluated."""
    RUN = "run"
    DIAGNOSE = "diagnose"
    SUBMIT = "submit"

    @property
    def is_graded(self) -> bool:
        """Whether points are awarded in this mode."""
        return self is not SubmissionMode.RUN


@dataclass
class Criterion:
    """One graded criterion of a submission."""
    name: str
    points: Optional[Decimal]
    passed: bool
    feedback: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert the criterion to a dictionary."""
        return {
            "name": self.name,
            "points": str(self.points) if self.points is not None else None,
            "passed": self.passed,
            "feedback": self.feedback,
        }


@dataclass
class GradingResult:
    """Outcome of grading one submission."""
    max_points: Decimal
    points: Decimal
    general_feedback: str = ""
    criteria: List[Criterion] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the grading result to a dictionary."""
        return {
            "max_points": str(self.max_points),
            "points": str(self.points),
            "general_feedback": self.general_feedback,
            "criteria": [criterion.to_dict() for criterion in self.criteria],
        }
