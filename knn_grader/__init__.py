"""
Transparent 2D k-nearest-neighbor classifier with submission grading for k-NN exercises.
"""

from .models import (
    Point,
    TieBreakReason,
    TieBreakStrategy,
    DistanceMetric,
    ClassifierConfig,
    Neighbor,
    LabelStats,
    ClassificationResult,
    KnnTask,
    SubmissionMode,
    Criterion,
    GradingResult
)
from .distance import minkowski_distance, distances_to
from .neighbors import NeighborRanking
from .voting import VoteAggregator
from .tie_break import TieBreakResolver
from .knn_classifier import KnnClassifier
from .task_loader import load_task, classifier_for_task, compute_solution
from .grading_engine import GradingEngine
from .exceptions import (
    KnnGraderError,
    InvalidArgumentError,
    EmptyTrainingSetError,
    ConfigurationError,
    TaskDataError
)

__version__ = "0.1.0"
__all__ = [
    "Point",
    "TieBreakReason",
    "TieBreakStrategy",
    "DistanceMetric",
    "ClassifierConfig",
    "Neighbor",
    "LabelStats",
    "ClassificationResult",
    "KnnTask",
    "SubmissionMode",
    "Criterion",
    "GradingResult",
    "minkowski_distance",
    "distances_to",
    "NeighborRanking",
    "VoteAggregator",
    "TieBreakResolver",
    "KnnClassifier",
    "load_task",
    "classifier_for_task",
    "compute_solution",
    "GradingEngine",
    "KnnGraderError",
    "InvalidArgumentError",
    "EmptyTrainingSetError",
    "ConfigurationError",
    "TaskDataError"
]
