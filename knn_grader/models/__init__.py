"""
Data models for the k-NN grader.
"""

from .data_models import (
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
    "GradingResult"
]
