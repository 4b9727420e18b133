"""
Configuration for the k-NN grader library.
"""

import os
from dataclasses import dataclass


@dataclass
class ClassifierDefaults:
    """Defaults applied when a task leaves classifier settings open."""
    default_k: int = 3
    default_metric: str = "euclidean"
    default_tiebreaker: str = "sum"
    
    # Order used for the "minkowski" metric name
    minkowski_order: int = 3
    
    @classmethod
    def from_env(cls) -> 'ClassifierDefaults':
        """Create classifier defaults from environment variables."""
        return cls(
            default_k=int(os.getenv('KNN_DEFAULT_K', cls.default_k)),
            default_metric=os.getenv('KNN_DEFAULT_METRIC', cls.default_metric),
            default_tiebreaker=os.getenv('KNN_DEFAULT_TIEBREAKER', cls.default_tiebreaker),
            minkowski_order=int(os.getenv('KNN_MINKOWSKI_ORDER', cls.minkowski_order)),
        )


@dataclass
class GradingConfig:
    """Configuration for submission grading."""
    # Decimal places kept for points-per-answer and awarded points
    ppa_scale: int = 10
    points_scale: int = 2
    
    # Decimal places shown for neighbor distances in feedback
    distance_decimals: int = 2
    
    # Raw submissions may only contain letters, spaces and commas
    allowed_chars_pattern: str = r"\s*[A-Za-z ,]*\s*"
    
    @classmethod
    def from_env(cls) -> 'GradingConfig':
        """Create grading config from environment variables."""
        return cls(
            ppa_scale=int(os.getenv('GRADING_PPA_SCALE', cls.ppa_scale)),
            points_scale=int(os.getenv('GRADING_POINTS_SCALE', cls.points_scale)),
            distance_decimals=int(os.getenv('GRADING_DISTANCE_DECIMALS', cls.distance_decimals)),
            allowed_chars_pattern=os.getenv('GRADING_ALLOWED_CHARS_PATTERN', cls.allowed_chars_pattern),
        )


@dataclass
class KnnGraderConfig:
    """Configuration for the k-NN grader library."""
    classifier: ClassifierDefaults
    grading: GradingConfig
    
    @classmethod
    def from_env(cls) -> 'KnnGraderConfig':
        """Create grader config from environment variables."""
        return cls(
            classifier=ClassifierDefaults.from_env(),
            grading=GradingConfig.from_env(),
        )


# Global configuration instance
config = KnnGraderConfig.from_env()
