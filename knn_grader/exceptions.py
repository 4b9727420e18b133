"""
Exception classes for the k-NN grader.
"""


class KnnGraderError(Exception):
    """Base exception for k-NN grader errors."""
    pass


class InvalidArgumentError(KnnGraderError):
    """Raised when training points and labels do not line up."""
    pass


class EmptyTrainingSetError(KnnGraderError):
    """Raised when classification is attempted without training data."""
    pass


class ConfigurationError(KnnGraderError):
    """Raised when configuration is invalid."""
    pass


class TaskDataError(KnnGraderError):
    """Raised when task training or test data cannot be parsed."""
    pass
