"""
Loading of k-NN task data and computation of canonical solutions.

Training data is stored as a JSON object mapping each label to its points,
test data as a JSON list of points. A point is either [x, y] or {"x": .., "y": ..}.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from .exceptions import TaskDataError
from .knn_classifier import KnnClassifier
from .models.data_models import KnnTask, Point

logger = logging.getLogger(__name__)

RawData = Union[str, bytes, Dict[str, Any], List[Any], None]


def _decode(raw: RawData) -> Any:
    """Decode JSON text; already decoded objects are returned unchanged."""
    if isinstance(raw, (str, bytes)):
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise TaskDataError(f"Invalid JSON in task data: {str(e)}")
    return raw


def parse_point(value: Any) -> Point:
    """
    Parse a single point.

    Args:
        value: [x, y] list/tuple or {"x": x, "y": y} mapping

    Returns:
        Point tuple

    Raises:
        TaskDataError: If the value is not a 2D integer point
    """
    if isinstance(value, dict) and "x" in value and "y" in value:
        coords = [value["x"], value["y"]]
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        coords = list(value)
    else:
        raise TaskDataError(f"Point must be [x, y] or {{x: .., y: ..}}, got {value!r}")

    for coord in coords:
        if isinstance(coord, bool) or not isinstance(coord, (int, float)):
            raise TaskDataError(f"Point coordinates must be integers, got {value!r}")
        if isinstance(coord, float) and not coord.is_integer():
            raise TaskDataError(f"Point coordinates must be integers, got {value!r}")
    return int(coords[0]), int(coords[1])


def parse_train_points(raw: RawData) -> Dict[str, List[Point]]:
    """
    Parse training data strictly.

    Args:
        raw: JSON text or decoded mapping label -> list of points

    Returns:
        Mapping label -> list of points, in input order

    Raises:
        TaskDataError: If the data is malformed
    """
    data = _decode(raw)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TaskDataError("Training data must be a JSON object mapping labels to points")

    train_points: Dict[str, List[Point]] = {}
    for label, points in data.items():
        if not isinstance(label, str) or not label.strip():
            raise TaskDataError(f"Training label must be a non-empty string, got {label!r}")
        if not isinstance(points, list):
            raise TaskDataError(f"Points of label '{label}' must be a list")
        train_points[label] = [parse_point(point) for point in points]
    return train_points


def parse_test_points(raw: RawData) -> List[Point]:
    """
    Parse test points strictly.

    Args:
        raw: JSON text or decoded list of points

    Returns:
        List of points

    Raises:
        TaskDataError: If the data is malformed
    """
    data = _decode(raw)
    if data is None:
        return []
    if not isinstance(data, list):
        raise TaskDataError("Test data must be a JSON list of points")
    return [parse_point(point) for point in data]


def load_train_points(raw: RawData) -> Dict[str, List[Point]]:
    """Parse training data, degrading to an empty mapping when it is malformed."""
    try:
        return parse_train_points(raw)
    except TaskDataError as e:
        logger.warning(f"Could not read training points, using empty training set: {e}")
        return {}


def load_test_points(raw: RawData) -> List[Point]:
    """Parse test points, degrading to an empty list when they are malformed."""
    try:
        return parse_test_points(raw)
    except TaskDataError as e:
        logger.warning(f"Could not read test points, using no test points: {e}")
        return []


def load_task(
    train_points: RawData,
    test_points: RawData,
    k: Optional[int] = None,
    metric: Optional[str] = None,
    tiebreaker: Optional[str] = None,
    max_points: Union[Decimal, int, float, str] = Decimal("10"),
    solution: Optional[str] = None,
    solution_image: Optional[str] = None
) -> KnnTask:
    """
    Build a KnnTask from stored task data.

    Malformed training or test data is replaced by an empty collection.

    Returns:
        KnnTask instance
    """
    return KnnTask(
        train_points=load_train_points(train_points),
        test_points=load_test_points(test_points),
        k=k,
        metric=metric,
        tiebreaker=tiebreaker,
        max_points=max_points,
        solution=solution,
        solution_image=solution_image,
    )


def classifier_for_task(task: KnnTask) -> KnnClassifier:
    """
    Create a classifier configured from the task settings and fitted on its training data.

    Args:
        task: The k-NN task

    Returns:
        Fitted KnnClassifier

    Raises:
        ConfigurationError: If the task settings are invalid
    """
    points, labels = task.flatten()
    return KnnClassifier(config=task.classifier_config()).fit(points, labels)


def compute_solution(task: KnnTask) -> str:
    """
    Compute the canonical solution of a task.

    Args:
        task: The k-NN task

    Returns:
        Predicted labels of the test points, comma-joined in test-point order

    Raises:
        EmptyTrainingSetError: If the task has test points but no training data
    """
    if not task.test_points:
        return ""
    return ",".join(classifier_for_task(task).predict(task.test_points))
