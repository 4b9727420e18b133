"""
Distance computations for 2D integer points.

Distances belong to the Minkowski family: order 1 is the Manhattan distance,
order 2 the Euclidean distance and any higher order the general Minkowski
distance. The scalar helper delegates to the vectorised one so both always
produce identical values.
"""

from typing import Sequence
import numpy as np

from .models.data_models import Point


def distances_to(query: Point, points: np.ndarray, p: int) -> np.ndarray:
    """
    Compute the distance from a query point to every point of a matrix.

    Args:
        query: Query point (x, y)
        points: Integer array of shape (n, 2)
        p: Minkowski order (callers validate p >= 1)

    Returns:
        Float array of shape (n,) with non-negative distances
    """
    diffs = np.abs(np.asarray(points, dtype=np.int64).reshape(-1, 2) - np.asarray(query, dtype=np.int64))
    dx = diffs[:, 0].astype(np.float64)
    dy = diffs[:, 1].astype(np.float64)

    if p == 1:
        return dx + dy
    if p == 2:
        return np.sqrt(dx * dx + dy * dy)
    return np.power(np.power(dx, p) + np.power(dy, p), 1.0 / p)


def minkowski_distance(a: Sequence[int], b: Sequence[int], p: int) -> float:
    """
    Compute the distance between two points.

    Args:
        a: First point (x, y)
        b: Second point (x, y)
        p: Minkowski order

    Returns:
        Distance as float
    """
    return float(distances_to(tuple(a), np.array([b]), p)[0])
