"""
Compare distance metrics and tie-break strategies on the same training data.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from knn_grader import KnnClassifier, DistanceMetric

# Each metric picks a different nearest point for the origin
classifier = KnnClassifier(k=1).fit([(-10, -2), (-9, -4), (-8, -6)], ["A", "B", "C"])

print("Distance metrics:")
print("=" * 50)
for metric in DistanceMetric:
    variant = classifier.with_config(p=DistanceMetric.order_for(metric))
    result = variant.classify((0, 0))
    nearest = result.neighbors[0]
    print(f"  {metric.value:<10} (p={variant.p}): {result.prediction} at distance {nearest.distance:.3f}")

# Two votes each; the strategy decides
classifier = KnnClassifier(k=4).fit([(1, 0), (4, 0), (-1, 0), (-2, 0)], ["A", "A", "B", "B"])

print("\nTie-break strategies:")
print("=" * 50)
for strategy in ("sum", "mean", "nearest"):
    result = classifier.explain((0, 0), strategy_override=strategy)
    print(f"  {strategy:<8}: {result.prediction} ({result.tie_break_reason.description})")
