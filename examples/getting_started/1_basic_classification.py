"""
Basic k-NN classification example with an explained decision.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from knn_grader import KnnClassifier

# Two small clusters
points = [(2, 2), (3, 1), (1, 3), (8, 8), (7, 9), (9, 7)]
labels = ["A", "A", "A", "B", "B", "B"]

classifier = KnnClassifier(k=3, p=2, tiebreaker="sum").fit(points, labels)

queries = [(3, 3), (8, 7), (5, 5)]

print("k-NN Classification Results:")
print("=" * 50)

for i, query in enumerate(queries, 1):
    result = classifier.classify(query)
    print(f"\n{i}. {result.format_result()}")
