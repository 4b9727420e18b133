"""
Grade student submissions for a k-NN exercise.
"""

import sys
import os
import json
import logging
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from knn_grader import GradingEngine, load_task

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Task data as stored with the exercise
task = load_task(
    train_points='{"A": [[2, 2], [3, 1], [1, 3]], "B": [[8, 8], [7, 9], [9, 7]]}',
    test_points="[[3, 3], [8, 7], [5, 4]]",
    k=3,
    metric="manhattan",
    tiebreaker="nearest",
    max_points=9,
)

engine = GradingEngine(task)
print(f"Solution: {engine.solution}")

submissions = ["A,B,A", "A,A,", "A,B", "A,B,C", "A,B,1"]

for submission in submissions:
    print(f"\nSubmission: {submission!r}")
    print("=" * 50)
    result = engine.evaluate(submission, feedback_level=1)
    print(json.dumps(result.to_dict(), indent=2))

# Level 2 adds an HTML explanation of every classification
detailed = engine.evaluate("A,B,B", feedback_level=2)
print(f"\nExplanation of point 3:\n{detailed.criteria[3].feedback}")
