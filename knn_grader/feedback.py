"""
Feedback texts for the k-NN grader.
Contains the message catalogue and the HTML explanation of a classification.
"""

from html import escape
from typing import Iterable

from .models.data_models import ClassificationResult, Point


class FeedbackMessages:
    """Messages used in grading feedback."""

    SYNTAX_CRITERION = "Syntax"
    SYNTAX_VALID = "Syntax is valid"
    CORRECT = "Correct"
    INCORRECT = "Incorrect"
    SKIPPED = "Skipped"
    INVALID_CHARS = "Only letters, spaces and commas are allowed"
    SOLUTION_VISUALISATION = "Solution visualisation"

    # Explanation table
    POINT = "Point:"
    CLASSIFIED_AS = "Classified as:"
    NEIGHBORS = "Nearest neighbors:"
    INDEX = "Index"
    CLASS = "Class"
    DISTANCE = "Distance"
    VOTES_PER_CLASS = "Votes per class:"
    TIE_BREAK_REASON = "Tie-break reason:"

    @staticmethod
    def point_criterion(number: int) -> str:
        """Name of the criterion for the test point at 1-based position number."""
        return f"Point {number}"

    @staticmethod
    def length_mismatch(expected: int, received: int) -> str:
        return f"Expected {expected} labels separated by commas but received {received}"

    @staticmethod
    def invalid_labels(labels: Iterable[str]) -> str:
        return f"Unknown labels: {', '.join(labels)}"


def format_point(point: Point) -> str:
    """Format a point as [x, y]."""
    return f"[{point[0]}, {point[1]}]"


def render_explanation(result: ClassificationResult, distance_decimals: int = 2) -> str:
    """
    Render a classification result as a small HTML block.

    The block shows the test point, the predicted class, a table of the
    selected neighbors (index, class, distance), the votes per class and the
    tie-break reason.

    Args:
        result: Classification result of one test point
        distance_decimals: Decimal places shown for distances

    Returns:
        HTML string
    """
    msg = FeedbackMessages
    parts = ["<div>"]
    parts.append(f"<b>{msg.POINT}</b> {format_point(result.query)}<br>")
    parts.append(
        f"<b>{msg.CLASSIFIED_AS}</b> <span style='color:green'>{escape(result.prediction)}</span><br>"
    )
    parts.append(f"<b>{msg.NEIGHBORS}</b>")
    parts.append(
        "<table border='1' cellpadding='2' cellspacing='0' style='border-collapse:collapse;'>"
        f"<tr><th>#</th><th>{msg.INDEX}</th><th>{msg.CLASS}</th><th>{msg.DISTANCE}</th></tr>"
    )
    for row, neighbor in enumerate(result.neighbors, 1):
        parts.append(
            f"<tr><td>{row}</td><td>{neighbor.index}</td><td>{escape(neighbor.label)}</td>"
            f"<td>{neighbor.distance:.{distance_decimals}f}</td></tr>"
        )
    parts.append("</table>")

    votes = ", ".join(f"{escape(label)}: {count}" for label, count in result.votes.items())
    parts.append(f"<b>{msg.VOTES_PER_CLASS}</b> {votes}<br>")
    parts.append(f"<b>{msg.TIE_BREAK_REASON}</b> {result.tie_break_reason.description}")
    parts.append("</div>")
    return "".join(parts)


def embed_solution_image(feedback: str, image_base64: str) -> str:
    """
    Append a reference to the rendered solution image to a feedback text.

    Args:
        feedback: Overall feedback text
        image_base64: Base64-encoded PNG

    Returns:
        Feedback with an embedded image tag
    """
    return (
        f"{feedback}<br><b>{FeedbackMessages.SOLUTION_VISUALISATION}</b><br>"
        f"<img src=\"data:image/png;base64,{image_base64}\" "
        f"style=\"max-width:90%;border:2px solid #444;margin:8px 0;\"/>"
    )
