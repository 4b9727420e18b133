"""
Grading Engine Module
Grades k-NN submissions against the canonical solution and builds leveled feedback
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Union

from .config import GradingConfig
from .exceptions import ConfigurationError, EmptyTrainingSetError
from .feedback import FeedbackMessages, embed_solution_image, render_explanation
from .models.data_models import (
    ClassificationResult,
    Criterion,
    GradingResult,
    KnnTask,
    SubmissionMode
)
from .task_loader import classifier_for_task, compute_solution

logger = logging.getLogger(__name__)

MAX_FEEDBACK_LEVEL = 3


@dataclass
class SyntaxCheck:
    """Result of validating the raw submission"""
    valid: bool
    feedback: str


@dataclass
class ItemOutcome:
    """Grading outcome of one test point"""
    position: int
    expected: str
    provided: str
    result: str  # "correct", "incorrect", "skipped"
    points: Decimal


@dataclass
class GradingContext:
    """Tokens and counters of a single grading call"""
    solution: List[str]
    provided: List[str]  # padded with blanks to the solution length
    submitted_count: int  # token count before padding
    max_points: Decimal
    ppa: Decimal
    outcomes: List[ItemOutcome] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        solution_raw: str,
        submission_raw: str,
        max_points: Decimal,
        ppa_scale: int
    ) -> "GradingContext":
        """
        Split and trim solution and submission, padding the submission when shorter.

        Args:
            solution_raw: Canonical comma-joined solution
            submission_raw: Raw student submission
            max_points: Maximum points of the task
            ppa_scale: Decimal places of the points-per-answer value

        Returns:
            GradingContext
        """
        solution = tokenize(solution_raw)
        provided = tokenize(submission_raw)
        submitted_count = len(provided)
        if len(provided) < len(solution):
            provided = provided + [""] * (len(solution) - len(provided))

        ppa = round_half_up(max_points / Decimal(len(solution)), ppa_scale)
        return cls(
            solution=solution,
            provided=provided,
            submitted_count=submitted_count,
            max_points=max_points,
            ppa=ppa,
        )

    def count(self, result: str) -> int:
        return sum(1 for outcome in self.outcomes if outcome.result == result)


def tokenize(raw: Optional[str]) -> List[str]:
    """Split a comma-separated answer into trimmed tokens, keeping empty ones."""
    return [token.strip() for token in (raw or "").strip().split(",")]


def round_half_up(value: Decimal, places: int) -> Decimal:
    """Round a decimal to a fixed number of places, halves away from zero."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class GradingEngine:
    """
    Engine for grading k-NN submissions against a task's canonical solution.
    """

    def __init__(self, task: KnnTask, grading_config: Optional[GradingConfig] = None):
        """
        Initialize grading engine.

        Args:
            task: The k-NN task; its solution is computed with the classifier
                  when the task carries none
            grading_config: Grading configuration (defaults to the global config)
        """
        if grading_config is None:
            from .config import config
            grading_config = config.grading

        self.task = task
        self.settings = grading_config
        self._allowed_chars = re.compile(grading_config.allowed_chars_pattern)
        self._allowed_labels = {label.strip().upper() for label in task.labels}
        self._solution = task.solution

    @property
    def solution(self) -> str:
        """Canonical solution, computed once from the task when not stored"""
        if self._solution is None:
            self._solution = compute_solution(self.task)
            logger.info(f"Computed solution for task with {len(self.task.test_points)} test points")
        return self._solution

    def check_syntax(self, submission_raw: str, context: GradingContext) -> SyntaxCheck:
        """
        Validate token count, character set and label membership.

        Args:
            submission_raw: Trimmed raw submission
            context: Grading context of the submission

        Returns:
            SyntaxCheck naming the first failing rule
        """
        invalid_labels = list(dict.fromkeys(
            token for token in context.provided
            if token and token.upper() not in self._allowed_labels
        ))

        if len(context.solution) != context.submitted_count:
            return SyntaxCheck(False, FeedbackMessages.length_mismatch(
                len(context.solution), context.submitted_count))
        if not self._allowed_chars.fullmatch(submission_raw):
            return SyntaxCheck(False, FeedbackMessages.INVALID_CHARS)
        if invalid_labels:
            return SyntaxCheck(False, FeedbackMessages.invalid_labels(invalid_labels))
        return SyntaxCheck(True, FeedbackMessages.SYNTAX_VALID)

    def evaluate(
        self,
        submission: Optional[str],
        feedback_level: int = 1,
        mode: Union[SubmissionMode, str] = SubmissionMode.SUBMIT
    ) -> GradingResult:
        """
        Grade a submission.

        Args:
            submission: Comma-separated labels, one per test point
            feedback_level: 0 = total only, 1 = per point, 2 = per point with
                            k-NN explanation, 3 = as 2 plus solution image
            mode: Submission mode; RUN never awards points

        Returns:
            GradingResult with points, overall feedback and criteria

        Raises:
            ConfigurationError: If the feedback level or mode is invalid, or a graded
                                mode needs a solution the task settings cannot produce
            EmptyTrainingSetError: If a graded mode needs a solution and the task has
                                   no training data
        """
        if isinstance(feedback_level, bool) or not isinstance(feedback_level, int) \
                or not 0 <= feedback_level <= MAX_FEEDBACK_LEVEL:
            raise ConfigurationError(f"Feedback level must be between 0 and {MAX_FEEDBACK_LEVEL}, got {feedback_level!r}")
        try:
            mode = SubmissionMode(mode.lower() if isinstance(mode, str) else mode)
        except ValueError:
            raise ConfigurationError(f"Unknown submission mode: {mode!r}")

        try:
            solution = self.solution
        except (EmptyTrainingSetError, ConfigurationError) as e:
            if mode.is_graded:
                raise
            logger.warning(f"Cannot compute solution for ungraded submission, skipping syntax check: {e}")
            return GradingResult(self.task.max_points, Decimal(0), "", [])

        submission_raw = (submission or "").strip()
        context = GradingContext.build(
            solution, submission_raw, self.task.max_points, self.settings.ppa_scale)

        syntax = self.check_syntax(submission_raw, context)
        criteria = [Criterion(FeedbackMessages.SYNTAX_CRITERION, None, syntax.valid, syntax.feedback)]

        if not mode.is_graded:
            return GradingResult(self.task.max_points, Decimal(0), "", criteria)

        if not syntax.valid:
            logger.info(f"Submission rejected by syntax check: {syntax.feedback}")
            return GradingResult(self.task.max_points, Decimal(0), syntax.feedback, criteria)

        total = self._score(context)

        if feedback_level == 0:
            general_feedback = syntax.feedback
        else:
            explanations = self._explanations(context) if feedback_level >= 2 else {}
            criteria.extend(self._item_criteria(context, explanations))

            general_feedback = FeedbackMessages.CORRECT if context.count("incorrect") == 0 \
                else FeedbackMessages.INCORRECT
            if feedback_level == 3 and self.task.solution_image:
                general_feedback = embed_solution_image(general_feedback, self.task.solution_image)

        logger.info(
            f"Graded submission: {total}/{self.task.max_points} points "
            f"({context.count('correct')} correct, {context.count('incorrect')} incorrect, "
            f"{context.count('skipped')} skipped, feedback level {feedback_level})"
        )
        return GradingResult(self.task.max_points, total, general_feedback, criteria)

    def _score(self, context: GradingContext) -> Decimal:
        """Score every position: +ppa correct, -ppa incorrect, 0 skipped"""
        for i, expected in enumerate(context.solution):
            provided = context.provided[i]
            if not provided:
                result, points = "skipped", Decimal(0)
            elif provided.upper() == expected.upper():
                result, points = "correct", context.ppa
            else:
                result, points = "incorrect", -context.ppa
            context.outcomes.append(ItemOutcome(i, expected, provided, result, points))

        total = sum((outcome.points for outcome in context.outcomes), Decimal(0))
        return round_half_up(total, self.settings.points_scale)

    def _explanations(self, context: GradingContext) -> Dict[int, ClassificationResult]:
        """
        Classify the task's test points for the explanation feedback.

        Returns an empty mapping when the task has no usable training or test data
        or its classifier settings are invalid.
        """
        test_points = self.task.test_points[:len(context.solution)]
        if not test_points:
            logger.warning("Task has no test points, falling back to feedback without explanation")
            return {}

        try:
            classifier = classifier_for_task(self.task)
            results = classifier.classify_all(test_points)
        except (EmptyTrainingSetError, ConfigurationError) as e:
            logger.warning(f"Cannot explain classifications, falling back to feedback without explanation: {e}")
            return {}
        return dict(enumerate(results))

    def _item_criteria(
        self,
        context: GradingContext,
        explanations: Dict[int, ClassificationResult]
    ) -> List[Criterion]:
        """Build one criterion per test point"""
        messages = {
            "correct": FeedbackMessages.CORRECT,
            "incorrect": FeedbackMessages.INCORRECT,
            "skipped": FeedbackMessages.SKIPPED,
        }
        criteria = []
        for outcome in context.outcomes:
            feedback = messages[outcome.result]
            explanation = explanations.get(outcome.position)
            if explanation is not None:
                feedback += "<br>" + render_explanation(explanation, self.settings.distance_decimals)

            criteria.append(Criterion(
                name=FeedbackMessages.point_criterion(outcome.position + 1),
                points=outcome.points,
                passed=outcome.result != "incorrect",
                feedback=feedback,
            ))
        return criteria
