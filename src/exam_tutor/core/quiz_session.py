"""
Quiz session state machine.

Tracks the loaded questions, the current position, recorded answers and
grading. Transitions are synchronous; invoking one in the wrong state is a
programmer error and raises QuizStateError.
"""
import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from src.exam_tutor import config
from src.exam_tutor.core.exceptions import QuizStateError
from src.exam_tutor.models.exam_models import (
    Question,
    QuestionResult,
    QuizState,
    ResultFilter,
    ScoreSummary,
)

logger = logging.getLogger(__name__)


class QuizPhase(str, Enum):
    EMPTY = "empty"
    IN_PROGRESS = "in_progress"
    GRADED = "graded"


class QuizSession:
    """Own one quiz from loading through grading."""

    def __init__(self):
        self._questions: List[Question] = []
        self._by_id: Dict[int, Question] = {}
        self._answers: Dict[int, int] = {}
        self._results: List[QuestionResult] = []
        self._current_index = 0
        self._is_completed = False

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> QuizPhase:
        if not self._questions:
            return QuizPhase.EMPTY
        if self._is_completed:
            return QuizPhase.GRADED
        return QuizPhase.IN_PROGRESS

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def is_completed(self) -> bool:
        return self._is_completed

    @property
    def questions(self) -> Sequence[Question]:
        return tuple(self._questions)

    @property
    def answers(self) -> Mapping[int, int]:
        return MappingProxyType(self._answers)

    @property
    def current_question(self) -> Question:
        self._require(QuizPhase.IN_PROGRESS, QuizPhase.GRADED)
        return self._questions[self._current_index]

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def unanswered_count(self) -> int:
        return len(self._questions) - len(self._answers)

    @property
    def is_fully_answered(self) -> bool:
        return bool(self._questions) and self.unanswered_count == 0

    def question(self, question_id: int) -> Question:
        try:
            return self._by_id[question_id]
        except KeyError:
            raise QuizStateError(f"Unknown question id: {question_id}") from None

    def selected_option(self, question_id: int) -> Optional[int]:
        self.question(question_id)
        return self._answers.get(question_id)

    def snapshot(self) -> QuizState:
        return QuizState(
            questions=list(self._questions),
            current_index=self._current_index,
            answers=dict(self._answers),
            is_completed=self._is_completed,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def load(self, questions: Sequence[Question]) -> None:
        """Start a new quiz. Any previous results are discarded."""
        self._require(QuizPhase.EMPTY, QuizPhase.GRADED)
        if not questions:
            raise QuizStateError("Cannot load an empty question set")

        by_id = {question.id: question for question in questions}
        if len(by_id) != len(questions):
            raise QuizStateError("Question ids must be unique within a quiz")

        self._questions = list(questions)
        self._by_id = by_id
        self._answers = {}
        self._results = []
        self._current_index = 0
        self._is_completed = False
        logger.info(f"Loaded quiz with {len(self._questions)} questions")

    def abandon(self) -> None:
        """Drop an in-progress or graded quiz and return to the empty state."""
        self._questions = []
        self._by_id = {}
        self._answers = {}
        self._results = []
        self._current_index = 0
        self._is_completed = False

    def select_option(self, question_id: int, option_index: int) -> None:
        self._require(QuizPhase.IN_PROGRESS)
        question = self.question(question_id)
        if not 0 <= option_index < len(question.options):
            raise QuizStateError(
                f"Option index {option_index} out of range for question {question_id}")
        self._answers[question_id] = option_index

    def advance(self) -> None:
        self._require(QuizPhase.IN_PROGRESS)
        self._current_index = min(self._current_index + 1, len(self._questions) - 1)

    def retreat(self) -> None:
        self._require(QuizPhase.IN_PROGRESS)
        self._current_index = max(self._current_index - 1, 0)

    def go_to(self, index: int) -> None:
        """Jump to a question position, clamped to the quiz bounds."""
        self._require(QuizPhase.IN_PROGRESS)
        self._current_index = max(0, min(index, len(self._questions) - 1))

    def submit(self) -> List[QuestionResult]:
        """
        Grade every question in original order.

        Unanswered questions are graded with selected_option_index=-1 and
        are always incorrect. Submission never blocks on incompleteness.
        """
        self._require(QuizPhase.IN_PROGRESS)
        self._results = [
            QuestionResult.grade(question, self._answers.get(question.id))
            for question in self._questions
        ]
        self._is_completed = True

        summary = self.score()
        logger.info(f"Quiz graded: {summary.correct}/{summary.total} ({summary.percentage}%)")
        return list(self._results)

    # ------------------------------------------------------------------
    # Graded results
    # ------------------------------------------------------------------

    @property
    def results(self) -> List[QuestionResult]:
        self._require(QuizPhase.GRADED)
        return list(self._results)

    def result(self, question_id: int) -> QuestionResult:
        self._require(QuizPhase.GRADED)
        for result in self._results:
            if result.question_id == question_id:
                return result
        raise QuizStateError(f"Unknown question id: {question_id}")

    def attach_explanation(self, question_id: int, explanation: str) -> QuestionResult:
        """Replace the stored result with a copy carrying the explanation."""
        result = self.result(question_id)
        updated = result.model_copy(update={"explanation": explanation})
        self._results[self._results.index(result)] = updated
        return updated

    def score(self) -> ScoreSummary:
        self._require(QuizPhase.GRADED)
        total = len(self._results)
        correct = sum(1 for result in self._results if result.is_correct)
        percentage = int(correct * 100 / total + 0.5)
        return ScoreSummary(
            correct=correct,
            total=total,
            percentage=percentage,
            passed=percentage >= config.PASS_MARK_PERCENT,
        )

    def filter_results(self, result_filter: ResultFilter) -> List[QuestionResult]:
        results = self.results
        if result_filter == ResultFilter.CORRECT:
            return [result for result in results if result.is_correct]
        if result_filter == ResultFilter.INCORRECT:
            return [result for result in results if not result.is_correct]
        return results

    def default_result_filter(self) -> ResultFilter:
        """Show missed questions first when there are any."""
        if any(not result.is_correct for result in self.results):
            return ResultFilter.INCORRECT
        return ResultFilter.CORRECT

    def _require(self, *phases: QuizPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(phase.value for phase in phases)
            raise QuizStateError(f"Operation requires quiz phase {allowed}; current phase is {self.phase.value}")
