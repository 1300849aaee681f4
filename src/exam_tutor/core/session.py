"""
Exam session: the explicit state object owned by a presentation layer.

Holds the current exam configuration, the streamed tutorial text, the
quiz state machine and the explanation cache, and coordinates the
content pipeline with them.
"""
import logging
from typing import AsyncIterator, List, Optional

from src.exam_tutor import config
from src.exam_tutor.core.exceptions import SessionBusyError
from src.exam_tutor.core.explanation_cache import ExplanationCache
from src.exam_tutor.core.generator import ContentGenerator
from src.exam_tutor.core.markup import parse
from src.exam_tutor.core.quiz_session import QuizPhase, QuizSession
from src.exam_tutor.models.exam_models import (
    ExamConfig,
    ExamType,
    ExplanationRequest,
    Question,
    Subject,
)
from src.exam_tutor.models.markup_models import BlockNode

logger = logging.getLogger(__name__)


def default_exam_config() -> ExamConfig:
    return ExamConfig(
        exam_type=ExamType.WAEC,
        year=str(config.LATEST_YEAR),
        subject=Subject.MATHEMATICS,
        topic="",
    )


class ExamSession:
    """One learner's session: configuration, tutorial, quiz and explanations."""

    def __init__(
        self,
        generator: ContentGenerator,
        exam_config: Optional[ExamConfig] = None
    ):
        self.generator = generator
        self.config = exam_config or default_exam_config()
        self.quiz = QuizSession()
        self.explanations = ExplanationCache()
        self.tutorial_text = ""
        self.quiz_config: Optional[ExamConfig] = None
        self._generation = 0
        self._quiz_epoch = 0
        self._quiz_pending = False

    def configure(self, **changes) -> ExamConfig:
        """Replace configuration fields, swapping in a new immutable config."""
        self.config = self.config.with_changes(**changes)
        return self.config

    @property
    def is_generating(self) -> bool:
        return self._quiz_pending

    @property
    def tutorial_nodes(self) -> List[BlockNode]:
        return parse(self.tutorial_text)

    def _begin_generation(self) -> int:
        # A pending quiz holds the single generation slot; a running tutorial
        # stream does not and is superseded by the new request.
        if self._quiz_pending:
            raise SessionBusyError("A quiz generation request is already outstanding")
        self._generation += 1
        return self._generation

    async def stream_tutorial(self) -> AsyncIterator[List[BlockNode]]:
        """
        Stream a new tutorial, yielding the re-parsed nodes after each fragment.

        Fragments are appended in arrival order. Once another generation
        starts, the remaining fragments of this stream are ignored. On
        failure the text accumulated so far is kept and GenerationFailure
        propagates.
        """
        generation = self._begin_generation()
        self.tutorial_text = ""
        exam_config = self.config

        stream = self.generator.generate_tutorial(exam_config)
        try:
            async for fragment in stream:
                if generation != self._generation:
                    logger.info("Tutorial stream superseded, ignoring remaining fragments")
                    break
                self.tutorial_text += fragment
                yield parse(self.tutorial_text)
        finally:
            await stream.aclose()

    async def start_quiz(self) -> List[Question]:
        """
        Generate and load a new quiz, discarding any previous quiz and explanations.

        Raises:
            GenerationFailure: If generation fails. The previous quiz is left untouched.
            SessionBusyError: If a quiz request is already outstanding.
        """
        self._begin_generation()
        exam_config = self.config
        self._quiz_pending = True
        try:
            questions = await self.generator.generate_quiz(exam_config)
        finally:
            self._quiz_pending = False

        if self.quiz.phase == QuizPhase.IN_PROGRESS:
            logger.info("Abandoning in-progress quiz for a new one")
            self.quiz.abandon()
        self.quiz.load(questions)
        self.explanations.clear()
        self._quiz_epoch += 1
        self.quiz_config = exam_config
        return questions

    def explanation_request(self, question_id: int) -> ExplanationRequest:
        """Package a graded question for explanation generation."""
        result = self.quiz.result(question_id)
        question = self.quiz.question(question_id)

        if result.selected_option_index == -1:
            selected_text = config.SKIPPED_ANSWER_TEXT
        else:
            selected_text = _option_text(question, result.selected_option_index)

        return ExplanationRequest(
            question_text=result.question_text,
            selected_text=selected_text,
            correct_text=_option_text(question, result.correct_option_index),
        )

    async def explain(self, question_id: int) -> str:
        """
        Return the explanation for a graded question, generating it at most once.

        The text is attached to the question's result unless a new quiz
        was loaded while it was being generated.
        """
        request = self.explanation_request(question_id)
        exam_config = self.quiz_config or self.config
        epoch = self._quiz_epoch

        async def generate() -> str:
            explanations = await self.generator.generate_explanations(exam_config, [request])
            return explanations[0] if explanations else config.FALLBACK_EXPLANATION

        text = await self.explanations.ensure(question_id, generate)

        if epoch == self._quiz_epoch:
            self.quiz.attach_explanation(question_id, text)
        return text


def _option_text(question: Question, index: int) -> str:
    if 0 <= index < len(question.options):
        return question.options[index]
    return config.UNKNOWN_OPTION_TEXT
