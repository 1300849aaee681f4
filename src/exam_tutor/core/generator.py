"""
Exam content generation pipeline.

Builds prompts from an exam configuration, calls the generation provider
and validates what comes back:

- Tutorials are streamed fragment by fragment
- Quizzes are requested as structured JSON and re-mapped into Question objects
- Explanations degrade to a fallback text instead of raising
"""
import re
import time
import uuid
import logging
from typing import AsyncIterator, Callable, List, Optional

from pydantic import ValidationError

from src.exam_tutor import config
from src.exam_tutor.core.exceptions import GenerationFailure, ProviderError, SchemaError
from src.exam_tutor.core.provider import GenerationProvider
from src.exam_tutor.models.exam_models import ExamConfig, ExplanationRequest, Question
from src.exam_tutor.models.generation_models import GeneratedExplanations, GeneratedQuiz

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def freshness_token() -> str:
    """Return a call-unique token that discourages templated provider answers."""
    return f"{time.time_ns()}-{uuid.uuid4().hex[:8]}"


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapped around a JSON payload."""
    cleaned = _LEADING_FENCE.sub("", text.strip())
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


class ContentGenerator:
    """Generate tutorials, quizzes and explanations for an exam configuration."""

    def __init__(
        self,
        provider: GenerationProvider,
        num_questions: Optional[int] = None,
        token_factory: Optional[Callable[[], str]] = None
    ):
        """
        Initialize the content generator.

        Args:
            provider: Generation capability used for every request.
            num_questions: Questions per quiz. If not provided, uses config.QUIZ_SIZE
            token_factory: Source of freshness tokens. Defaults to freshness_token.
        """
        self.provider = provider
        self.num_questions = num_questions or config.QUIZ_SIZE
        self.token_factory = token_factory or freshness_token

    # ------------------------------------------------------------------
    # Prompt construction
    # ------------------------------------------------------------------

    def build_tutorial_prompt(self, exam_config: ExamConfig) -> str:
        return config.TUTORIAL_PROMPT_TEMPLATE.format(
            exam_type=exam_config.exam_type.value,
            subject=exam_config.subject.value,
            topic=exam_config.topic.strip() or config.DEFAULT_TUTORIAL_TOPIC,
            year=exam_config.year,
            seed=self.token_factory(),
            math_rule=config.MATH_FORMAT_RULE.format(
                example="Solve for $x$ in $x^2 + 2x = 0$"),
        )

    def build_quiz_prompt(self, exam_config: ExamConfig) -> str:
        return config.QUIZ_PROMPT_TEMPLATE.format(
            num_questions=self.num_questions,
            num_options=config.OPTIONS_PER_QUESTION,
            exam_type=exam_config.exam_type.value,
            subject=exam_config.subject.value,
            topic=exam_config.topic.strip() or config.DEFAULT_QUIZ_TOPIC,
            year=exam_config.year,
            seed=self.token_factory(),
            math_rule=config.MATH_FORMAT_RULE.format(
                example="Simplify $\\frac{1}{2} + \\frac{3}{4}$"),
        )

    def build_explanation_prompt(
        self,
        exam_config: ExamConfig,
        failures: List[ExplanationRequest]
    ) -> str:
        failures_text = "\n\n".join(
            f"Question: {failure.question_text}\n"
            f"Student Selected: {failure.selected_text}\n"
            f"Correct Answer: {failure.correct_text}"
            for failure in failures
        )
        return config.EXPLANATION_PROMPT_TEMPLATE.format(
            exam_type=exam_config.exam_type.value,
            subject=exam_config.subject.value,
            failures=failures_text,
            math_rule=config.MATH_FORMAT_RULE.format(
                example="Therefore, $x = 5$"),
        )

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------

    def parse_quiz(self, raw_text: str) -> List[Question]:
        """
        Validate a quiz payload and assign sequential ids.

        Args:
            raw_text: Provider response, possibly wrapped in a code fence

        Returns:
            Questions in provider order with ids 1..n

        Raises:
            SchemaError: If the payload is not a list of exactly num_questions valid items
        """
        cleaned = strip_code_fences(raw_text)
        try:
            generated = GeneratedQuiz.model_validate_json(cleaned or "[]").root
        except ValidationError as e:
            logger.error(f"Quiz payload failed validation: {e.error_count()} error(s)")
            logger.debug(f"Failed payload: {cleaned[:300]}")
            raise SchemaError(f"Quiz payload does not match the expected shape: {e}", raw_text=raw_text) from e

        if len(generated) != self.num_questions:
            raise SchemaError(
                f"Expected {self.num_questions} questions, received {len(generated)}",
                raw_text=raw_text
            )

        return [
            Question(
                id=index + 1,
                question_text=item.question_text,
                options=tuple(item.options),
                correct_option_index=item.correct_option_index,
            )
            for index, item in enumerate(generated)
        ]

    def parse_explanations(self, raw_text: str, expected: int) -> List[str]:
        cleaned = strip_code_fences(raw_text)
        try:
            explanations = GeneratedExplanations.model_validate_json(cleaned or "[]").root
        except ValidationError as e:
            raise SchemaError(f"Explanation payload does not match the expected shape: {e}", raw_text=raw_text) from e

        if len(explanations) != expected:
            raise SchemaError(
                f"Expected {expected} explanations, received {len(explanations)}",
                raw_text=raw_text
            )
        return explanations

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def generate_tutorial(self, exam_config: ExamConfig) -> AsyncIterator[str]:
        """
        Stream a freshly generated tutorial.

        Fragments are yielded in arrival order. Callers accumulate them;
        text already yielded stays with the caller if the stream fails.

        Raises:
            GenerationFailure: If the provider fails mid-stream
        """
        prompt = self.build_tutorial_prompt(exam_config)
        logger.info(f"Generating {exam_config.subject.value} tutorial for {exam_config.exam_type.value}")

        try:
            async for fragment in self.provider.stream_text(
                prompt, temperature=config.TUTORIAL_TEMPERATURE
            ):
                if fragment:
                    yield fragment
        except ProviderError as e:
            logger.error(f"Tutorial stream error: {e}")
            raise GenerationFailure("Could not generate tutorial stream.", operation="tutorial") from e

    async def generate_quiz(self, exam_config: ExamConfig) -> List[Question]:
        """
        Generate a complete quiz.

        Raises:
            GenerationFailure: If the provider fails or the payload is invalid.
                No partial quiz is ever returned.
        """
        prompt = self.build_quiz_prompt(exam_config)
        logger.info(
            f"Generating {self.num_questions} {exam_config.exam_type.value} questions "
            f"for {exam_config.subject.value}"
        )

        try:
            raw_text = await self.provider.generate_structured(
                prompt,
                schema=GeneratedQuiz.model_json_schema(),
                temperature=config.QUIZ_TEMPERATURE
            )
            questions = self.parse_quiz(raw_text)
        except (ProviderError, SchemaError) as e:
            logger.error(f"Quiz generation error: {e}")
            raise GenerationFailure("Could not generate quiz. Please try again.", operation="quiz") from e

        logger.info(f"Generated quiz with {len(questions)} questions")
        return questions

    async def generate_explanations(
        self,
        exam_config: ExamConfig,
        failures: List[ExplanationRequest]
    ) -> List[str]:
        """
        Explain missed questions, one explanation per request in the same order.

        Never raises: provider or schema failures yield
        config.FALLBACK_EXPLANATION for every requested item.
        """
        if not failures:
            return []

        prompt = self.build_explanation_prompt(exam_config, failures)
        logger.info(f"Generating explanations for {len(failures)} question(s)")

        try:
            raw_text = await self.provider.generate_structured(
                prompt,
                schema=GeneratedExplanations.model_json_schema(),
                temperature=config.EXPLANATION_TEMPERATURE
            )
            return self.parse_explanations(raw_text, expected=len(failures))
        except (ProviderError, SchemaError) as e:
            logger.error(f"Explanation generation error: {e}")
            return [config.FALLBACK_EXPLANATION for _ in failures]
