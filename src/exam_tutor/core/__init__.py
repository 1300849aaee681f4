"""
Core functionality: content generation, markup parsing, quiz state and explanations.
"""

from src.exam_tutor.core.exceptions import (
    ExamTutorError,
    GenerationFailure,
    ProviderError,
    QuizStateError,
    SchemaError,
    SessionBusyError,
)
from src.exam_tutor.core.explanation_cache import ExplanationCache, ExplanationStatus
from src.exam_tutor.core.generator import ContentGenerator
from src.exam_tutor.core.markup import parse, render_text, tokenize_inline
from src.exam_tutor.core.provider import GeminiProvider, GenerationProvider
from src.exam_tutor.core.quiz_session import QuizPhase, QuizSession
from src.exam_tutor.core.session import ExamSession

__all__ = [
    "ContentGenerator",
    "ExamSession",
    "ExamTutorError",
    "ExplanationCache",
    "ExplanationStatus",
    "GeminiProvider",
    "GenerationFailure",
    "GenerationProvider",
    "ProviderError",
    "QuizPhase",
    "QuizSession",
    "QuizStateError",
    "SchemaError",
    "SessionBusyError",
    "parse",
    "render_text",
    "tokenize_inline",
]
