"""
Data models for exam sessions, generated content and rendered markup.
"""

from src.exam_tutor.models.exam_models import (
    ExamConfig,
    ExamType,
    ExplanationRequest,
    Question,
    QuestionResult,
    QuizState,
    ResultFilter,
    ScoreSummary,
    Subject,
    year_options,
)
from src.exam_tutor.models.generation_models import (
    GeneratedExplanations,
    GeneratedQuestion,
    GeneratedQuiz,
)
from src.exam_tutor.models.markup_models import (
    BlockKind,
    BlockNode,
    InlineKind,
    InlineSpan,
)

__all__ = [
    "BlockKind",
    "BlockNode",
    "ExamConfig",
    "ExamType",
    "ExplanationRequest",
    "GeneratedExplanations",
    "GeneratedQuestion",
    "GeneratedQuiz",
    "InlineKind",
    "InlineSpan",
    "Question",
    "QuestionResult",
    "QuizState",
    "ResultFilter",
    "ScoreSummary",
    "Subject",
    "year_options",
]
