"""
Exam Tutor Session Engine.

A Python package that turns an exam configuration (exam body, year,
subject, topic) into generated study tutorials and multiple-choice
quizzes, grades quiz sessions and explains missed questions on demand.
"""

__version__ = "1.0.0"
__author__ = "Exam Tutor Development Team"

from src.exam_tutor.core.generator import ContentGenerator
from src.exam_tutor.core.markup import parse
from src.exam_tutor.core.quiz_session import QuizSession
from src.exam_tutor.core.explanation_cache import ExplanationCache
from src.exam_tutor.core.session import ExamSession

__all__ = [
    "ContentGenerator",
    "ExamSession",
    "ExplanationCache",
    "QuizSession",
    "parse",
]
