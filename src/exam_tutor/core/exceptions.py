"""
Custom exceptions for the Exam Tutor session engine.

Provider and schema failures are internal; tutorial and quiz generation
surface them to callers as a single GenerationFailure.
"""
from typing import Optional


class ExamTutorError(Exception):
    """Base exception for all Exam Tutor errors."""
    pass


class ProviderError(ExamTutorError):
    """Raised when the generation provider fails (transport, auth, rate limit)."""
    pass


class SchemaError(ExamTutorError):
    """Raised when provider output does not match the declared shape."""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        self.raw_text = raw_text
        super().__init__(message)


class GenerationFailure(ExamTutorError):
    """User-facing failure of tutorial or quiz generation. Recovered by retrying."""

    def __init__(self, message: str, operation: str):
        self.operation = operation
        super().__init__(message)


class QuizStateError(ExamTutorError):
    """Raised when a quiz transition is invoked in the wrong state."""
    pass


class SessionBusyError(ExamTutorError):
    """Raised when a generation is requested while a quiz request is outstanding."""
    pass
