"""
Pydantic models for exam configuration, quiz questions and graded results.
"""
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from src.exam_tutor import config


class ExamType(str, Enum):
    """Examination bodies a session can target."""
    WAEC = "WAEC"
    NECO = "NECO"
    GCE = "GCE"

    @property
    def label(self) -> str:
        return _EXAM_LABELS[self]


_EXAM_LABELS = {
    ExamType.WAEC: "WAEC (West Africa)",
    ExamType.NECO: "NECO (National)",
    ExamType.GCE: "GCE (Private)",
}


class Subject(str, Enum):
    """Subjects offered for tutorials and quizzes."""
    MATHEMATICS = "Mathematics"
    ENGLISH_LANGUAGE = "English Language"
    BIOLOGY = "Biology"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    GOVERNMENT = "Government"
    ECONOMICS = "Economics"
    CIVIC_EDUCATION = "Civic Education"
    LITERATURE_IN_ENGLISH = "Literature in English"


def year_options(latest: int = config.LATEST_YEAR, window: int = config.YEAR_WINDOW) -> List[str]:
    """Conventional exam years offered to the learner, newest first."""
    return [str(latest - offset) for offset in range(window)]


class ExamConfig(BaseModel):
    """Exam context chosen by the learner at session start."""
    model_config = ConfigDict(frozen=True)

    exam_type: ExamType = Field(description="Examination body")
    year: str = Field(description="Target year style, any string is accepted")
    subject: Subject = Field(description="Subject under study")
    topic: str = Field(
        default="",
        description="Free-text topic, empty means a general review")

    def with_changes(self, **changes) -> "ExamConfig":
        """Return a validated copy with the given fields replaced."""
        return ExamConfig.model_validate({**self.model_dump(), **changes})


class Question(BaseModel):
    """A single multiple-choice question in a quiz session."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0, description="1-based position in the generated batch")
    question_text: str = Field(min_length=1, description="The question text")
    options: Tuple[str, ...] = Field(
        min_length=config.OPTIONS_PER_QUESTION,
        max_length=config.OPTIONS_PER_QUESTION,
        description="List of 4 answer options"
    )
    correct_option_index: int = Field(
        ge=0,
        le=config.OPTIONS_PER_QUESTION - 1,
        description="Index of the correct option (0-3)")


class QuestionResult(BaseModel):
    """Graded outcome of one question. Only the explanation is ever attached later."""
    model_config = ConfigDict(frozen=True)
    question_id: int
    question_text: str = Field(description="Snapshot of the question text at grading time")
    selected_option_index: int = Field(
        ge=-1,
        le=config.OPTIONS_PER_QUESTION - 1,
        description="Selected option, -1 when the question was skipped")
    correct_option_index: int
    is_correct: bool
    explanation: Optional[str] = None

    @classmethod
    def grade(cls, question: Question, selected_option_index: Optional[int]) -> "QuestionResult":
        selected = -1 if selected_option_index is None else selected_option_index
        return cls(
            question_id=question.id,
            question_text=question.question_text,
            selected_option_index=selected,
            correct_option_index=question.correct_option_index,
            is_correct=selected == question.correct_option_index,
        )


class QuizState(BaseModel):
    """Read-only snapshot of a quiz session handed to the presentation layer."""
    model_config = ConfigDict(frozen=True)

    questions: List[Question] = Field(default_factory=list)
    current_index: int = 0
    answers: Dict[int, int] = Field(
        default_factory=dict,
        description="Mapping from question id to the selected option index")
    is_completed: bool = False


class ExplanationRequest(BaseModel):
    """A missed question packaged for explanation generation."""
    question_text: str
    selected_text: str
    correct_text: str


class ScoreSummary(BaseModel):
    """Aggregate score of a graded quiz."""
    correct: int
    total: int
    percentage: int = Field(ge=0, le=100)
    passed: bool


class ResultFilter(str, Enum):
    """Views over the graded results."""
    ALL = "ALL"
    INCORRECT = "INCORRECT"
    CORRECT = "CORRECT"
