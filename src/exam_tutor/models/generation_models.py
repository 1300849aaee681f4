"""
Pydantic models describing the structured output requested from the provider.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from src.exam_tutor import config


class GeneratedQuestion(BaseModel):
    """One question as returned by the provider, before ids are assigned."""
    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(
        alias="questionText",
        min_length=1,
        description="The question text")
    options: List[str] = Field(
        min_length=config.OPTIONS_PER_QUESTION,
        max_length=config.OPTIONS_PER_QUESTION,
        description="List of 4 answer options"
    )
    correct_option_index: int = Field(
        alias="correctOptionIndex",
        ge=0,
        le=config.OPTIONS_PER_QUESTION - 1,
        description="Index of the correct answer (0-3)")

    @field_validator("question_text")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question text must not be blank")
        return value


class GeneratedQuiz(RootModel[List[GeneratedQuestion]]):
    """Array of generated questions in provider order."""


class GeneratedExplanations(RootModel[List[str]]):
    """Array of explanations, one per requested question."""
