"""
Pytest configuration and shared fixtures for Exam Tutor tests.

Provides a stub generation provider that returns canned fragments and
payloads, plus reusable configuration, question and Gemini client fixtures.
"""
import json
import asyncio
import tempfile
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from src.exam_tutor.core.exceptions import ProviderError
from src.exam_tutor.core.generator import ContentGenerator
from src.exam_tutor.core.provider import GenerationProvider
from src.exam_tutor.core.session import ExamSession
from src.exam_tutor.models.exam_models import ExamConfig, ExamType, Question, Subject


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


# ============================================================================
# STUB PROVIDER
# ============================================================================

class StubProvider(GenerationProvider):
    """
    Provider returning canned output.

    fragments: streamed text pieces; an Exception instance raises at that point.
    responses: structured payloads served in order (the last one repeats);
        an Exception instance is raised instead of returned.
    """

    def __init__(self, fragments=None, responses=None):
        self.fragments = list(fragments or [])
        self.responses = list(responses or [])
        self.prompts: List[str] = []
        self.schemas: List[Dict[str, Any]] = []
        self.temperatures: List[float] = []
        self.structured_calls = 0

    async def stream_text(self, prompt, temperature):
        self.prompts.append(prompt)
        self.temperatures.append(temperature)
        for fragment in self.fragments:
            await asyncio.sleep(0)
            if isinstance(fragment, Exception):
                raise fragment
            yield fragment

    async def generate_structured(self, prompt, schema, temperature):
        self.prompts.append(prompt)
        self.schemas.append(schema)
        self.temperatures.append(temperature)
        self.structured_calls += 1
        await asyncio.sleep(0)
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def make_quiz_payload(count: int = 20) -> List[Dict[str, Any]]:
    return [
        {
            "questionText": f"What is ${n} + {n}$?",
            "options": [str(n), str(2 * n), str(3 * n), str(4 * n)],
            "correctOptionIndex": n % 4,
        }
        for n in range(1, count + 1)
    ]


@pytest.fixture
def stub_provider_class():
    """The StubProvider class, for tests that need custom canned output."""
    return StubProvider


@pytest.fixture
def quiz_payload() -> List[Dict[str, Any]]:
    return make_quiz_payload()


@pytest.fixture
def quiz_json(quiz_payload) -> str:
    return json.dumps(quiz_payload)


@pytest.fixture
def quiz_provider(quiz_json) -> StubProvider:
    """Provider serving a valid 20-question quiz, then explanations."""
    return StubProvider(responses=[quiz_json, json.dumps(["Because $2 + 2 = 4$."])])


@pytest.fixture
def failing_provider() -> StubProvider:
    return StubProvider(
        fragments=[ProviderError("connection reset")],
        responses=[ProviderError("quota exceeded")],
    )


# ============================================================================
# MODEL FIXTURES
# ============================================================================

@pytest.fixture
def exam_config() -> ExamConfig:
    return ExamConfig(
        exam_type=ExamType.WAEC,
        year="2025",
        subject=Subject.MATHEMATICS,
        topic="",
    )


@pytest.fixture
def sample_question() -> Question:
    return Question(
        id=1,
        question_text="Solve for $x$ in $2x = 10$",
        options=("2", "5", "10", "20"),
        correct_option_index=1,
    )


@pytest.fixture
def sample_questions(quiz_payload) -> List[Question]:
    return [
        Question(
            id=index + 1,
            question_text=item["questionText"],
            options=tuple(item["options"]),
            correct_option_index=item["correctOptionIndex"],
        )
        for index, item in enumerate(quiz_payload)
    ]


# ============================================================================
# PIPELINE AND SESSION FIXTURES
# ============================================================================

@pytest.fixture
def generator(quiz_provider) -> ContentGenerator:
    return ContentGenerator(quiz_provider)


@pytest.fixture
def session(generator, exam_config) -> ExamSession:
    return ExamSession(generator, exam_config)


# ============================================================================
# ENVIRONMENT AND GEMINI FIXTURES
# ============================================================================

@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    test_api_key = "test-gemini-api-key-12345"
    monkeypatch.setenv("GEMINI_API_KEY", test_api_key)
    return {"GEMINI_API_KEY": test_api_key}


@pytest.fixture
def clean_env(monkeypatch):
    """Clean environment with no API key set."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_chunks():
    """Streamed Gemini chunks, including an empty keep-alive chunk."""
    chunks = []
    for text in ["# Algebra\n", None, "Solve $x^2 = 4$"]:
        chunk = MagicMock()
        chunk.text = text
        chunks.append(chunk)
    return chunks
