"""
Test that all modules can be imported correctly.
"""


def test_import_models():
    """Test that model imports work."""
    from src.exam_tutor.models import (
        BlockNode, ExamConfig, GeneratedQuiz, Question, QuestionResult
    )
    assert BlockNode is not None
    assert ExamConfig is not None
    assert GeneratedQuiz is not None
    assert Question is not None
    assert QuestionResult is not None


def test_import_core():
    """Test that core module imports work."""
    from src.exam_tutor.core import (
        ContentGenerator, ExamSession, ExplanationCache, GeminiProvider, QuizSession, parse
    )

    assert ContentGenerator is not None
    assert ExamSession is not None
    assert ExplanationCache is not None
    assert GeminiProvider is not None
    assert QuizSession is not None
    assert parse is not None


def test_import_config():
    """Test that config imports work."""
    from src.exam_tutor import config

    assert config.MODEL_NAME is not None
    assert config.QUIZ_SIZE == 20
    assert "{exam_type}" in config.QUIZ_PROMPT_TEMPLATE


def test_import_utils():
    """Test that utils imports work."""
    from src.exam_tutor.utils import load_env, setup_logging

    assert load_env is not None
    assert setup_logging is not None


def test_package_exports():
    import src.exam_tutor as exam_tutor

    assert exam_tutor.__version__ == "1.0.0"
    assert set(exam_tutor.__all__) <= set(dir(exam_tutor))
