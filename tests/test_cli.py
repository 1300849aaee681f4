"""
Tests for the terminal front end (cli.py).

Tests cover:
- Argument parsing
- Scripted quiz navigation, submission and explanations
- Entry point behavior with and without an API key
"""
import asyncio
import threading
import pytest

from src.exam_tutor import cli
from src.exam_tutor.core.exceptions import ProviderError
from src.exam_tutor.core.quiz_session import QuizPhase


def scripted(*answers):
    """Stand-in for input() that replays the given answers."""
    replies = iter(answers)
    return lambda prompt="": next(replies)


@pytest.fixture
def started_session(session):
    asyncio.run(session.start_quiz())
    return session


@pytest.fixture
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


@pytest.mark.unit
class TestParser:
    """Test command line parsing."""

    def test_defaults(self):
        args = cli.build_parser().parse_args(["quiz"])

        assert args.mode == "quiz"
        assert args.exam == "WAEC"
        assert args.subject == "Mathematics"
        assert args.topic == ""
        assert args.json_logs is False

    def test_rejects_unknown_subject(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["quiz", "--subject", "Astrology"])


@pytest.mark.unit
class TestQuizLoop:
    """Test driving a quiz with scripted input."""

    def test_answer_navigate_and_submit(self, started_session):
        submitted = cli.run_quiz_loop(started_session, scripted("b", "g 5", "a", "p", "s", "y"))

        quiz = started_session.quiz
        assert submitted is True
        assert quiz.phase == QuizPhase.GRADED
        assert quiz.result(1).is_correct is True
        assert quiz.result(5).selected_option_index == 0
        assert quiz.result(5).is_correct is False

    def test_declined_confirmation_keeps_quiz_open(self, started_session):
        submitted = cli.run_quiz_loop(started_session, scripted("s", "n", "q"))

        assert submitted is False
        assert started_session.quiz.phase == QuizPhase.IN_PROGRESS

    def test_warns_about_unanswered_questions(self, started_session, capsys):
        cli.run_quiz_loop(started_session, scripted("a", "s", "y"))

        assert "You have 19 unanswered question(s)" in capsys.readouterr().out

    def test_bad_go_to_is_reported(self, started_session, capsys):
        cli.run_quiz_loop(started_session, scripted("g x", "q"))

        assert "Usage: g <question number>" in capsys.readouterr().out
        assert started_session.quiz.current_index == 0

    @pytest.mark.asyncio
    async def test_run_quiz_explains_on_request(self, session, capsys):
        await cli.run_quiz(session, scripted("s", "y", "abc", "99", "2", ""))

        out = capsys.readouterr().out
        assert "You scored 0% in Mathematics (0/20). Keep practicing!" in out
        assert "Not a question number: abc" in out
        assert "Not a question number: 99" in out
        assert "Because `2 + 2 = 4`." in out
        assert session.quiz.result(2).explanation == "Because $2 + 2 = 4$."

    @pytest.mark.asyncio
    async def test_run_quiz_reads_input_off_the_event_loop(self, session):
        loop_thread = threading.get_ident()
        reader_threads = []
        answers = iter(["q"])

        def read(prompt=""):
            reader_threads.append(threading.get_ident())
            return next(answers)

        await cli.run_quiz(session, read)

        assert reader_threads
        assert loop_thread not in reader_threads


@pytest.mark.unit
class TestMain:
    """Test the exam-tutor entry point."""

    def test_missing_api_key(self, clean_env, temp_dir, monkeypatch, capsys, no_logging_setup):
        monkeypatch.chdir(temp_dir)

        assert cli.main(["tutorial"]) == 1
        assert "GEMINI_API_KEY environment variable not set" in capsys.readouterr().out

    def test_tutorial_prints_rendered_lines(
        self, mock_env_vars, temp_dir, monkeypatch, capsys, no_logging_setup, stub_provider_class
    ):
        monkeypatch.chdir(temp_dir)
        provider = stub_provider_class(fragments=["# Title\nBody ", "with $x$"])
        monkeypatch.setattr(cli, "GeminiProvider", lambda: provider)

        assert cli.main(["tutorial", "--topic", "Indices"]) == 0

        out = capsys.readouterr().out
        assert "Title\n=====" in out
        assert "Body with `x`" in out
        assert "Topic: Indices" in provider.prompts[0]

    def test_generation_failure_exit_code(
        self, mock_env_vars, temp_dir, monkeypatch, capsys, no_logging_setup, failing_provider
    ):
        monkeypatch.chdir(temp_dir)
        monkeypatch.setattr(cli, "GeminiProvider", lambda: failing_provider)

        assert cli.main(["tutorial"]) == 1
        assert "ERROR" in capsys.readouterr().out
