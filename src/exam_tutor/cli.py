"""
Terminal front end for the Exam Tutor session engine.

Usage:
    exam-tutor tutorial --exam WAEC --year 2025 --subject Mathematics --topic "Quadratic equations"
    exam-tutor quiz --exam NECO --subject Physics
"""
import os
import sys
import asyncio
import argparse
import logging
from typing import Callable, List, Optional

from src.exam_tutor import config
from src.exam_tutor.core.exceptions import GenerationFailure, QuizStateError
from src.exam_tutor.core.generator import ContentGenerator
from src.exam_tutor.core.markup import parse, render_node, render_text
from src.exam_tutor.core.provider import GeminiProvider
from src.exam_tutor.core.session import ExamSession
from src.exam_tutor.models.exam_models import ExamConfig, ExamType, Subject, year_options
from src.exam_tutor.utils.env_loader import load_env
from src.exam_tutor.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

OPTION_LETTERS = "ABCD"

QUIZ_HELP = """Commands:
  a-d       choose an option
  n / p     next / previous question
  g <num>   go to question number
  s         submit the quiz
  q         quit without submitting"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exam-tutor",
        description="Generate exam tutorials and practice quizzes"
    )
    parser.add_argument("mode", choices=["tutorial", "quiz"], help="What to generate")
    parser.add_argument(
        "--exam",
        choices=[exam.value for exam in ExamType],
        default=ExamType.WAEC.value,
        help="Examination body (default: WAEC)"
    )
    parser.add_argument(
        "--year",
        default=str(config.LATEST_YEAR),
        help=f"Target year style, usually one of {year_options()[-1]}-{year_options()[0]}"
    )
    parser.add_argument(
        "--subject",
        choices=[subject.value for subject in Subject],
        default=Subject.MATHEMATICS.value,
        help="Subject (default: Mathematics)"
    )
    parser.add_argument("--topic", default="", help="Topic to focus on (default: general review)")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    return parser


async def run_tutorial(session: ExamSession) -> None:
    """Print the tutorial line by line as fragments arrive."""
    print(f"\nPreparing {session.config.subject.value} Masterclass...\n")
    printed = 0
    nodes = []
    try:
        async for nodes in session.stream_tutorial():
            # The last node may still be growing; only completed lines are printed.
            for node in nodes[printed:-1]:
                print(render_node(node))
            printed = max(printed, len(nodes) - 1)
    finally:
        for node in nodes[printed:]:
            print(render_node(node))


def print_question(session: ExamSession) -> None:
    quiz = session.quiz
    question = quiz.current_question
    selected = quiz.selected_option(question.id)

    print(f"\nQuestion {quiz.current_index + 1} of {len(quiz.questions)}"
          f"  ({quiz.answered_count} answered)")
    print(render_text(parse(question.question_text)))
    for index, option in enumerate(question.options):
        marker = ">" if index == selected else " "
        print(f" {marker} {OPTION_LETTERS[index]}. {render_text(parse(option))}")


def confirm_submit(session: ExamSession, read: Callable[[str], str]) -> bool:
    missing = session.quiz.unanswered_count
    if missing == 0:
        print("You've answered every question.")
        return read("Submit now? [y/N] ").strip().lower() == "y"
    print(f"You have {missing} unanswered question(s). They will be marked as incorrect.")
    return read("Submit anyway? [y/N] ").strip().lower() == "y"


def run_quiz_loop(session: ExamSession, read: Callable[[str], str] = input) -> bool:
    """Drive an in-progress quiz until it is submitted. Returns False if the user quits."""
    quiz = session.quiz
    print(QUIZ_HELP)

    while True:
        print_question(session)
        command = read("> ").strip().lower()

        if len(command) == 1 and command in OPTION_LETTERS.lower():
            quiz.select_option(quiz.current_question.id, OPTION_LETTERS.lower().index(command))
            quiz.advance()
        elif command == "n":
            quiz.advance()
        elif command == "p":
            quiz.retreat()
        elif command.startswith("g "):
            try:
                quiz.go_to(int(command[2:]) - 1)
            except ValueError:
                print("Usage: g <question number>")
        elif command == "s":
            if confirm_submit(session, read):
                quiz.submit()
                return True
        elif command == "q":
            return False
        else:
            print(QUIZ_HELP)


def print_results(session: ExamSession) -> None:
    quiz = session.quiz
    summary = quiz.score()
    verdict = "Passed" if summary.passed else "Keep practicing"

    print(f"\nYou scored {summary.percentage}% in {session.quiz_config.subject.value} "
          f"({summary.correct}/{summary.total}). {verdict}!")

    result_filter = quiz.default_result_filter()
    print(f"\n{result_filter.value.title()} answers:")
    for result in quiz.filter_results(result_filter):
        status = "correct" if result.is_correct else "incorrect"
        print(f"  {result.question_id:>2}. [{status}] {render_text(parse(result.question_text))}")


async def run_quiz(session: ExamSession, read: Callable[[str], str] = input) -> None:
    """Run a quiz end to end. Blocking reads run in a worker thread, off the event loop."""
    print(f"\nGenerating Unique {session.config.exam_type.value} Questions...\n")
    await session.start_quiz()

    if not await asyncio.to_thread(run_quiz_loop, session, read):
        print("Quiz abandoned.")
        return

    print_results(session)
    while True:
        choice = (await asyncio.to_thread(read, "\nQuestion number to explain (blank to finish): ")).strip()
        if not choice:
            return
        try:
            question_id = int(choice)
            session.quiz.question(question_id)
        except (ValueError, QuizStateError):
            print(f"Not a question number: {choice}")
            continue

        print("\nAnalyzing...\n")
        explanation = await session.explain(question_id)
        print(render_text(parse(explanation)))


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the exam-tutor command."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, json_format=args.json_logs)
    load_env()

    if not os.environ.get(config.API_KEY_ENV_VAR):
        print(f"ERROR: {config.API_KEY_ENV_VAR} environment variable not set.")
        print(f"Please set it using: export {config.API_KEY_ENV_VAR}='your-api-key'")
        return 1

    exam_config = ExamConfig(
        exam_type=ExamType(args.exam),
        year=args.year,
        subject=Subject(args.subject),
        topic=args.topic,
    )
    logger.info(f"Starting {args.mode} session: {exam_config.model_dump_json()}")
    session = ExamSession(ContentGenerator(GeminiProvider()), exam_config)

    try:
        if args.mode == "tutorial":
            asyncio.run(run_tutorial(session))
        else:
            asyncio.run(run_quiz(session))
    except GenerationFailure as e:
        print(f"\n✗ ERROR: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
