import argparse
import sys
from pathlib import Path
from typing import Callable

from api.config import QUESTIONS_SOURCE, SESSIONS_PATH, TEST_QUESTION_COUNT
from core.errors import EmptyBankError, LoadError
from core.logging_setup import setup_console_logging
from models import CompletionAction, Question, QuestionView, SessionReport
from question_bank import load_questions
from quiz_engine import QuizEngine
from session_manager import SessionManager
from session_store import JsonFileSessionStore, MemorySessionStore

COMMANDS_HELP = "Commands: :p previous, :n skip, :q save and quit"

ACTION_LABELS = {
    CompletionAction.TAKE_TEST_AGAIN: "Take test again",
    CompletionAction.SWITCH_TO_PRACTICE: "Switch to practice mode",
    CompletionAction.PRACTICE_AGAIN: "Practice again",
}


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive quiz in the terminal")
    parser.add_argument(
        "--questions",
        default=QUESTIONS_SOURCE,
        help="Question bank JSON file or http(s) URL",
    )
    parser.add_argument(
        "--sessions",
        type=Path,
        default=SESSIONS_PATH,
        help="File where session progress is kept",
    )
    parser.add_argument(
        "--test",
        nargs="?",
        type=positive_int,
        const=TEST_QUESTION_COUNT,
        default=None,
        metavar="N",
        help="Start a test of N questions instead of a practice session",
    )
    parser.add_argument(
        "--new",
        action="store_true",
        help="Start a new session even if an unfinished one exists",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Keep progress in memory only",
    )
    return parser.parse_args(argv)


def resolve_answer(question: Question, raw: str) -> str:
    """Map "2", "b" or the literal text to an answer of a choice question."""
    text = raw.strip()
    if question.is_free_text or not text:
        return text
    if text.isdigit():
        number = int(text)
        if 1 <= number <= len(question.answers):
            return question.answers[number - 1]
    if len(text) == 1 and text.isalpha():
        index = ord(text.lower()) - ord("a")
        if 0 <= index < len(question.answers):
            return question.answers[index]
    return text


def format_question(view: QuestionView, total: int, score: int) -> str:
    lines = [
        "",
        f"Question {view.position + 1} of {total}    Score: {score}/{total}",
        view.question.question,
    ]
    for index, answer in enumerate(view.question.answers):
        lines.append(f"  {chr(97 + index)}) {answer}")
    if view.question.is_free_text:
        lines.append("  (type your answer)")
    return "\n".join(lines)


def format_report(report: SessionReport, show_missed: bool = True) -> str:
    lines = [
        "",
        "Session type:        " + ("Test" if report.is_test else "Practice"),
        f"Questions completed: {report.total_questions}",
        f"Correct answers:     {report.correct}",
        f"Wrong answers:       {report.wrong}",
        f"Final score:         {report.percentage:.1f}%",
    ]
    if report.unanswered:
        lines.insert(5, f"Unanswered:          {report.unanswered}")
    if show_missed and report.missed:
        lines.append("")
        lines.append("Review mistakes:")
        for index, item in enumerate(report.missed, start=1):
            lines.append(f"{index}. {item.question}")
            lines.append(f"   your answer:    {item.given_answer}")
            lines.append(f"   correct answer: {item.correct_answer}")
    return "\n".join(lines)


def play(
    manager: SessionManager,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> bool:
    """Run the current session until it completes; False if the user quit."""
    write(COMMANDS_HELP)
    while True:
        session = manager.require_current()
        if session.completed:
            return True
        view = manager.view()
        write(format_question(view, session.total_questions, session.score))
        try:
            raw = read("> ")
        except EOFError:
            return False

        command = raw.strip().lower()
        if command in (":q", ":quit"):
            return False
        if command in (":p", ":prev"):
            manager.previous()
            continue
        if command in (":n", ":next"):
            manager.next()
            continue

        result = manager.submit(resolve_answer(view.question, raw))
        if result is None:
            continue
        if result.is_correct:
            write("Correct!")
        else:
            write(f"Incorrect. Correct answer: {result.question.correct}")
        if not result.scored:
            write("(already answered earlier, score unchanged)")
        manager.next()


def choose_action(
    manager: SessionManager,
    read: Callable[[str], str],
    write: Callable[[str], None],
) -> CompletionAction | None:
    actions = manager.completion_actions()
    write("")
    for index, action in enumerate(actions, start=1):
        write(f"  {index}) {ACTION_LABELS[action]}")
    write("  q) Quit")
    while True:
        try:
            raw = read("> ").strip().lower()
        except EOFError:
            return None
        if raw in ("q", ":q", ""):
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(actions):
            return actions[int(raw) - 1]


def run(
    manager: SessionManager,
    test_count: int | None = None,
    new: bool = False,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    if new or manager.current is None:
        if test_count is not None:
            manager.start_test(test_count)
        else:
            manager.start_practice()
    else:
        session = manager.current
        write(
            f"Resuming {'test' if session.is_test else 'practice'} session: "
            f"question {session.current_question_index + 1} of {session.total_questions}"
        )

    while True:
        if not play(manager, read, write):
            write("Progress saved.")
            return 0
        write(format_report(manager.report()))
        action = choose_action(manager, read, write)
        if action is None:
            return 0
        manager.run_completion_action(action)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_console_logging("WARNING")
    try:
        questions = load_questions(args.questions)
    except LoadError as exc:
        print(f"Could not load questions: {exc}", file=sys.stderr)
        return 1

    store = MemorySessionStore() if args.no_save else JsonFileSessionStore(args.sessions)
    manager = SessionManager(QuizEngine(questions), store, TEST_QUESTION_COUNT).load()
    try:
        return run(
            manager,
            test_count=args.test,
            new=args.new,
            read=lambda prompt: input(prompt),
        )
    except EmptyBankError as exc:
        print(f"Cannot start a quiz: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nProgress saved.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
