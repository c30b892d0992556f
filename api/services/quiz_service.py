"""Service layer between the HTTP routes and the session manager."""
from typing import Any, Callable

from fastapi import HTTPException

from api.utils import ms_to_iso, validate_question_count
from core.errors import (
    EmptyBankError,
    InvalidPositionError,
    LoadError,
    QuizError,
    ResumeError,
    SessionCompletedError,
    SessionNotFoundError,
)
from models import CompletionAction, Session
from serialization import (
    question_to_payload,
    report_to_payload,
    result_to_payload,
    session_to_payload,
    view_to_payload,
)
from session_manager import SessionManager

ERROR_STATUS: dict[type[QuizError], int] = {
    LoadError: 503,
    EmptyBankError: 409,
    ResumeError: 409,
    SessionCompletedError: 409,
    SessionNotFoundError: 404,
    InvalidPositionError: 400,
}


def http_error(exc: QuizError) -> HTTPException:
    """Map a quiz error to the matching HTTP error."""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def session_summary(session: Session) -> dict[str, Any]:
    """Stored session record plus display fields."""
    payload = session_to_payload(session)
    payload["startedAt"] = ms_to_iso(session.timestamp)
    payload["mode"] = "test" if session.is_test else "practice"
    return payload


def current_snapshot(manager: SessionManager) -> dict[str, Any]:
    """Everything the page needs to render the current session."""
    with manager.lock:
        session = manager.current
        if session is None:
            return {"session": None, "status": None}

        state = manager.state
        snapshot: dict[str, Any] = {
            "session": session_summary(session),
            "status": manager.engine.status(session, state).value,
            "selectedAnswer": state.selected_answer,
            "submitted": state.submitted,
            "viewMode": state.in_view_mode,
            "previousIndex": state.previous_index,
        }
        if session.completed and not state.in_view_mode:
            snapshot["question"] = None
            snapshot["report"] = report_to_payload(manager.report())
            snapshot["actions"] = [action.value for action in manager.completion_actions()]
        else:
            snapshot["question"] = view_to_payload(manager.view(), session.total_questions)
        return snapshot


def list_questions(questions: tuple) -> dict[str, Any]:
    return {
        "count": len(questions),
        "questions": [
            question_to_payload(question, index)
            for index, question in enumerate(questions)
        ],
    }


def list_sessions(manager: SessionManager) -> dict[str, Any]:
    with manager.lock:
        return {
            "currentSessionId": manager.current.id if manager.current else None,
            "sessions": [session_summary(s) for s in manager.list_sessions()],
        }


def _apply(manager: SessionManager, operation: Callable[[], object]) -> dict[str, Any]:
    """Run one manager operation and snapshot the result atomically."""
    with manager.lock:
        try:
            operation()
        except QuizError as exc:
            raise http_error(exc) from exc
        return current_snapshot(manager)


def start_session(
    manager: SessionManager, question_count: int | None, is_test: bool
) -> dict[str, Any]:
    """Start a test or practice session and make it current."""
    default = manager.test_question_count if is_test else manager.engine.bank_size
    count = validate_question_count(question_count, default)
    return _apply(manager, lambda: manager.start(count, is_test=is_test))


def resume_session(manager: SessionManager, session_id: str) -> dict[str, Any]:
    return _apply(manager, lambda: manager.resume(session_id))


def delete_session(manager: SessionManager, session_id: str) -> dict[str, str]:
    if not manager.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "deleted"}


def select_answer(manager: SessionManager, answer: str) -> dict[str, Any]:
    return _apply(manager, lambda: manager.select(answer))


def submit_answer(manager: SessionManager, answer: str | None) -> dict[str, Any]:
    """Submit an answer; 'result' is null when the submission was ignored."""
    with manager.lock:
        try:
            result = manager.submit(answer)
        except QuizError as exc:
            raise http_error(exc) from exc
        snapshot = current_snapshot(manager)
    snapshot["result"] = result_to_payload(result) if result else None
    return snapshot


def move(manager: SessionManager, forward: bool) -> dict[str, Any]:
    return _apply(manager, manager.next if forward else manager.previous)


def jump_to(manager: SessionManager, index: int) -> dict[str, Any]:
    return _apply(manager, lambda: manager.jump_to(index))


def leave_view(manager: SessionManager) -> dict[str, Any]:
    return _apply(manager, manager.leave_view)


def session_report(manager: SessionManager) -> dict[str, Any]:
    try:
        return report_to_payload(manager.report())
    except QuizError as exc:
        raise http_error(exc) from exc


def run_action(manager: SessionManager, action: str) -> dict[str, Any]:
    """Run one of the post-completion actions (retake, switch mode)."""
    try:
        parsed = CompletionAction(action)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown action {action}")
    with manager.lock:
        try:
            manager.run_completion_action(parsed)
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except QuizError as exc:
            raise http_error(exc) from exc
        return current_snapshot(manager)


def set_review(manager: SessionManager, open_review: bool) -> dict[str, Any]:
    """Open or close the read-only review of wrong answers."""
    return _apply(manager, manager.review if open_review else manager.close_review)
