"""Session endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends

from api.dependencies import get_session_manager
from api.models import AnswerSelect, AnswerSubmit, QuestionJump, SessionCreate
from api.services import quiz_service
from api.utils import validate_id
from session_manager import SessionManager

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

Manager = Annotated[SessionManager, Depends(get_session_manager)]


@router.get("")
def list_sessions(manager: Manager) -> dict[str, object]:
    """List stored sessions, newest first."""
    return quiz_service.list_sessions(manager)


@router.post("")
def create_session(payload: SessionCreate, manager: Manager) -> dict[str, object]:
    """Start a new test or practice session."""
    return quiz_service.start_session(manager, payload.questionCount, payload.isTest)


@router.get("/current")
def get_current(manager: Manager) -> dict[str, object]:
    """Current session with its question or final report."""
    return quiz_service.current_snapshot(manager)


@router.post("/current/select")
def select_answer(payload: AnswerSelect, manager: Manager) -> dict[str, object]:
    """Select an answer without submitting it."""
    return quiz_service.select_answer(manager, payload.answer)


@router.post("/current/answer")
def submit_answer(payload: AnswerSubmit, manager: Manager) -> dict[str, object]:
    """Submit an answer for the current question."""
    return quiz_service.submit_answer(manager, payload.answer)


@router.post("/current/next")
def next_question(manager: Manager) -> dict[str, object]:
    """Go to the next question (completes the session after the last one)."""
    return quiz_service.move(manager, forward=True)


@router.post("/current/previous")
def previous_question(manager: Manager) -> dict[str, object]:
    """Go back one question."""
    return quiz_service.move(manager, forward=False)


@router.post("/current/view")
def view_question(payload: QuestionJump, manager: Manager) -> dict[str, object]:
    """Inspect a question without moving the tracked position."""
    return quiz_service.jump_to(manager, payload.index)


@router.post("/current/leave-view")
def leave_view(manager: Manager) -> dict[str, object]:
    """Return to the tracked position."""
    return quiz_service.leave_view(manager)


@router.post("/current/review")
def open_review(manager: Manager) -> dict[str, object]:
    """Open the review of wrong answers of a completed session."""
    return quiz_service.set_review(manager, open_review=True)


@router.delete("/current/review")
def close_review(manager: Manager) -> dict[str, object]:
    """Close the review."""
    return quiz_service.set_review(manager, open_review=False)


@router.get("/current/report")
def get_report(manager: Manager) -> dict[str, object]:
    """End-of-session report for the current session."""
    return quiz_service.session_report(manager)


@router.post("/current/actions/{action}")
def run_action(action: str, manager: Manager) -> dict[str, object]:
    """Retake the test or switch to practice after completion."""
    return quiz_service.run_action(manager, action)


@router.post("/{session_id}/resume")
def resume_session(session_id: str, manager: Manager) -> dict[str, object]:
    """Make an unfinished session current again."""
    session_id = validate_id("sessionId", session_id)
    return quiz_service.resume_session(manager, session_id)


@router.delete("/{session_id}")
def delete_session(session_id: str, manager: Manager) -> dict[str, str]:
    """Delete a stored session."""
    session_id = validate_id("sessionId", session_id)
    return quiz_service.delete_session(manager, session_id)
