"""Quiz dependencies for FastAPI."""
import threading
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from api.config import QUESTIONS_SOURCE, TEST_QUESTION_COUNT
from api.database import SessionLocal
from api.services.storage_service import DatabaseSessionStore
from core.errors import LoadError
from models import Question
from question_bank import load_questions
from quiz_engine import QuizEngine
from session_manager import SessionManager

_manager_lock = threading.Lock()


def get_question_bank() -> tuple[Question, ...]:
    """Loaded question bank (cached after the first successful load).

    Raises:
        HTTPException: 503 if the question source cannot be loaded.
    """
    try:
        return load_questions(QUESTIONS_SOURCE)
    except LoadError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc


def get_session_manager(
    request: Request,
    questions: Annotated[tuple[Question, ...], Depends(get_question_bank)],
) -> SessionManager:
    """Process-wide session manager; the app serves a single local user."""
    with _manager_lock:
        manager = getattr(request.app.state, "session_manager", None)
        if manager is None:
            manager = SessionManager(
                QuizEngine(questions),
                DatabaseSessionStore(SessionLocal),
                TEST_QUESTION_COUNT,
            ).load()
            request.app.state.session_manager = manager
    return manager
