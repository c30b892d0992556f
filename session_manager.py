from __future__ import annotations

import logging
import threading

from core.errors import ResumeError, SessionNotFoundError
from models import (
    CompletionAction,
    Question,
    QuestionView,
    QuizState,
    ScoredResult,
    Session,
    SessionReport,
)
from quiz_engine import QuizEngine
from session_store import SessionStore

log = logging.getLogger(__name__)

DEFAULT_TEST_QUESTION_COUNT = 100


class SessionManager:
    """
    Owns the session list and the current session.
    Every mutation is written back through the store.

    The browser variant shares one manager between request threads;
    `lock` is reentrant and held around every read-modify-write.
    """

    def __init__(
        self,
        engine: QuizEngine,
        store: SessionStore,
        test_question_count: int = DEFAULT_TEST_QUESTION_COUNT,
    ):
        self.engine = engine
        self.store = store
        self.test_question_count = test_question_count
        self.sessions: list[Session] = []
        self.current: Session | None = None
        self.state: QuizState = engine.new_state()
        self.lock = threading.RLock()

    def load(self) -> "SessionManager":
        """Read saved sessions; re-enter the current one if it is unfinished."""
        with self.lock:
            self.sessions, current_id = self.store.load_all()
            self.current = None
            self.state = self.engine.new_state()
            session = self._find(current_id) if current_id else None
            if session is not None and not session.completed:
                if self._fits_bank(session):
                    self.current = session
                    self.state = self.engine.resume(session)
                else:
                    log.warning(
                        "Session %s references questions missing from the bank", session.id
                    )
        return self

    def save(self) -> None:
        with self.lock:
            self.store.save_all(self.sessions, self.current.id if self.current else None)

    def _find(self, session_id: str) -> Session | None:
        return next((s for s in self.sessions if s.id == session_id), None)

    def _fits_bank(self, session: Session) -> bool:
        return all(0 <= i < self.engine.bank_size for i in session.question_ids)

    def require_current(self) -> Session:
        if self.current is None:
            raise SessionNotFoundError("No active session")
        return self.current

    def list_sessions(self) -> list[Session]:
        with self.lock:
            return sorted(self.sessions, key=lambda s: s.timestamp, reverse=True)

    def get(self, session_id: str) -> Session:
        session = self._find(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def start(self, question_count: int, is_test: bool = False) -> Session:
        with self.lock:
            session = self.engine.create_session(question_count, is_test)
            self.sessions.append(session)
            self.current = session
            self.state = self.engine.new_state()
            self.save()
        log.info(
            "Started %s session %s (%d questions)",
            "test" if is_test else "practice",
            session.id,
            session.total_questions,
        )
        return session

    def start_practice(self) -> Session:
        return self.start(self.engine.bank_size, is_test=False)

    def start_test(self, question_count: int | None = None) -> Session:
        if question_count is None:
            question_count = self.test_question_count
        return self.start(question_count, is_test=True)

    def resume(self, session_id: str) -> Session:
        with self.lock:
            session = self.get(session_id)
            if not self._fits_bank(session):
                raise ResumeError(
                    f"Session {session_id} does not match the loaded question bank"
                )
            self.state = self.engine.resume(session)
            self.current = session
            self.save()
        return session

    def delete(self, session_id: str) -> bool:
        with self.lock:
            session = self._find(session_id)
            if session is None:
                return False
            self.sessions.remove(session)
            if self.current is session:
                self.current = None
                self.state = self.engine.new_state()
            self.save()
        log.info("Deleted session %s", session_id)
        return True

    def question(self) -> Question:
        return self.engine.current_question(self.require_current())

    def view(self) -> QuestionView:
        with self.lock:
            return self.engine.current_view(self.require_current(), self.state)

    def select(self, answer: str) -> None:
        with self.lock:
            self.engine.select_answer(self.require_current(), self.state, answer)

    def submit(self, answer: str | None = None) -> ScoredResult | None:
        with self.lock:
            result = self.engine.submit_answer(self.require_current(), self.state, answer)
            if result is not None and result.scored:
                self.save()
        return result

    def next(self) -> Session:
        with self.lock:
            session = self.engine.advance(self.require_current(), self.state)
            self.save()
        return session

    def previous(self) -> Session:
        with self.lock:
            session = self.engine.retreat(self.require_current(), self.state)
            self.save()
        return session

    def jump_to(self, index: int) -> QuestionView:
        with self.lock:
            return self.engine.jump_to(self.require_current(), self.state, index)

    def leave_view(self) -> QuestionView | None:
        with self.lock:
            return self.engine.leave_view(self.require_current(), self.state)

    def review(self) -> list[tuple[Question, str]]:
        with self.lock:
            return self.engine.open_review(self.require_current(), self.state)

    def close_review(self) -> None:
        with self.lock:
            self.engine.close_review(self.state)

    def report(self) -> SessionReport:
        with self.lock:
            return self.engine.build_report(self.require_current(), self.state)

    def completion_actions(self) -> list[CompletionAction]:
        session = self.require_current()
        if not session.completed:
            return []
        if session.is_test:
            return [CompletionAction.TAKE_TEST_AGAIN, CompletionAction.SWITCH_TO_PRACTICE]
        return [CompletionAction.PRACTICE_AGAIN]

    def run_completion_action(self, action: CompletionAction) -> Session:
        with self.lock:
            if action not in self.completion_actions():
                raise ValueError(f"Action {action.value} is not available now")
            if action is CompletionAction.TAKE_TEST_AGAIN:
                return self.start_test()
            return self.start_practice()
