from __future__ import annotations

import logging
import random
import time
import uuid
from typing import Sequence

from core.errors import (
    EmptyBankError,
    InvalidPositionError,
    ResumeError,
    SessionCompletedError,
)
from models import (
    MissedQuestion,
    Question,
    QuestionView,
    QuizState,
    ScoredResult,
    Session,
    SessionReport,
    SessionStatus,
)

log = logging.getLogger(__name__)


def shuffled_indices(count: int, rng: random.Random) -> list[int]:
    """Fisher-Yates permutation of range(count)."""
    indices = list(range(count))
    for i in range(count - 1, 0, -1):
        j = rng.randint(0, i)
        indices[i], indices[j] = indices[j], indices[i]
    return indices


def is_correct(question: Question, answer: str) -> bool:
    if question.is_free_text:
        return answer.lower() == question.correct.lower()
    return answer == question.correct


class QuizEngine:
    """
    State transitions over a (Session, QuizState) pair.

    The Session holds durable progress; QuizState holds what only the
    current UI needs (selection, wrong answers, view mode).
    """

    def __init__(self, questions: Sequence[Question], rng: random.Random | None = None):
        self.questions = tuple(questions)
        self.rng = rng or random.Random()

    @property
    def bank_size(self) -> int:
        return len(self.questions)

    def create_session(self, question_count: int, is_test: bool = False) -> Session:
        if not self.questions:
            raise EmptyBankError("No questions available to start a session")
        count = min(max(question_count, 1), self.bank_size)
        question_ids = shuffled_indices(self.bank_size, self.rng)[:count]
        session = Session(
            id=uuid.uuid4().hex,
            timestamp=int(time.time() * 1000),
            question_ids=question_ids,
            is_test=is_test,
        )
        log.debug(
            "Created %s session %s with %d questions",
            "test" if is_test else "practice",
            session.id,
            count,
        )
        return session

    def new_state(self) -> QuizState:
        return QuizState()

    def status(self, session: Session, state: QuizState | None = None) -> SessionStatus:
        if not session.completed:
            return SessionStatus.IN_PROGRESS
        if state is not None and state.reviewing:
            return SessionStatus.REVIEWING
        return SessionStatus.COMPLETED

    def _question_at(self, session: Session, position: int) -> Question:
        if not 0 <= position < session.total_questions:
            raise InvalidPositionError(
                f"Position {position} is outside 0..{session.total_questions - 1}"
            )
        return self.questions[session.question_ids[position]]

    def current_question(self, session: Session) -> Question:
        if session.completed:
            raise SessionCompletedError(f"Session {session.id} is completed")
        return self._question_at(session, session.current_question_index)

    def current_view(self, session: Session, state: QuizState) -> QuestionView:
        if state.in_view_mode:
            return self._view(session, state.view_index, view_only=True)
        self.current_question(session)
        return self._view(session, session.current_question_index)

    def _view(self, session: Session, position: int, view_only: bool = False) -> QuestionView:
        return QuestionView(
            position=position,
            question=self._question_at(session, position),
            answered=position in session.answered_questions,
            view_only=view_only,
        )

    def select_answer(self, session: Session, state: QuizState, answer: str) -> None:
        if state.submitted or state.in_view_mode or session.completed:
            return
        state.selected_answer = answer

    def submit_answer(
        self, session: Session, state: QuizState, answer: str | None = None
    ) -> ScoredResult | None:
        if state.in_view_mode:
            return None
        question = self.current_question(session)
        if answer is None:
            answer = state.selected_answer
        if not answer or state.submitted:
            return None

        position = session.current_question_index
        correct = is_correct(question, answer)
        state.selected_answer = answer
        state.submitted = True

        if position in session.answered_questions:
            return ScoredResult(position, question, answer, correct, scored=False)

        session.answered_questions.add(position)
        if correct:
            session.score += 1
        else:
            state.wrong_answers.append((question, answer))
        return ScoredResult(position, question, answer, correct, scored=True)

    def advance(self, session: Session, state: QuizState) -> Session:
        if state.in_view_mode:
            if state.view_index + 1 < session.total_questions:
                state.view_index += 1
            return session
        if session.completed:
            return session
        if session.current_question_index + 1 < session.total_questions:
            session.current_question_index += 1
            state.clear_question()
        else:
            session.completed = True
            state.clear_question()
        return session

    def retreat(self, session: Session, state: QuizState) -> Session:
        if state.in_view_mode:
            if state.view_index > 0:
                state.view_index -= 1
            return session
        if session.completed:
            return session
        if session.current_question_index > 0:
            session.current_question_index -= 1
            state.clear_question()
        return session

    def resume(self, session: Session) -> QuizState:
        if session.completed:
            raise ResumeError(
                f"Session {session.id} is already completed; start a new session"
            )
        return self.new_state()

    def jump_to(self, session: Session, state: QuizState, index: int) -> QuestionView:
        view = self._view(session, index, view_only=True)
        if not state.in_view_mode:
            state.previous_index = session.current_question_index
        state.view_index = index
        state.clear_question()
        return view

    def leave_view(self, session: Session, state: QuizState) -> QuestionView | None:
        state.view_index = None
        state.previous_index = None
        state.clear_question()
        if session.completed:
            return None
        return self._view(session, session.current_question_index)

    def open_review(self, session: Session, state: QuizState) -> list[tuple[Question, str]]:
        if not session.completed:
            return []
        state.reviewing = True
        return list(state.wrong_answers)

    def close_review(self, state: QuizState) -> None:
        state.reviewing = False

    def build_report(self, session: Session, state: QuizState | None = None) -> SessionReport:
        answered = len(session.answered_questions)
        wrong_answers = state.wrong_answers if state is not None else []
        return SessionReport(
            is_test=session.is_test,
            total_questions=session.total_questions,
            answered=answered,
            correct=session.score,
            wrong=answered - session.score,
            unanswered=session.total_questions - answered,
            percentage=round(session.score / session.total_questions * 100, 1),
            missed=[
                MissedQuestion(
                    question=question.question,
                    answers=question.answers,
                    given_answer=given,
                    correct_answer=question.correct,
                )
                for question, given in wrong_answers
            ],
        )
