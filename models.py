from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple


@dataclass(frozen=True)
class Question:
    question: str
    answers: Tuple[str, ...]  # empty -> free-text question
    correct: str

    @property
    def is_free_text(self) -> bool:
        return not self.answers


class SessionStatus(str, enum.Enum):
    """State of a quiz session as seen by the engine."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REVIEWING = "reviewing"


@dataclass
class Session:
    id: str
    timestamp: int  # epoch milliseconds
    question_ids: List[int]
    is_test: bool = False
    current_question_index: int = 0
    score: int = 0
    answered_questions: Set[int] = field(default_factory=set)
    completed: bool = False

    @property
    def total_questions(self) -> int:
        return len(self.question_ids)


@dataclass
class QuizState:
    """Per-session UI state. Never persisted."""

    selected_answer: str = ""
    submitted: bool = False
    wrong_answers: List[Tuple[Question, str]] = field(default_factory=list)
    view_index: Optional[int] = None
    previous_index: Optional[int] = None
    reviewing: bool = False

    @property
    def in_view_mode(self) -> bool:
        return self.view_index is not None

    def clear_question(self) -> None:
        self.selected_answer = ""
        self.submitted = False


@dataclass(frozen=True)
class ScoredResult:
    position: int
    question: Question
    answer: str
    is_correct: bool
    scored: bool  # False when the position had already been scored


@dataclass(frozen=True)
class QuestionView:
    position: int
    question: Question
    answered: bool
    view_only: bool = False


@dataclass(frozen=True)
class MissedQuestion:
    question: str
    answers: Tuple[str, ...]
    given_answer: str
    correct_answer: str


@dataclass(frozen=True)
class SessionReport:
    is_test: bool
    total_questions: int
    answered: int
    correct: int
    wrong: int
    unanswered: int
    percentage: float
    missed: List[MissedQuestion] = field(default_factory=list)


class CompletionAction(str, enum.Enum):
    TAKE_TEST_AGAIN = "take_test_again"
    SWITCH_TO_PRACTICE = "switch_to_practice"
    PRACTICE_AGAIN = "practice_again"
