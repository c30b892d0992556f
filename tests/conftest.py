import json
import random
from pathlib import Path

import pytest

import question_bank
from models import Question
from quiz_engine import QuizEngine

RAW_QUESTIONS = [
    {"question": "Two processes waiting on each other forever?", "answers": [], "correct": "Deadlock"},
    {"question": "Threads share the address space.", "answers": ["True", "False"], "correct": "True"},
    {"question": "Which algorithm shows Belady's anomaly?", "answers": ["LRU", "FIFO", "Optimal"], "correct": "FIFO"},
    {"question": "Unix call that creates a process?", "answers": [], "correct": "fork"},
    {"question": "Fastest memory?", "answers": ["Registers", "Cache", "Disk"], "correct": "Registers"},
]


@pytest.fixture(autouse=True)
def _clear_question_cache():
    question_bank.clear_cache()
    yield
    question_bank.clear_cache()


@pytest.fixture
def bank() -> list[Question]:
    return [
        Question(item["question"], tuple(item["answers"]), item["correct"])
        for item in RAW_QUESTIONS
    ]


@pytest.fixture
def engine(bank: list[Question]) -> QuizEngine:
    return QuizEngine(bank, rng=random.Random(1234))


@pytest.fixture
def questions_file(tmp_path: Path) -> Path:
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(RAW_QUESTIONS), encoding="utf-8")
    return path


def correct_answer_for(engine: QuizEngine, session) -> str:
    return engine.current_question(session).correct


def wrong_answer_for(engine: QuizEngine, session) -> str:
    question = engine.current_question(session)
    if question.is_free_text:
        return question.correct + " nope"
    return next(answer for answer in question.answers if answer != question.correct)
