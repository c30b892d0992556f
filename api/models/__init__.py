"""Pydantic models."""
from api.models.quiz import AnswerSelect, AnswerSubmit, QuestionJump, SessionCreate

__all__ = [
    "AnswerSelect",
    "AnswerSubmit",
    "QuestionJump",
    "SessionCreate",
]
