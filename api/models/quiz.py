"""Quiz-related Pydantic models."""
from pydantic import BaseModel, Field


class SessionCreate(BaseModel):
    """Model for starting a new session."""

    questionCount: int | None = Field(None, ge=1)
    isTest: bool = False


class AnswerSelect(BaseModel):
    """Model for selecting an answer without submitting it."""

    answer: str


class AnswerSubmit(BaseModel):
    """Model for submitting an answer; falls back to the selected one."""

    answer: str | None = None


class QuestionJump(BaseModel):
    """Model for view-only inspection of a question position."""

    index: int = Field(..., ge=0)
