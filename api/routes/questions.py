"""Question bank endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends

from api.dependencies import get_question_bank
from api.services.quiz_service import list_questions
from models import Question

router = APIRouter(prefix="/api/questions", tags=["questions"])


@router.get("")
def get_questions(
    questions: Annotated[tuple[Question, ...], Depends(get_question_bank)],
) -> dict[str, object]:
    """List the loaded question bank (without correct answers)."""
    return list_questions(questions)
