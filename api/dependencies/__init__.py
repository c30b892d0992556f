"""FastAPI dependencies."""
from api.dependencies.quiz import get_question_bank, get_session_manager

__all__ = ["get_question_bank", "get_session_manager"]
