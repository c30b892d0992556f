"""API route modules."""
from api.routes import questions, sessions

__all__ = ["questions", "sessions"]
