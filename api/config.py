"""Application configuration and constants."""
import os
import sys
from pathlib import Path


def _resource_path(relative: str) -> Path:
    """Get path to resource, works for PyInstaller bundles."""
    if getattr(sys, "frozen", False):
        base_dir = Path(sys._MEIPASS)
    else:
        base_dir = Path(__file__).resolve().parent.parent
    return base_dir / relative


def _parse_int_env(name: str, default: int) -> int:
    """Parse positive integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


# Question bank: file path or http(s) URL
QUESTIONS_SOURCE = os.environ.get(
    "QUIZ_QUESTIONS_SOURCE", str(_resource_path("data/questions.json"))
)

# Sessions file for the command-line variant
SESSIONS_PATH = Path(
    os.environ.get("QUIZ_SESSIONS_PATH", Path.cwd() / "data" / "sessions.json")
)

# Test mode default size
TEST_QUESTION_COUNT = _parse_int_env("QUIZ_TEST_QUESTION_COUNT", 100)

STATIC_DIR = Path(os.environ.get("STATIC_DIR", _resource_path("static")))

# Database (browser variant session storage)
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DB_DIR / 'quiz.db'}")

# Key of the session blob in the storage table
SESSIONS_STORAGE_KEY = "quiz_sessions"
