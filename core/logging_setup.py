from __future__ import annotations
import logging
import os

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def resolve_level(value: int | str | None, default: int = logging.INFO) -> int:
    """Accept a logging level as int or name ("debug", "WARNING")."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def setup_console_logging(level: int | str | None = None) -> None:
    """
    Call once at app start. Prints logs to stderr.
    Level falls back to QUIZ_LOG_LEVEL, then INFO.
    """
    resolved = resolve_level(
        level if level is not None else os.environ.get("QUIZ_LOG_LEVEL")
    )
    root = logging.getLogger()
    if root.handlers:
        # already configured (avoid duplicates)
        root.setLevel(resolved)
        return

    root.setLevel(resolved)
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(h)
    # urllib3 logs every request at DEBUG when the bank is fetched over HTTP
    logging.getLogger("urllib3").setLevel(max(resolved, logging.INFO))
