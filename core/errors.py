"""Error types raised by the quiz engine, the question loader and the stores."""


class QuizError(Exception):
    """Base class for quiz errors."""


class LoadError(QuizError):
    """Question source is missing, unreadable or malformed."""


class StorageError(QuizError):
    """Session storage could not be read or written."""


class EmptyBankError(QuizError):
    """A session was requested while no questions are available."""


class ResumeError(QuizError):
    """Attempt to resume a session that is already completed."""


class SessionCompletedError(QuizError):
    """Operation needs a current question but the session is completed."""


class SessionNotFoundError(QuizError):
    """No session with the given id (or no current session)."""


class InvalidPositionError(QuizError):
    """Question position outside of the session."""
