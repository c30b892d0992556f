"""Session store backed by the storage_entries table."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from api.config import SESSIONS_STORAGE_KEY
from api.models.db.storage import StorageEntry
from core.errors import StorageError
from session_store import SessionStore

log = logging.getLogger(__name__)


class DatabaseSessionStore(SessionStore):
    """Keeps the session blob in one row, keyed like a local storage entry."""

    def __init__(self, session_factory: sessionmaker, key: str = SESSIONS_STORAGE_KEY):
        self.session_factory = session_factory
        self.key = key

    def _read_blob(self) -> str | None:
        try:
            db = self.session_factory()
            try:
                entry = db.get(StorageEntry, self.key)
                return entry.value if entry else None
            finally:
                db.close()
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot read storage key {self.key}: {exc}") from exc

    def _write_blob(self, data: str) -> None:
        try:
            db = self.session_factory()
            try:
                entry = db.get(StorageEntry, self.key)
                if entry is None:
                    db.add(StorageEntry(key=self.key, value=data))
                else:
                    entry.value = data
                db.commit()
            finally:
                db.close()
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot write storage key {self.key}: {exc}") from exc
