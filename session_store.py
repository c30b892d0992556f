"""Persistence of the session list and the current-session pointer."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from api.utils.json_utils import json_dump, json_load, write_text_atomic
from core.errors import StorageError
from models import Session
from serialization import session_from_payload, sessions_to_blob

log = logging.getLogger(__name__)


def sessions_from_blob(blob: object) -> tuple[list[Session], str | None]:
    """Parse a stored blob, skipping records that fail validation."""
    if not isinstance(blob, dict):
        raise StorageError("Session storage must contain an object")
    records = blob.get("sessions", [])
    if not isinstance(records, list):
        raise StorageError("'sessions' must be a list")

    sessions: list[Session] = []
    seen: set[str] = set()
    for record in records:
        try:
            session = session_from_payload(record)
        except ValueError as exc:
            log.warning("Skipping invalid stored session: %s", exc)
            continue
        if session.id in seen:
            log.warning("Skipping duplicate stored session %s", session.id)
            continue
        seen.add(session.id)
        sessions.append(session)

    current_id = blob.get("currentSessionId")
    if not isinstance(current_id, str) or current_id not in seen:
        current_id = None
    return sessions, current_id


class SessionStore:
    """
    Base store: subclasses read and write one serialized blob.
    Reads degrade to "no saved sessions", write failures are logged.
    """

    def _read_blob(self) -> str | None:
        raise NotImplementedError

    def _write_blob(self, data: str) -> None:
        raise NotImplementedError

    def load_all(self) -> tuple[list[Session], str | None]:
        try:
            raw = self._read_blob()
            if raw is None:
                return [], None
            try:
                blob = json_load(raw)
            except ValueError as exc:
                raise StorageError(f"Corrupt session storage: {exc}") from exc
            return sessions_from_blob(blob)
        except StorageError as exc:
            log.warning("Ignoring saved sessions: %s", exc)
            return [], None

    def save_all(self, sessions: Iterable[Session], current_id: str | None) -> None:
        try:
            self._write_blob(json_dump(sessions_to_blob(sessions, current_id)))
        except StorageError as exc:
            log.error("Failed to save sessions: %s", exc)

    def delete(self, session_id: str) -> bool:
        sessions, current_id = self.load_all()
        remaining = [session for session in sessions if session.id != session_id]
        if len(remaining) == len(sessions):
            return False
        if current_id == session_id:
            current_id = None
        self.save_all(remaining, current_id)
        return True


class JsonFileSessionStore(SessionStore):
    """Flat JSON file, used by the command-line variant."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_blob(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc

    def _write_blob(self, data: str) -> None:
        try:
            write_text_atomic(self.path, data)
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc


class MemorySessionStore(SessionStore):
    """Keeps the blob in memory only."""

    def __init__(self, data: str | None = None):
        self.data = data

    def _read_blob(self) -> str | None:
        return self.data

    def _write_blob(self, data: str) -> None:
        self.data = data
