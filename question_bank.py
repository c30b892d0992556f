from __future__ import annotations

import logging
from pathlib import Path

import requests

from api.utils.json_utils import json_load
from core.errors import LoadError
from models import Question
from serialization import question_from_payload

log = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 30

_CACHE: dict[str, tuple[Question, ...]] = {}


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def clear_cache() -> None:
    _CACHE.clear()


class QuestionBankLoader:
    """Reads the question bank from a JSON file or an HTTP(S) URL."""

    def __init__(self, source: str | Path, use_cache: bool = True):
        self.source = str(source)
        self.use_cache = use_cache

    def _read_file(self) -> str:
        path = Path(self.source)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(f"Cannot read question file {path}: {exc}") from exc

    def _fetch(self) -> str:
        try:
            response = requests.get(self.source, timeout=HTTP_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise LoadError(f"Cannot fetch questions from {self.source}: {exc}") from exc
        return response.text

    def _parse(self, raw: str) -> tuple[Question, ...]:
        try:
            data = json_load(raw)
        except ValueError as exc:
            raise LoadError(f"Question source {self.source} is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise LoadError(f"Question source {self.source} must contain a JSON array")
        try:
            return tuple(
                question_from_payload(item, index) for index, item in enumerate(data)
            )
        except ValueError as exc:
            raise LoadError(f"Malformed question in {self.source}: {exc}") from exc

    def load(self) -> tuple[Question, ...]:
        if self.use_cache and self.source in _CACHE:
            log.debug("Question bank cache hit for %s", self.source)
            return _CACHE[self.source]

        raw = self._fetch() if is_url(self.source) else self._read_file()
        questions = self._parse(raw)
        log.info("Loaded %d questions from %s", len(questions), self.source)
        if self.use_cache:
            _CACHE[self.source] = questions
        return questions


def load_questions(source: str | Path) -> tuple[Question, ...]:
    return QuestionBankLoader(source).load()
