"""Utility modules."""
from api.utils.json_utils import json_dump, json_load, write_text_atomic
from api.utils.time_utils import ms_to_iso
from api.utils.validation import validate_id, validate_question_count

__all__ = [
    "json_dump",
    "json_load",
    "write_text_atomic",
    "ms_to_iso",
    "validate_id",
    "validate_question_count",
]
