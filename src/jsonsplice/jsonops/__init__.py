"""Structure-preserving JSON text edits."""

from .errors import (
    DuplicateKeyError,
    InvalidPayloadError,
    InvalidTargetError,
    JsonEditError,
    MalformedDocumentError,
    TargetNotFoundError,
)
from .insert_after import insert_object_after_all_occurrences
from .insert_into import insert_key_value, insert_value_or_key, resolve_target
from .key_checker import parse_json_value
from .key_search import contains_key_deep
from .line_scanner import LineDocument, Position
from .rename import rename_key

__all__ = [
    "DuplicateKeyError",
    "InvalidPayloadError",
    "InvalidTargetError",
    "JsonEditError",
    "LineDocument",
    "MalformedDocumentError",
    "Position",
    "TargetNotFoundError",
    "contains_key_deep",
    "insert_key_value",
    "insert_object_after_all_occurrences",
    "insert_value_or_key",
    "parse_json_value",
    "rename_key",
    "resolve_target",
]
