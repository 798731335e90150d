"""Insert a key/value pair (or an array value) as the first entry of a target.

The target is resolved textually: an empty path means the root object,
anything else is reduced to its last dot segment (the context key) and the
first key-position match of that key in line order wins. Callers should pick
context keys that do not repeat at other nesting levels.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Literal

from .errors import (
    DuplicateKeyError,
    InvalidPayloadError,
    InvalidTargetError,
    MalformedDocumentError,
    TargetNotFoundError,
)
from .key_checker import (
    dump_json_value,
    encode_key,
    key_exists_at_depth,
    key_exists_in_array_positions,
    parse_json_value,
    quote_key,
)
from .line_scanner import (
    PAIRS,
    LineDocument,
    Position,
    container_holds_objects,
    detect_array_indent,
    detect_object_indent,
    indentation_of,
    iter_keys,
    next_significant,
    object_openers,
)

TargetKind = Literal["root", "object", "array_of_values", "array_of_objects"]


@dataclass(frozen=True, slots=True)
class Target:
    kind: TargetKind
    opener: Position
    context_key: str | None = None


def context_key_of(object_path: str) -> str | None:
    segments = [segment for segment in (object_path or "").strip().split(".") if segment]
    return segments[-1] if segments else None


def resolve_target(lines: list[str], object_path: str) -> Target:
    """Classify the insertion site named by `object_path`."""
    if not (object_path or "").strip():
        head = next_significant(lines, Position(0, 0))
        if head is None:
            raise MalformedDocumentError("no opening brace found")
        if head[1] != "{":
            raise MalformedDocumentError("document root is not a JSON object")
        return Target(kind="root", opener=head[0])

    context_key = context_key_of(object_path)
    if context_key is None:
        raise TargetNotFoundError(f"path '{object_path}' not found")

    raw = encode_key(context_key)
    token = next((item for item in iter_keys(lines) if item.raw == raw), None)
    if token is None:
        raise TargetNotFoundError(f"path '{object_path}' not found")

    head = next_significant(lines, token.colon.next_column())
    if head is None:
        raise MalformedDocumentError(f"missing value for key '{context_key}'")
    position, ch = head
    if ch == "{":
        return Target(kind="object", opener=position, context_key=context_key)
    if ch == "[":
        kind: TargetKind = "array_of_objects" if container_holds_objects(lines, position) else "array_of_values"
        return Target(kind=kind, opener=position, context_key=context_key)
    raise InvalidTargetError(f"target path '{object_path}' is not an object or array")


def _validate_value(value_json: str) -> None:
    try:
        parse_json_value(value_json)
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(f"invalid JSON value: {exc}") from exc


def _entry_rows(prefix: str, value_json: str, indent: str) -> list[str]:
    rows = value_json.replace("\r\n", "\n").strip("\n").split("\n")
    margin = len(os.path.commonprefix([indentation_of(row) for row in rows if row.strip()]))
    rows = [row[margin:] for row in rows]
    return [indent + prefix + rows[0].strip()] + [indent + row.rstrip() for row in rows[1:]]


def _inline_value(value_json: str) -> str:
    if "\n" not in value_json:
        return value_json.strip()
    return dump_json_value(parse_json_value(value_json))


def _insert_first_entry(doc: LineDocument, opener: Position, prefix: str, value_json: str) -> None:
    """Splice `prefix + value` as the first entry of the container at `opener`."""
    lines = doc.lines
    line = lines[opener.line]
    closer = PAIRS[line[opener.column]]
    after = next_significant(lines, opener.next_column())
    if after is None:
        raise MalformedDocumentError(f"unterminated container at line {opener.line + 1}")
    empty = after[1] == closer

    if after[0].line == opener.line:
        text = prefix + _inline_value(value_json)
        if not empty:
            text += ", "
        column = after[0].column
        doc.replace_line(opener.line, line[:column] + text + line[column:])
        return

    if closer == "}":
        indent = detect_object_indent(lines, opener.line)
    else:
        indent = detect_array_indent(lines, opener.line)
    rows = _entry_rows(prefix, value_json, indent)
    if not empty:
        rows[-1] += ","
    doc.insert_lines(opener.line + 1, rows)


def insert_value_or_key(document: str, object_path: str, key: str, value_json: str) -> str:
    """Insert into the root, a named object, or a named array.

    Arrays of plain values receive `value_json` as their first element (the key
    is unused there). Arrays holding objects receive `"key": value` as the
    first member of every object inside the array span, nested ones included,
    or nothing at all if any of them already holds `key`.
    """
    _validate_value(value_json)
    doc = LineDocument.from_text(document)
    lines = doc.lines
    target = resolve_target(lines, object_path)
    member = quote_key(key) + ": "

    if target.kind == "root":
        if key_exists_at_depth(lines, key, target.opener.line, 1, from_column=target.opener.column):
            raise DuplicateKeyError(f"key '{key}' already exists at root level")
        _insert_first_entry(doc, target.opener, member, value_json)
    elif target.kind == "object":
        if key_exists_at_depth(lines, key, target.opener.line, 1, from_column=target.opener.column):
            raise DuplicateKeyError(f"key '{key}' already exists in target object")
        _insert_first_entry(doc, target.opener, member, value_json)
    elif target.kind == "array_of_values":
        _insert_first_entry(doc, target.opener, "", value_json)
    else:
        if key_exists_in_array_positions(lines, key, target.opener):
            raise DuplicateKeyError(f"key '{key}' already exists in one or more array objects")
        for element in reversed(object_openers(lines, target.opener)):
            _insert_first_entry(doc, element, member, value_json)

    return doc.to_text()


def insert_key_value(document: str, object_path: str, key: str, value: Any) -> str:
    """Serialize `value` and insert it with `insert_value_or_key`."""
    try:
        value_json = dump_json_value(value)
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(f"error marshaling value: {exc}") from exc
    return insert_value_or_key(document, object_path, key, value_json)
