"""Insert a JSON object under a new key after every occurrence of a target key."""

from __future__ import annotations

from typing import Any

from .errors import DuplicateKeyError, InvalidPayloadError, MalformedDocumentError, TargetNotFoundError
from .key_checker import (
    dump_json_value,
    encode_key,
    enclosing_object,
    key_exists_beside,
    parse_json_value,
    quote_key,
)
from .line_scanner import (
    DEFAULT_INDENT_UNIT,
    KeyToken,
    LineDocument,
    find_key_positions,
    indent_unit,
    indentation_of,
    value_span,
)


def _parse_new_object(new_object_json: str) -> Any:
    try:
        return parse_json_value(new_object_json)
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(f"invalid JSON for new object: {exc}") from exc


def _unit_for(lines: list[str], token: KeyToken) -> str:
    opener = enclosing_object(lines, token.position)
    if opener is None or opener.line == token.position.line:
        return DEFAULT_INDENT_UNIT
    return indent_unit(lines, opener.line)


def _splice_after(doc: LineDocument, token: KeyToken, new_key: str, new_value: Any) -> None:
    lines = doc.lines
    span = value_span(lines, token.colon)
    if span is None:
        raise MalformedDocumentError(f"value at line {token.position.line + 1} is not terminated")
    end = span[1]
    end_line = lines[end.line]
    tail = end_line[end.column + 1 :].strip()

    if tail not in ("", ","):
        column = end.column + 1
        fragment = ", " + quote_key(new_key) + ": " + dump_json_value(new_value)
        doc.replace_line(end.line, end_line[:column] + fragment + end_line[column:])
        return

    indent = indentation_of(lines[token.position.line])
    rendered = dump_json_value(new_value, indent=_unit_for(lines, token)).split("\n")
    block = [indent + quote_key(new_key) + ": " + rendered[0]]
    block.extend(indent + row for row in rendered[1:])
    if tail == ",":
        block[-1] += ","
    else:
        doc.append_comma(end.line)
    doc.insert_lines(end.line + 1, block)


def insert_object_after_all_occurrences(
    document: str,
    target_key: str,
    new_key: str,
    new_object_json: str,
    *,
    check_duplicates: bool = True,
) -> str:
    """Add `"new_key": <object>` as the next sibling of every `target_key`.

    The call is all-or-nothing: a missing target, a malformed value or (with
    `check_duplicates`) an existing sibling named `new_key` next to any
    occurrence raises before the document is touched. Occurrences are spliced
    from last to first so earlier positions stay valid.
    """
    new_value = _parse_new_object(new_object_json)
    doc = LineDocument.from_text(document)
    lines = doc.lines

    occurrences = find_key_positions(lines, encode_key(target_key))
    if not occurrences:
        raise TargetNotFoundError(f"target key '{target_key}' not found")

    if check_duplicates and any(key_exists_beside(lines, token.position, new_key) for token in occurrences):
        raise DuplicateKeyError(f"object with key '{new_key}' already exists")

    for token in occurrences:
        if value_span(lines, token.colon) is None:
            raise MalformedDocumentError(f"value at line {token.position.line + 1} is not terminated")

    for token in reversed(occurrences):
        _splice_after(doc, token, new_key, new_value)
    return doc.to_text()
