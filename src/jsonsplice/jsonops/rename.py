"""Rename a key wherever it appears in key position."""

from __future__ import annotations

import re

from .errors import InvalidPayloadError
from .key_checker import encode_key, quote_key
from .line_scanner import LineDocument, scan


def _string_starts(lines: list[str]) -> set[int]:
    """Offsets of every string-opening quote in `"\\n".join(lines)`."""
    offsets = [0]
    for line in lines[:-1]:
        offsets.append(offsets[-1] + len(line) + 1)
    return {offsets[pos.line] + pos.column for pos, ch, _ in scan(lines) if ch == '"'}


def rename_key(document: str, old_key: str, new_key: str) -> tuple[str, int]:
    """Return the document with every `"old_key":` renamed, plus the count.

    Values equal to `old_key` are untouched, as is key-like text inside
    string values. The colon may sit on a later line than the key. Renaming
    may create a duplicate key; that is not checked.
    """
    if not old_key:
        raise InvalidPayloadError("old key cannot be empty")
    if not new_key:
        raise InvalidPayloadError("new key cannot be empty")
    if old_key == new_key:
        raise InvalidPayloadError("old key and new key cannot be the same")

    pattern = re.compile(r'"(' + re.escape(encode_key(old_key)) + r')"\s*:')
    replacement = quote_key(new_key)
    doc = LineDocument.from_text(document)
    text = "\n".join(doc.lines)
    if not pattern.search(text):
        return document, 0

    starts = _string_starts(doc.lines)
    count = 0

    def _swap(match: re.Match[str]) -> str:
        nonlocal count
        if match.start() not in starts:
            return match.group(0)
        count += 1
        return replacement + match.group(0)[match.end(1) + 1 - match.start() :]

    renamed = pattern.sub(_swap, text).split("\n")
    for index, line in enumerate(renamed):
        if line != doc.lines[index]:
            doc.replace_line(index, line)
    return doc.to_text(), count
