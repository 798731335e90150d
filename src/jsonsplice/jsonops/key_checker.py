"""Duplicate-key detection by depth bookkeeping over JSON lines."""

from __future__ import annotations

import json
import math
from typing import Any

from .line_scanner import (
    CLOSERS,
    OPENERS,
    Position,
    first_char,
    first_colon_on_line,
    iter_keys,
    next_significant,
    scan,
)


def encode_key(key: str) -> str:
    """Key text as it appears between the quotes in JSON source."""
    return json.dumps(key, ensure_ascii=False)[1:-1]


def quote_key(key: str) -> str:
    return json.dumps(key, ensure_ascii=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} is out of range")
    return value


def parse_json_value(text: str) -> Any:
    """`json.loads` limited to standard JSON: no NaN, Infinity or overflowing numbers."""
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


def dump_json_value(value: Any, **kwargs: Any) -> str:
    return json.dumps(value, ensure_ascii=False, allow_nan=False, **kwargs)


def key_exists_at_depth(
    lines: list[str],
    key: str,
    from_line: int,
    target_depth: int,
    *,
    from_column: int = 0,
) -> bool:
    """Check for `"key":` at exactly `target_depth`, counted from `from_line`.

    The walk stops once depth falls below `target_depth` after reaching it.
    """
    raw = encode_key(key)
    depth = 0
    entered = False
    for pos, ch, end in scan(lines, Position(from_line, from_column)):
        if ch in OPENERS:
            depth += 1
            entered = entered or depth >= target_depth
        elif ch in CLOSERS:
            depth -= 1
            if entered and depth < target_depth:
                return False
        elif ch == '"' and depth == target_depth:
            if lines[pos.line][pos.column + 1 : end] != raw:
                continue
            after = next_significant(lines, Position(pos.line, end + 1))
            if after is not None and after[1] == ":":
                return True
    return False


def enclosing_object(lines: list[str], position: Position) -> Position | None:
    """Opening brace of the innermost object containing `position`."""
    stack: list[tuple[Position, str]] = []
    for pos, ch, _ in scan(lines):
        if pos >= position:
            break
        if ch in OPENERS:
            stack.append((pos, ch))
        elif ch in CLOSERS and stack:
            stack.pop()
    if stack and stack[-1][1] == "{":
        return stack[-1][0]
    return None


def key_exists_in_object(lines: list[str], open_position: Position, key: str) -> bool:
    """True when `key` is a direct member of the object opened at `open_position`."""
    raw = encode_key(key)
    return any(
        token.depth == 1 and token.raw == raw
        for token in iter_keys(lines, open_position, scope_only=True)
    )


def key_exists_beside(lines: list[str], key_position: Position, candidate_key: str) -> bool:
    """True when `candidate_key` is a sibling of the key starting at `key_position`."""
    opener = enclosing_object(lines, key_position)
    if opener is None:
        return False
    return key_exists_in_object(lines, opener, candidate_key)


def key_exists_in_enclosing_object(lines: list[str], target_key_line: int, candidate_key: str) -> bool:
    colon = first_colon_on_line(lines, target_key_line)
    if colon is None:
        return False
    key_start = first_char(lines, Position(target_key_line, 0), '"')
    if key_start is None or key_start > colon:
        return False
    return key_exists_beside(lines, key_start, candidate_key)


def key_exists_in_array_positions(lines: list[str], key: str, open_position: Position) -> bool:
    raw = encode_key(key)
    return any(token.raw == raw for token in iter_keys(lines, open_position, scope_only=True))


def key_exists_in_array_objects(lines: list[str], key: str, array_line_index: int) -> bool:
    """True when any object inside the array has `key` at any depth."""
    bracket = first_char(lines, Position(array_line_index, 0), "[")
    if bracket is None:
        return False
    return key_exists_in_array_positions(lines, key, bracket)
