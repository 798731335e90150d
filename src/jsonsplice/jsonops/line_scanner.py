"""Line and character scanning primitives over JSON text split into lines.

Everything here is read-only over a list of line strings. JSON string literals
never contain raw line breaks, so string state is tracked per line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

DEFAULT_INDENT_UNIT = "  "
OPENERS = "{["
CLOSERS = "}]"
PAIRS = {"{": "}", "[": "]"}
_SCALAR_STOP = ",}]"


@dataclass(frozen=True, slots=True, order=True)
class Position:
    line: int
    column: int

    def next_column(self) -> "Position":
        return Position(self.line, self.column + 1)


@dataclass(frozen=True, slots=True)
class KeyToken:
    """A string literal in key position (followed by a colon)."""

    position: Position
    colon: Position
    raw: str
    depth: int


@dataclass(slots=True)
class LineDocument:
    """JSON text held as ordered line records joined by the original separator."""

    lines: list[str]
    newline: str = "\n"

    @classmethod
    def from_text(cls, text: str) -> "LineDocument":
        newline = "\r\n" if "\r\n" in text else "\n"
        return cls(lines=text.split(newline), newline=newline)

    def to_text(self) -> str:
        return self.newline.join(self.lines)

    def insert_lines(self, index: int, new_lines: Iterable[str]) -> None:
        self.lines[index:index] = list(new_lines)

    def replace_line(self, index: int, text: str) -> None:
        self.lines[index] = text

    def append_comma(self, index: int) -> None:
        stripped = self.lines[index].rstrip(" \t")
        if not stripped.endswith(","):
            self.lines[index] = stripped + ","


def indentation_of(line: str) -> str:
    """Return the leading run of spaces and tabs."""
    end = 0
    while end < len(line) and line[end] in " \t":
        end += 1
    return line[:end]


def string_end(line: str, quote_column: int) -> int:
    """Column of the quote closing the literal opened at `quote_column`.

    An unterminated literal swallows the rest of the line.
    """
    j = quote_column + 1
    while j < len(line):
        ch = line[j]
        if ch == "\\":
            j += 2
            continue
        if ch == '"':
            return j
        j += 1
    return max(quote_column, len(line) - 1)


def scan(lines: list[str], start: Position | None = None) -> Iterator[tuple[Position, str, int]]:
    """Yield `(position, char, end_column)` for significant chars outside strings.

    String literals are yielded once, at their opening quote, with `end_column`
    set to the closing quote. Whitespace is skipped.
    """
    first_line = start.line if start else 0
    first_column = start.column if start else 0
    for line_index in range(first_line, len(lines)):
        line = lines[line_index]
        j = first_column if line_index == first_line else 0
        while j < len(line):
            ch = line[j]
            if ch == '"':
                end = string_end(line, j)
                yield Position(line_index, j), ch, end
                j = end + 1
                continue
            if not ch.isspace():
                yield Position(line_index, j), ch, j
            j += 1


def next_significant(lines: list[str], start: Position) -> tuple[Position, str] | None:
    """First non-whitespace char at or after `start`, crossing line breaks."""
    for line_index in range(start.line, len(lines)):
        line = lines[line_index]
        j = start.column if line_index == start.line else 0
        while j < len(line):
            if not line[j].isspace():
                return Position(line_index, j), line[j]
            j += 1
    return None


def iter_keys(lines: list[str], start: Position | None = None, *, scope_only: bool = False) -> Iterator[KeyToken]:
    """Yield every key token after `start` with its depth relative to `start`.

    With `scope_only`, iteration ends when the first container opened at or
    after `start` closes.
    """
    depth = 0
    entered = False
    for pos, ch, end in scan(lines, start):
        if ch in OPENERS:
            depth += 1
            entered = True
        elif ch in CLOSERS:
            depth -= 1
            if scope_only and entered and depth <= 0:
                return
        elif ch == '"':
            after = next_significant(lines, Position(pos.line, end + 1))
            if after is not None and after[1] == ":":
                raw = lines[pos.line][pos.column + 1 : end]
                yield KeyToken(position=pos, colon=after[0], raw=raw, depth=depth)


def find_key_positions(lines: list[str], raw_key: str) -> list[KeyToken]:
    """All key tokens whose source text equals `raw_key`, in document order."""
    return [token for token in iter_keys(lines) if token.raw == raw_key]


def first_char(lines: list[str], start: Position, wanted: str) -> Position | None:
    """Position of the first structural `wanted` char at or after `start`."""
    for pos, ch, _ in scan(lines, start):
        if ch == wanted:
            return pos
    return None


def matching_closer_position(
    lines: list[str],
    start: Position,
    open_char: str,
    close_char: str,
) -> Position | None:
    """Position where the depth opened at or after `start` returns to zero."""
    depth = 0
    for pos, ch, _ in scan(lines, start):
        if ch == open_char:
            depth += 1
        elif ch == close_char and depth > 0:
            depth -= 1
            if depth == 0:
                return pos
    return None


def matching_closer(lines: list[str], start_line_index: int, open_char: str, close_char: str) -> int | None:
    """Line index of the closer matching the first `open_char` from a line."""
    found = matching_closer_position(lines, Position(start_line_index, 0), open_char, close_char)
    return found.line if found else None


def value_span(lines: list[str], colon: Position) -> tuple[Position, Position] | None:
    """Inclusive `(start, end)` of the value following a key's colon."""
    head = next_significant(lines, colon.next_column())
    if head is None:
        return None
    start, ch = head
    if ch in PAIRS:
        end = matching_closer_position(lines, start, ch, PAIRS[ch])
        return (start, end) if end else None
    line = lines[start.line]
    if ch == '"':
        return start, Position(start.line, string_end(line, start.column))
    j = start.column
    while j + 1 < len(line) and line[j + 1] not in _SCALAR_STOP and not line[j + 1].isspace():
        j += 1
    return start, Position(start.line, j)


def first_colon_on_line(lines: list[str], line_index: int) -> Position | None:
    for pos, ch, _ in scan(lines, Position(line_index, 0)):
        if pos.line != line_index:
            return None
        if ch == ":":
            return pos
    return None


def end_of_value(lines: list[str], key_line_index: int) -> int | None:
    """Line index where the value introduced on `key_line_index` ends."""
    colon = first_colon_on_line(lines, key_line_index)
    if colon is None:
        return key_line_index
    span = value_span(lines, colon)
    return span[1].line if span else None


def container_holds_objects(lines: list[str], open_position: Position) -> bool:
    """True when any `{` opens before the container at `open_position` closes."""
    return bool(object_openers(lines, open_position))


def is_array_of_objects(lines: list[str], array_line_index: int) -> bool:
    """True when an object opens anywhere before the array starting here closes."""
    bracket = first_char(lines, Position(array_line_index, 0), "[")
    if bracket is None:
        return False
    return container_holds_objects(lines, bracket)


def object_openers(lines: list[str], open_position: Position) -> list[Position]:
    """Opening braces of every object inside a container, at any depth."""
    found: list[Position] = []
    depth = 0
    for pos, ch, _ in scan(lines, open_position):
        if ch in OPENERS:
            depth += 1
            if ch == "{" and depth >= 2:
                found.append(pos)
        elif ch in CLOSERS:
            depth -= 1
            if depth == 0:
                break
    return found


def detect_object_indent(lines: list[str], opening_line_index: int) -> str:
    """Indentation of the first property line inside an object."""
    for line in lines[opening_line_index + 1 :]:
        trimmed = line.strip()
        if not trimmed:
            continue
        if ":" in trimmed and '"' in trimmed:
            return indentation_of(line)
        if "}" in trimmed:
            break
    return indentation_of(lines[opening_line_index]) + DEFAULT_INDENT_UNIT


def detect_array_indent(lines: list[str], opening_line_index: int) -> str:
    """Indentation of the first element line inside an array."""
    for line in lines[opening_line_index + 1 :]:
        trimmed = line.strip()
        if not trimmed:
            continue
        if not trimmed.startswith("]"):
            return indentation_of(line)
        break
    return indentation_of(lines[opening_line_index]) + DEFAULT_INDENT_UNIT


def indent_unit(lines: list[str], opening_line_index: int) -> str:
    """One nesting level of indentation as used inside an object."""
    outer = indentation_of(lines[opening_line_index])
    inner = detect_object_indent(lines, opening_line_index)
    if inner.startswith(outer) and len(inner) > len(outer):
        return inner[len(outer) :]
    return DEFAULT_INDENT_UNIT
