"""Field paths that reference a value within a JSON-like object.

A field path uses JavaScript-style syntax without a leading period, for
example ``metadata.name``, ``spec.containers[0].name``, ``data[.config.yml]``
or ``metadata.annotations['example.org/name']``.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import SupportsIndex, overload

from xpruntime.errors import Error

__all__ = [
    "SegmentType",
    "Segment",
    "Segments",
    "ParseError",
    "field_or_index",
    "field",
    "parse",
]

_MAX_INDEX = 2**32 - 1
_DIGITS = re.compile(r"[0-9]+")
_SPECIAL = re.compile(r"[.\[\]]")


class SegmentType(enum.Enum):
    """Whether a segment names an object field or an array index."""

    FIELD = 1
    INDEX = 2


@dataclass(frozen=True)
class Segment:
    """One segment of a field path."""

    type: SegmentType
    field: str = ""
    index: int = 0


class Segments(list):
    """The segments of a field path. Renders back to a field path string."""

    @overload
    def __getitem__(self, key: SupportsIndex) -> Segment: ...

    @overload
    def __getitem__(self, key: slice) -> Segments: ...

    def __getitem__(self, key):
        result = super().__getitem__(key)
        if isinstance(key, slice):
            return Segments(result)
        return result

    def __str__(self) -> str:
        parts = []
        for seg in self:
            if seg.type is SegmentType.FIELD:
                if "." in seg.field:
                    parts.append(f"[{seg.field}]")
                else:
                    parts.append(f".{seg.field}")
            else:
                parts.append(f"[{seg.index}]")
        text = "".join(parts)
        return text[1:] if text.startswith(".") else text


class ParseError(Error):
    """A field path could not be parsed."""

    def __init__(self, reason: str, position: int) -> None:
        super().__init__(f"{reason} at position {position}")
        self.reason = reason
        self.position = position


def field_or_index(s: str) -> Segment:
    """Return an index segment if s is an unsigned 32 bit integer, else a field."""
    if _DIGITS.fullmatch(s):
        value = int(s)
        if value <= _MAX_INDEX:
            return Segment(SegmentType.INDEX, index=value)
    return field(s)


def field(s: str) -> Segment:
    """Return a field segment, with surrounding quotes removed."""
    return Segment(SegmentType.FIELD, field=s.strip("'\""))


def _error(path: str, pos: int, reason: str) -> ParseError:
    # Positions are reported as byte offsets of the UTF-8 encoded path.
    return ParseError(reason, len(path[:pos].encode("utf-8")))


def _lex(path: str) -> Iterator[Segment]:
    pos = 0
    end = len(path)
    while True:
        start = pos
        match = _SPECIAL.search(path, pos)
        if match is None:
            if end > start:
                yield field(path[start:])
            return

        i = match.start()
        ch = path[i]
        if ch == "]":
            raise _error(path, i, "unexpected ']'")
        if i > start:
            yield field(path[start:i])
        pos = i

        if ch == ".":
            if pos == 0 or pos == end - 1:
                raise _error(path, pos, "unexpected '.'")
            pos += 1
            if path[pos] == ".":
                raise _error(path, pos, "unexpected '.'")
            if path[pos] == "[":
                raise _error(path, pos, "unexpected '['")
            continue

        close = path.find("]", pos)
        if close < 0:
            raise _error(path, pos, "unterminated '['")
        pos += 1
        if close == pos:
            raise _error(path, pos, "unexpected ']'")
        inner = path.find("[", pos, close)
        if inner >= 0:
            raise _error(path, inner, "unexpected '['")
        yield field_or_index(path[pos:close])
        pos = close + 1


def parse(path: str) -> Segments:
    """Parse a field path into segments. Raises ParseError if it is malformed."""
    return Segments(_lex(path))