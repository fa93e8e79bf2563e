"""Token kinds, token records, and whitespace splitting helpers."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    # Values double as CSS class names and stylesheet selector keys
    KEYWORD = "keyword"
    STRING = "string"
    TYPE = "type"
    CALL = "call"
    NUMBER = "number"
    COMMENT = "comment"
    PROPERTY = "property"
    DOT_ACCESS = "dotAccess"
    PREPROCESSING = "preprocessing"
    PLAIN = "plain"


# Grammars may emit their own kinds as plain strings.
Kind = TokenKind | str


def kind_name(kind: Kind) -> str:
    """Return the string form of a kind (CSS class / selector key)."""
    if isinstance(kind, TokenKind):
        return kind.value
    return kind


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int

    @classmethod
    def at(cls, source: str, offset: int) -> Position:
        """Compute the position of *offset* within *source*."""
        line = source.count("\n", 0, offset) + 1
        column = offset - (source.rfind("\n", 0, offset) + 1) + 1
        return cls(line, column, offset)


@dataclass(frozen=True, slots=True)
class Token:
    """A classified fragment of source text; kind None is plain text with no span."""

    text: str
    kind: Kind | None


_WS_RE = re.compile(r"(\s+)")


def split_whitespace(text: str) -> Iterator[tuple[str, bool]]:
    """Yield (piece, is_whitespace) pairs covering *text* in order."""
    for piece in _WS_RE.split(text):
        if piece:
            yield piece, piece.isspace()
