"""Shared test fixtures and helpers."""

from __future__ import annotations

import re

import pytest

from splashmd.styles import StyleSheet
from splashmd.tokens import Kind, Token

SAMPLE_CSS = """\
pre code {
    background: #000;
}

pre code .keyword {
    color: #fff;
}

pre code .string {
    color: red;
}
"""


class WordGrammar:
    """Classifies whole words by lookup; everything else is plain text.

    Records every source it classifies so tests can tell which grammar ran.
    """

    def __init__(self, kinds: dict[str, Kind], default: Kind | None = None, name: str = "words"):
        self.name = name
        self.kinds = kinds
        self.default = default
        self.calls: list[str] = []

    def classify(self, code: str) -> list[Token]:
        self.calls.append(code)
        fragments: list[Token] = []
        for piece in re.split(r"(\w+)", code):
            if not piece:
                continue
            if re.fullmatch(r"\w+", piece):
                fragments.append(Token(piece, self.kinds.get(piece, self.default)))
            else:
                fragments.append(Token(piece, None))
        return fragments


@pytest.fixture
def sheet() -> StyleSheet:
    """A small stylesheet with a block rule and two class rules."""
    return StyleSheet.from_text(SAMPLE_CSS)


@pytest.fixture
def word_grammar():
    """Return a factory for WordGrammar instances."""

    def _make(kinds: dict[str, Kind] | None = None, default: Kind | None = None) -> WordGrammar:
        return WordGrammar(kinds or {}, default)

    return _make
