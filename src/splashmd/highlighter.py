"""Drive an output builder from a grammar's classified fragments."""

from __future__ import annotations

from typing import Protocol

from splashmd.grammar import DEFAULT_GRAMMAR, Grammar
from splashmd.render import HTMLOutputFormat
from splashmd.tokens import Kind, Token, split_whitespace


class OutputBuilder(Protocol):
    """Event sink a highlighter feeds; see :class:`splashmd.render.HTMLBuilder`."""

    def add_token(self, text: str, kind: Kind) -> None: ...

    def add_plain_text(self, text: str) -> None: ...

    def add_whitespace(self, whitespace: str) -> None: ...

    def build(self) -> str: ...


class SyntaxHighlighter:
    """Highlight source code with one grammar into one output format."""

    def __init__(self, format: HTMLOutputFormat, grammar: Grammar = DEFAULT_GRAMMAR) -> None:
        self.format = format
        self.grammar = grammar

    def fragments(self, code: str) -> list[Token]:
        return self.grammar.classify(code)

    def highlight(self, code: str) -> str:
        """Return *code* rendered as HTML by a fresh builder."""
        builder = self.format.make_builder()
        feed(builder, self.fragments(code))
        return builder.build()


def feed(builder: OutputBuilder, fragments: list[Token]) -> None:
    """Send fragments to *builder*, routing every whitespace run separately."""
    for token in fragments:
        for piece, is_ws in split_whitespace(token.text):
            if is_ws:
                builder.add_whitespace(piece)
            elif token.kind is None:
                builder.add_plain_text(piece)
            else:
                builder.add_token(piece, token.kind)
