"""Grammars: classify source text into kinded fragments.

Lexing is delegated to Pygments. A grammar maps the Pygments token
hierarchy onto :class:`TokenKind` and applies a couple of structural
refinements (calls, property and dot access) that Pygments leaves as
bare names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    _TokenType,
)

from splashmd.errors import UnknownLanguageError
from splashmd.tokens import Token, TokenKind



class Grammar(Protocol):
    """Contract for anything that can classify source text."""

    name: str

    def classify(self, code: str) -> list[Token]:
        """Split *code* into ordered tokens covering it exactly."""
        ...


# Order matters: the first entry whose type contains the token wins.
_CLASSIFICATION: tuple[tuple[_TokenType, TokenKind], ...] = (
    (Keyword.Type, TokenKind.TYPE),
    (Keyword, TokenKind.KEYWORD),
    (Name.Builtin.Pseudo, TokenKind.KEYWORD),
    (Name.Builtin, TokenKind.TYPE),
    (Name.Class, TokenKind.TYPE),
    (Name.Exception, TokenKind.TYPE),
    (Name.Decorator, TokenKind.PREPROCESSING),
    (Name.Function, TokenKind.CALL),
    (Name.Attribute, TokenKind.PROPERTY),
    (Name.Property, TokenKind.PROPERTY),
    (Name.Tag, TokenKind.PROPERTY),
    (Comment.Preproc, TokenKind.PREPROCESSING),
    (Comment, TokenKind.COMMENT),
    (String, TokenKind.STRING),
    (Number, TokenKind.NUMBER),
)


def classify_token_type(ttype: _TokenType) -> TokenKind | None:
    """Map a Pygments token type to a kind, or None for plain text."""
    for parent, kind in _CLASSIFICATION:
        if ttype in parent:
            return kind
    if ttype in Name:
        return TokenKind.PLAIN
    return None


@dataclass(frozen=True)
class PygmentsGrammar:
    """A grammar backed by a Pygments lexer."""

    name: str
    lexer_name: str
    aliases: tuple[str, ...] = field(default=())

    def make_lexer(self) -> Lexer:
        # Keep leading/trailing newlines so fragments cover the input exactly
        return get_lexer_by_name(self.lexer_name, stripnl=False, ensurenl=False)

    def classify(self, code: str) -> list[Token]:
        raw = [(ttype, value) for ttype, value in self.make_lexer().get_tokens(code) if value]
        tokens: list[Token] = []

        for idx, (ttype, value) in enumerate(raw):
            kind = classify_token_type(ttype)
            if kind is TokenKind.PLAIN:
                kind = _refine_name(raw, idx)
            tokens.append(Token(value, kind))

        return tokens


def _refine_name(raw: list[tuple[_TokenType, str]], idx: int) -> TokenKind:
    """Classify a bare name by its neighbours."""
    nxt = raw[idx + 1][1] if idx + 1 < len(raw) else ""
    if nxt.startswith("("):
        return TokenKind.CALL

    prev = raw[idx - 1] if idx > 0 else None
    if prev is not None and prev[1] == "." and (prev[0] in Punctuation or prev[0] in Operator):
        before = raw[idx - 2] if idx > 1 else None
        if before is not None and (before[0] in Name or before[1][-1:] in (")", "]")):
            return TokenKind.PROPERTY
        return TokenKind.DOT_ACCESS

    return TokenKind.PLAIN


# ---------------------------------------------------------------------------
# Built-in grammars
# ---------------------------------------------------------------------------

SWIFT = PygmentsGrammar("swift", "swift")
YAML = PygmentsGrammar("yaml", "yaml", ("yml",))
KOTLIN = PygmentsGrammar("kotlin", "kotlin")
PYTHON = PygmentsGrammar("python", "python", ("py",))
DART = PygmentsGrammar("dart", "dart")
JAVASCRIPT = PygmentsGrammar("javascript", "javascript", ("js",))

GRAMMARS: dict[str, PygmentsGrammar] = {
    g.name: g for g in (SWIFT, YAML, KOTLIN, PYTHON, DART, JAVASCRIPT)
}

DEFAULT_GRAMMAR = SWIFT


def grammar_for_name(name: str) -> PygmentsGrammar:
    """Resolve a grammar by name or alias, case-insensitively."""
    key = name.strip().lower()
    for grammar in GRAMMARS.values():
        if key == grammar.name or key in grammar.aliases:
            return grammar
    raise UnknownLanguageError(name, sorted(GRAMMARS))
