"""Syntax-highlighted HTML for code tokens and Markdown code blocks."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from splashmd.styles import StyleSheet

__version__ = "0.1.0"


def decorate(
    markdown: str,
    class_prefix: str = "",
    language: str = "swift",
    stylesheet: StyleSheet | None = None,
) -> str:
    """Replace every fenced code block in *markdown* with highlighted HTML."""
    from splashmd.markdown import MarkdownDecorator

    return MarkdownDecorator(class_prefix, language, stylesheet).decorate(markdown)


def highlight(
    code: str,
    language: str = "swift",
    class_prefix: str = "",
    stylesheet: StyleSheet | None = None,
) -> str:
    """Render *code* in *language* as highlighted HTML."""
    from splashmd.grammar import grammar_for_name
    from splashmd.highlighter import SyntaxHighlighter
    from splashmd.render import HTMLOutputFormat

    fmt = HTMLOutputFormat(class_prefix, stylesheet)
    return SyntaxHighlighter(fmt, grammar_for_name(language)).highlight(code)
