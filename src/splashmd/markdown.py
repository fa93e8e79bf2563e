"""Markdown decorator: replace fenced code blocks with highlighted HTML."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from splashmd.grammar import (
    DART,
    DEFAULT_GRAMMAR,
    JAVASCRIPT,
    KOTLIN,
    PYTHON,
    YAML,
    Grammar,
    grammar_for_name,
)
from splashmd.highlighter import SyntaxHighlighter
from splashmd.render import HTMLOutputFormat
from splashmd.strings import escape_html_entities
from splashmd.styles import StyleSheet, load_stylesheet
from splashmd.tokens import Position

logger = logging.getLogger(__name__)

FENCE = "```"
SKIP_HIGHLIGHTING_PREFIX = "no-highlight"

# Checked in order against the lowercased block body; first prefix wins.
LANGUAGE_TAGS: tuple[tuple[tuple[str, ...], Grammar], ...] = (
    (("yaml", "yml"), YAML),
    (("kotlin",), KOTLIN),
    (("python", "py"), PYTHON),
    (("dart",), DART),
    (("javascript", "js"), JAVASCRIPT),
)

_INFO_STRING_RE = re.compile(r"^[A-Za-z][\w+#.-]*$")


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """A fenced block body with its detected language.

    *raw* is the text between the fences, *code* the same text trimmed and
    *offset* the document offset of *raw*.
    """

    raw: str
    code: str
    grammar: Grammar | None
    tag: str | None
    skip: bool
    offset: int

    @property
    def code_offset(self) -> int:
        return self.offset + len(self.raw) - len(self.raw.lstrip())

    @property
    def info_string(self) -> str | None:
        """The text after the opening fence, if it reads like a bare language name."""
        first = self.raw.split("\n", 1)[0].strip()
        if _INFO_STRING_RE.match(first):
            return first
        return None


def detect_language(code: str) -> tuple[str | None, Grammar | None]:
    """Return the matching (tag, grammar) for a trimmed body, or (None, None)."""
    lowered = code.lower()
    for tags, grammar in LANGUAGE_TAGS:
        for tag in tags:
            if lowered.startswith(tag):
                return tag, grammar
    return None, None


def split_fences(markdown: str) -> list[str | CodeBlock]:
    """Split a document into literal text and fenced code blocks.

    Even-indexed pieces of the split are literal Markdown, odd-indexed
    pieces are fenced bodies.
    """
    segments: list[str | CodeBlock] = []
    offset = 0
    for index, component in enumerate(markdown.split(FENCE)):
        if index % 2 == 0:
            segments.append(component)
        else:
            code = component.strip()
            skip = code.startswith(SKIP_HIGHLIGHTING_PREFIX)
            tag, grammar = (None, None) if skip else detect_language(code)
            segments.append(CodeBlock(component, code, grammar, tag, skip, offset))
        offset += len(component) + len(FENCE)
    return segments


def find_unbalanced_fence(markdown: str) -> Position | None:
    """Return the position of a fence that is never closed, if any."""
    if markdown.count(FENCE) % 2 == 0:
        return None
    return Position.at(markdown, markdown.rfind(FENCE))


class MarkdownDecorator:
    """Decorate all code blocks within a Markdown string.

    Each block is replaced by highlighted HTML wrapped in
    ``<pre class="splash"><code>...</code></pre>``. A block whose body
    starts with ``no-highlight`` is escaped but not highlighted. A block
    whose body starts with no known language tag uses *grammar*. Input is
    assumed to have balanced fences.
    """

    def __init__(
        self,
        class_prefix: str = "",
        grammar: Grammar | str = DEFAULT_GRAMMAR,
        stylesheet: StyleSheet | None = None,
        *,
        inline: bool = True,
        strip_language_tag: bool = False,
    ) -> None:
        self.class_prefix = class_prefix
        self.grammar = grammar_for_name(grammar) if isinstance(grammar, str) else grammar
        self.stylesheet = stylesheet if stylesheet is not None else load_stylesheet()
        self.inline = inline
        self.strip_language_tag = strip_language_tag

    def decorate(self, markdown: str) -> str:
        output: list[str] = []
        for segment in split_fences(markdown):
            if isinstance(segment, str):
                output.append(segment)
                continue
            code = self.render_block(segment)
            output.append(f'<pre class="splash"><code>{code}</code></pre>')
        return "".join(output)

    def render_block(self, block: CodeBlock) -> str:
        """Render one fenced body with a fresh highlighter and builder."""
        if block.skip:
            return escape_html_entities(block.code[len(SKIP_HIGHLIGHTING_PREFIX + "\n") :])

        code = block.code
        grammar = block.grammar
        if grammar is None:
            logger.debug("no language tag matched, using %s", self.grammar.name)
            grammar = self.grammar
        elif self.strip_language_tag:
            code = _strip_tag_line(code, block.tag)

        return self.highlighter_for(grammar).highlight(code)

    def highlighter_for(self, grammar: Grammar) -> SyntaxHighlighter:
        fmt = HTMLOutputFormat(self.class_prefix, self.stylesheet, self.inline)
        return SyntaxHighlighter(fmt, grammar)


def _strip_tag_line(code: str, tag: str | None) -> str:
    """Drop the first line when it consists of exactly the language tag."""
    first, _, rest = code.partition("\n")
    if tag is not None and first.strip().lower() == tag:
        return rest
    return code
