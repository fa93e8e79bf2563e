"""Stylesheet loading and inline style resolution.

The resolver understands a deliberately narrow CSS dialect: a selector line
contains ``{``, and a class rule's style is the single line that follows its
selector. Multi-line rule bodies are truncated, not rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_STYLESHEET = "splash.css"


@dataclass(frozen=True, slots=True)
class StyleSheet:
    """An immutable style table: the non-empty lines of a CSS-like source."""

    lines: tuple[str, ...] = ()

    @classmethod
    def from_text(cls, text: str) -> StyleSheet:
        return cls(tuple(line for line in text.splitlines() if line))

    @classmethod
    def empty(cls) -> StyleSheet:
        return cls()

    def body_after_selector(self, class_name: str) -> str:
        """Return the inline style for ``pre code .<class_name>``, or ``""``."""
        selector = f"pre code .{class_name} {{"
        for idx, line in enumerate(self.lines):
            if selector in line:
                if idx + 1 < len(self.lines):
                    return self.lines[idx + 1].replace(" ", "")
                return ""
        return ""

    def default_block_style(self) -> str | None:
        """Return the body of the first rule block, or None if it never closes."""
        opened = False
        body: list[str] = []
        for line in self.lines:
            if opened:
                if "}" in line:
                    return "".join(body).replace("\n", "").replace(" ", "")
                body.append(line)
            elif "{" in line:
                opened = True
        return None


def load_stylesheet(path: Path | None = None) -> StyleSheet:
    """Read a stylesheet, falling back to an empty one on any read failure.

    With no *path* the bundled stylesheet is used.
    """
    try:
        if path is None:
            text = (
                resources.files("splashmd")
                .joinpath("data")
                .joinpath(DEFAULT_STYLESHEET)
                .read_text(encoding="utf-8")
            )
        else:
            text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(
            "Could not read stylesheet %s, continuing without styles: %s",
            path or DEFAULT_STYLESHEET,
            exc,
        )
        return StyleSheet.empty()
    return StyleSheet.from_text(text)
