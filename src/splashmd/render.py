"""HTML renderer: turns a highlighter's token events into styled markup."""

from __future__ import annotations

from dataclasses import dataclass

from splashmd.strings import escape_html_entities
from splashmd.styles import StyleSheet, load_stylesheet
from splashmd.tokens import Kind, kind_name

_CLOSE_WRAPPER = "\n</div><br>"


# ---------------------------------------------------------------------------
# Pending-run state
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Idle:
    """No run in progress."""


@dataclass(slots=True)
class Accumulating:
    """A run of same-kind tokens, plus whitespace seen since its last token."""

    text: str
    kind: Kind
    whitespace: str | None = None


_IDLE = Idle()


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class HTMLBuilder:
    """Accumulate token events into an HTML string.

    Consecutive tokens of the same kind are merged into one ``span``, even
    across intervening whitespace, which is then kept inside the span. In
    inline mode each span carries a ``style`` attribute resolved from the
    stylesheet; in class mode it carries ``class="<prefix><kind>"``.
    """

    def __init__(
        self,
        class_prefix: str = "",
        stylesheet: StyleSheet | None = None,
        *,
        inline: bool = True,
    ) -> None:
        self.class_prefix = class_prefix
        self._stylesheet = stylesheet if stylesheet is not None else StyleSheet.empty()
        self._inline = inline
        self._parts: list[str] = []
        self._state: Idle | Accumulating = _IDLE
        self._wrapped = False
        self._built = False

        if inline:
            style = self._stylesheet.default_block_style() or ""
            style = style.replace("\n", "").replace(" ", "")
            self._parts.append(f'<div style="{style}">\n')
            self._wrapped = True

    @property
    def inline(self) -> bool:
        return self._inline

    def flip_inline(self) -> None:
        """Toggle between inline-style and class rendering for later flushes."""
        self._inline = not self._inline

    def add_token(self, text: str, kind: Kind) -> None:
        self._check_open()
        state = self._state
        if isinstance(state, Accumulating) and state.kind == kind:
            if state.whitespace is not None:
                state.text += state.whitespace
                state.whitespace = None
            state.text += text
            return

        self._append_pending()
        self._state = Accumulating(text, kind)

    def add_plain_text(self, text: str) -> None:
        self._check_open()
        self._append_pending()
        self._parts.append(escape_html_entities(text))

    def add_whitespace(self, whitespace: str) -> None:
        self._check_open()
        state = self._state
        if isinstance(state, Accumulating):
            state.whitespace = (state.whitespace or "") + whitespace
        else:
            self._parts.append(whitespace)

    def build(self) -> str:
        """Flush the pending run, close the wrapper and return the HTML."""
        self._check_open()
        self._append_pending()
        if self._wrapped:
            self._parts.append(_CLOSE_WRAPPER)
        self._built = True
        return "".join(self._parts)

    def _append_pending(self) -> None:
        state = self._state
        if not isinstance(state, Accumulating):
            return

        name = kind_name(state.kind)
        text = escape_html_entities(state.text)
        if self._inline:
            style = self._stylesheet.body_after_selector(name).replace(" ", "")
            self._parts.append(f'<span style="{style}">{text}</span>')
        else:
            self._parts.append(f'<span class="{self.class_prefix}{name}">{text}</span>')

        if state.whitespace is not None:
            self._parts.append(state.whitespace)
        self._state = _IDLE

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError("builder already finalized by build()")


# ---------------------------------------------------------------------------
# Output format
# ---------------------------------------------------------------------------


@dataclass
class HTMLOutputFormat:
    """Factory for builders sharing one prefix, stylesheet and starting mode.

    The stylesheet is loaded once, here, when none is supplied.
    """

    class_prefix: str = ""
    stylesheet: StyleSheet | None = None
    inline: bool = True

    def __post_init__(self) -> None:
        if self.stylesheet is None:
            self.stylesheet = load_stylesheet()

    def make_builder(self) -> HTMLBuilder:
        return HTMLBuilder(self.class_prefix, self.stylesheet, inline=self.inline)
