"""HTML entity escaping for highlighted code."""

from __future__ import annotations

_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\n": "<br>",
    " ": "&#9;",
}


def escape_html_entities(text: str) -> str:
    """Escape text for placement inside a highlighted code block.

    Only ``&``, ``<``, ``>``, newline and space are substituted. Newlines
    become ``<br>`` and spaces become a tab entity so indentation stays
    visible without a ``white-space`` rule. Quotes pass through unchanged.
    """
    result: list[str] = []
    for ch in text:
        result.append(_ENTITIES.get(ch, ch))
    return "".join(result)
