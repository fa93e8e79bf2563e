"""--debug token stream dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from splashmd.grammar import Grammar
from splashmd.markdown import CodeBlock, split_fences
from splashmd.tokens import Token, kind_name


def dump_fragments(fragments: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per classified fragment to *file*."""
    for token in fragments:
        label = kind_name(token.kind) if token.kind is not None else "-"
        file.write(f"  {label:<14} {token.text!r}\n")


def dump_blocks(markdown: str, default: Grammar, *, file: TextIO = sys.stderr) -> None:
    """Print the classified fragments of every fenced block in *markdown*."""
    blocks = [s for s in split_fences(markdown) if isinstance(s, CodeBlock)]
    for number, block in enumerate(blocks, start=1):
        if block.skip:
            file.write(f"Block {number} (no-highlight)\n")
            continue
        grammar = block.grammar if block.grammar is not None else default
        file.write(f"Block {number} ({grammar.name})\n")
        dump_fragments(grammar.classify(block.code), file=file)
