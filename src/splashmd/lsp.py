"""Minimal LSP server for splashmd: diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from splashmd.errors import UnknownLanguageError
from splashmd.grammar import DEFAULT_GRAMMAR, grammar_for_name
from splashmd.markdown import CodeBlock, find_unbalanced_fence, split_fences
from splashmd.tokens import Position as SourcePosition

server = LanguageServer("splashmd-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _range(pos: SourcePosition, length: int) -> Range:
    line = pos.line - 1
    col = pos.column - 1
    return Range(
        start=Position(line=line, character=col),
        end=Position(line=line, character=col + length),
    )


def _fallback_diagnostics(source: str) -> list[Diagnostic]:
    """Flag blocks whose info string names no grammar."""
    diagnostics: list[Diagnostic] = []
    for segment in split_fences(source):
        if not isinstance(segment, CodeBlock) or segment.skip or segment.grammar is not None:
            continue
        info = segment.info_string
        if info is None or "\n" not in segment.code:
            continue
        try:
            grammar_for_name(info)
        except UnknownLanguageError:
            pos = SourcePosition.at(source, segment.code_offset)
            diagnostics.append(
                Diagnostic(
                    range=_range(pos, len(info)),
                    message=(
                        f"unknown language '{info}', "
                        f"highlighting with {DEFAULT_GRAMMAR.name}"
                    ),
                    severity=DiagnosticSeverity.Information,
                    source="splashmd",
                )
            )
    return diagnostics


def _validate(ls: LanguageServer, uri: str) -> None:
    """Check a Markdown document's fences and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    diagnostics: list[Diagnostic] = []

    position = find_unbalanced_fence(source)
    if position is not None:
        diagnostics.append(
            Diagnostic(
                range=_range(position, 3),
                message="unclosed code fence",
                severity=DiagnosticSeverity.Warning,
                source="splashmd",
            )
        )
    else:
        diagnostics.extend(_fallback_diagnostics(source))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
