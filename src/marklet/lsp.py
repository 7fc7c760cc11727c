"""Minimal LSP server for Marklet: diagnostics only."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

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

from marklet import __version__
from marklet.config import ParserOptions, load_options
from marklet.errors import Diagnostic as MarkletDiagnostic
from marklet.parser import parse_result

logger = logging.getLogger(__name__)

server = LanguageServer(
    "marklet-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def to_lsp_diagnostic(diag: MarkletDiagnostic) -> Diagnostic:
    """Convert a Marklet diagnostic (1-based positions) to an LSP one (0-based)."""
    return Diagnostic(
        range=Range(
            start=Position(line=diag.span.start.line - 1, character=diag.span.start.column - 1),
            end=Position(line=diag.span.end.line - 1, character=diag.span.end.column - 1),
        ),
        message=diag.message,
        severity=DiagnosticSeverity.Error,
        code=diag.kind.value,
        source="marklet",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document and publish every diagnostic."""
    doc = ls.workspace.get_text_document(uri)
    try:
        options = load_options(None, Path(doc.path).parent)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("ignoring malformed config next to %s: %s", uri, exc)
        options = ParserOptions()

    result = parse_result(doc.source, options)
    logger.debug("validated %s: %d diagnostic(s)", uri, len(result.diagnostics))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(
            uri=uri,
            diagnostics=[to_lsp_diagnostic(d) for d in result.diagnostics],
        )
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
