"""Tests for the LSP server - diagnostic generation."""

from __future__ import annotations

from pathlib import Path

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from marklet.lsp import _validate


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///test.mkl") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="marklet", version=0, text=source)
        )

    return ls, published, put


# ---------------------------------------------------------------------------
# Lex errors
# ---------------------------------------------------------------------------


class TestLexErrors:
    def test_unterminated_string(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('p { "oops')
        _validate(ls, "file:///test.mkl")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert d.code == "unterminated-string"
        assert d.source == "marklet"
        # opening quote is at column 5 (1-based) → character 4 (0-based)
        assert d.range.start.line == 0
        assert d.range.start.character == 4


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------


class TestParseErrors:
    def test_every_diagnostic_published(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("a(1)\nb(k: 1, k: 2)")
        _validate(ls, "file:///test.mkl")

        diags = published[0].diagnostics
        assert [d.code for d in diags] == ["unexpected-token", "duplicate-argument"]
        assert diags[1].range.start.line == 1
        assert diags[1].range.start.character == 8

    def test_unclosed_block(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("node {")
        _validate(ls, "file:///test.mkl")

        (d,) = published[0].diagnostics
        assert d.code == "unexpected-eof"
        assert "'}'" in d.message


# ---------------------------------------------------------------------------
# Clean document → empty diagnostics
# ---------------------------------------------------------------------------


class TestCleanDocument:
    def test_valid_document(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('code-block(lang: "ts") { p { "hello" } }')
        _validate(ls, "file:///test.mkl")

        assert len(published) == 1
        assert published[0].diagnostics == []


# ---------------------------------------------------------------------------
# Config discovery next to the document
# ---------------------------------------------------------------------------


class TestConfig:
    def test_max_depth_from_marklet_toml(self, lsp_env, tmp_path: Path) -> None:
        ls, published, put = lsp_env
        (tmp_path / "marklet.toml").write_text("[parser]\nmax_depth = 1\n")
        uri = (tmp_path / "doc.mkl").as_uri()
        put("a { b { } }", uri)
        _validate(ls, uri)

        (d,) = published[0].diagnostics
        assert d.code == "nesting-too-deep"

    def test_malformed_marklet_toml_falls_back_to_defaults(
        self, lsp_env, tmp_path: Path
    ) -> None:
        ls, published, put = lsp_env
        (tmp_path / "marklet.toml").write_text("[parser\n")
        uri = (tmp_path / "doc.mkl").as_uri()
        put("a(1)", uri)
        _validate(ls, uri)

        (d,) = published[0].diagnostics
        assert d.code == "unexpected-token"
