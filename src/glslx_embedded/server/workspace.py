"""Adapt a pygls workspace to the DocumentStore protocol."""

from __future__ import annotations

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer
from pygls.workspace import TextDocument


class PyglsDocument:
    """Read-only view of a pygls TextDocument."""

    def __init__(self, document: TextDocument) -> None:
        self._doc = document

    @property
    def uri(self) -> str:
        return self._doc.uri

    @property
    def text(self) -> str:
        return self._doc.source

    @property
    def language_id(self) -> str:
        return self._doc.language_id or ""

    @property
    def version(self) -> int | None:
        return self._doc.version

    def offset_at(self, line: int, character: int) -> int:
        return self._doc.offset_at_position(
            lsp.Position(line=line, character=character)
        )

    def end_position(self) -> tuple[int, int]:
        lines = self._doc.lines
        if not lines:
            return (0, 0)
        last = lines[-1]
        if last.endswith(("\n", "\r")):
            return (len(lines), 0)
        return (
            len(lines) - 1,
            self._doc.position_codec.client_num_units(last),
        )


class WorkspaceDocumentStore:
    """Documents currently open in the server's workspace.

    The workspace is looked up on every call because pygls only creates
    it during the initialize handshake.
    """

    def __init__(self, server: LanguageServer) -> None:
        self._server = server

    def all(self) -> list[PyglsDocument]:
        return [
            PyglsDocument(doc)
            for doc in self._server.workspace.text_documents.values()
        ]

    def get(self, uri: str) -> PyglsDocument | None:
        doc = self._server.workspace.text_documents.get(uri)
        return None if doc is None else PyglsDocument(doc)
