"""Document store interface and an in-memory implementation.

The language server adapts its workspace to DocumentStore; tests use
InMemoryDocumentStore. The core only reads documents, never edits them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")


class OpenDocument(Protocol):
    @property
    def uri(self) -> str: ...
    @property
    def text(self) -> str: ...
    @property
    def language_id(self) -> str: ...
    @property
    def version(self) -> int | None: ...

    def offset_at(self, line: int, character: int) -> int: ...
    def end_position(self) -> tuple[int, int]: ...


class DocumentStore(Protocol):
    def all(self) -> list[OpenDocument]: ...
    def get(self, uri: str) -> OpenDocument | None: ...


def _split_lines(text: str) -> list[str]:
    """Split on LSP line breaks only, keeping the terminators."""
    return _LINE_RE.findall(text)


def _utf16_units(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True)
class InMemoryDocument:
    """Plain document value; positions use UTF-16 columns like LSP."""

    uri: str
    text: str
    language_id: str = ""
    version: int | None = 0

    def offset_at(self, line: int, character: int) -> int:
        lines = _split_lines(self.text)
        if line >= len(lines):
            return len(self.text)
        offset = sum(len(ln) for ln in lines[:line])
        current = lines[line].rstrip("\r\n")
        units = 0
        for i, ch in enumerate(current):
            if units >= character:
                return offset + i
            units += _utf16_units(ch)
        return offset + len(current)

    def end_position(self) -> tuple[int, int]:
        lines = _split_lines(self.text)
        if not lines:
            return (0, 0)
        last = lines[-1]
        if last.endswith(("\n", "\r")):
            return (len(lines), 0)
        return (len(lines) - 1, _utf16_units(last))


class InMemoryDocumentStore:
    """Dict-backed DocumentStore for tests."""

    def __init__(self) -> None:
        self._docs: dict[str, InMemoryDocument] = {}

    def open(
        self,
        uri: str,
        text: str,
        language_id: str = "",
        version: int | None = 0,
    ) -> InMemoryDocument:
        doc = InMemoryDocument(uri, text, language_id, version)
        self._docs[uri] = doc
        return doc

    def update(self, uri: str, text: str) -> InMemoryDocument:
        old = self._docs[uri]
        version = None if old.version is None else old.version + 1
        return self.open(uri, text, old.language_id, version)

    def close(self, uri: str) -> None:
        self._docs.pop(uri, None)

    def all(self) -> list[OpenDocument]:
        return list(self._docs.values())

    def get(self, uri: str) -> OpenDocument | None:
        return self._docs.get(uri)
