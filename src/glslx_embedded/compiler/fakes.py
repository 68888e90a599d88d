"""In-memory fake compiler for testing.

Implements the Compiler and Analysis protocols without Node.js.
Diagnostics come from marker words in the source text:

- ``ERROR`` / ``WARN`` produce an error / a warning at that word
- ``unused <name>`` produces an unused-symbol entry for ``<name>``
- ``void <name>(`` declares a function symbol

Identifier queries (tooltip, definition, rename) look at the word under
the cursor in the virtual source.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from glslx_embedded.compiler.bridge import collect_includes
from glslx_embedded.compiler.protocols import Analysis, ResolveFn
from glslx_embedded.compiler.schemas import (
    Completion,
    CompilerDiagnostic,
    DocumentSymbol,
    FormatOptions,
    Signature,
    SignatureHelp,
    SourceFile,
    SourcePosition,
    SourceRange,
    Tooltip,
    UnusedSymbol,
)
from glslx_embedded.constants import DiagnosticKind, SymbolKindName

_WORD_RE = re.compile(r"[A-Za-z_]\w*")
_MARKER_RE = re.compile(r"\b(ERROR|WARN)\b")
_UNUSED_RE = re.compile(r"\bunused\s+([A-Za-z_]\w*)")
_FUNCTION_RE = re.compile(r"\bvoid\s+([A-Za-z_]\w*)\s*\(")


def position_at(text: str, offset: int) -> SourcePosition:
    """Line/column of *offset*, counting ``\\n`` as the line break."""
    line = text.count("\n", 0, offset)
    column = offset - (text.rfind("\n", 0, offset) + 1)
    return SourcePosition(line=line, column=column)


def offset_at(text: str, line: int, column: int) -> int:
    """Inverse of :func:`position_at`; clamps to the text length."""
    offset = 0
    for _ in range(line):
        nl = text.find("\n", offset)
        if nl == -1:
            return len(text)
        offset = nl + 1
    return min(offset + column, len(text))


def range_of(
    source: str, text: str, start: int, end: int
) -> SourceRange:
    return SourceRange(
        source=source,
        start=position_at(text, start),
        end=position_at(text, end),
    )


class FakeAnalysis:
    """Analysis computed eagerly from marker words."""

    def __init__(self, source: SourceFile) -> None:
        self.name = source.name
        self.contents = source.contents
        self.diagnostics: Sequence[CompilerDiagnostic] = [
            CompilerDiagnostic(
                kind=(
                    DiagnosticKind.ERROR
                    if m.group(1) == "ERROR"
                    else DiagnosticKind.WARNING
                ),
                range=range_of(self.name, self.contents, m.start(), m.end()),
                text=f"unexpected {m.group(1)}",
            )
            for m in _MARKER_RE.finditer(self.contents)
        ]
        self.unused_symbols: Sequence[UnusedSymbol] = [
            UnusedSymbol(
                name=m.group(1),
                range=range_of(
                    self.name, self.contents, m.start(1), m.end(1)
                ),
            )
            for m in _UNUSED_RE.finditer(self.contents)
        ]

    def _word_at(self, line: int, column: int) -> re.Match[str] | None:
        offset = offset_at(self.contents, line, column)
        for m in _WORD_RE.finditer(self.contents):
            if m.start() <= offset <= m.end():
                return m
        return None

    def _occurrences(self, word: str) -> list[SourceRange]:
        return [
            range_of(self.name, self.contents, m.start(), m.end())
            for m in re.finditer(rf"\b{re.escape(word)}\b", self.contents)
        ]

    async def tooltip(self, line: int, column: int) -> Tooltip | None:
        m = self._word_at(line, column)
        if m is None:
            return None
        return Tooltip(
            tooltip=f"float {m.group()}",
            range=range_of(self.name, self.contents, m.start(), m.end()),
            documentation=f"Docs for {m.group()}",
        )

    async def definition(self, line: int, column: int) -> SourceRange | None:
        m = self._word_at(line, column)
        if m is None:
            return None
        return self._occurrences(m.group())[0]

    async def rename(
        self, line: int, column: int
    ) -> list[SourceRange] | None:
        m = self._word_at(line, column)
        if m is None:
            return None
        return self._occurrences(m.group())

    async def completions(
        self, line: int, column: int
    ) -> list[Completion] | None:
        names = sorted({m.group(1) for m in _FUNCTION_RE.finditer(self.contents)})
        return [
            Completion(
                kind=SymbolKindName.FUNCTION,
                name=name,
                detail=f"void {name}()",
            )
            for name in names
        ] + [Completion(kind=SymbolKindName.KEYWORD, name="uniform")]

    async def signature(
        self, line: int, column: int
    ) -> SignatureHelp | None:
        return SignatureHelp(
            signatures=[
                Signature(
                    text="vec4 mix(vec4 x, vec4 y, float a)",
                    arguments=["vec4 x", "vec4 y", "float a"],
                )
            ],
            active_signature=0,
            active_argument=-1,
        )

    async def symbols(self) -> list[DocumentSymbol] | None:
        return [
            DocumentSymbol(
                name=m.group(1),
                kind=SymbolKindName.FUNCTION,
                range=range_of(
                    self.name, self.contents, m.start(1), m.end(1)
                ),
            )
            for m in _FUNCTION_RE.finditer(self.contents)
        ]


class FakeCompiler:
    """Records every call; optionally fails on compile."""

    def __init__(self) -> None:
        self.compiled: list[SourceFile] = []
        self.includes: dict[str, list[dict[str, object]]] = {}
        self.released: list[str] = []
        self.format_calls: list[tuple[str, FormatOptions]] = []
        self.format_result: str | None = None
        self.fail_with: Exception | None = None
        self.closed = False

    async def compile(
        self, source: SourceFile, resolve: ResolveFn
    ) -> FakeAnalysis:
        if self.fail_with is not None:
            raise self.fail_with
        self.compiled.append(source)
        self.includes[source.name] = collect_includes(source, resolve)
        return FakeAnalysis(source)

    async def format(self, text: str, options: FormatOptions) -> str:
        self.format_calls.append((text, options))
        return text if self.format_result is None else self.format_result

    async def release(self, analyses: Sequence[Analysis]) -> None:
        self.released.extend(a.name for a in analyses)

    async def close(self) -> None:
        self.closed = True
