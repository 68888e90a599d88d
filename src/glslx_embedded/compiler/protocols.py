"""Protocol-based compiler interfaces.

The Node.js bridge satisfies these protocols structurally (no inheritance).
Test doubles can be plain classes matching the same signatures.
"""

from collections.abc import Callable, Sequence
from typing import Protocol, TypeAlias

from glslx_embedded.compiler.schemas import (
    Completion,
    CompilerDiagnostic,
    DocumentSymbol,
    FormatOptions,
    SignatureHelp,
    SourceFile,
    SourceRange,
    Tooltip,
    UnusedSymbol,
)

# (reference text, URI of the including source) -> resolved file or None
ResolveFn: TypeAlias = Callable[[str, str], SourceFile | None]


class Analysis(Protocol):
    """Result of compiling one virtual source."""

    @property
    def name(self) -> str: ...
    @property
    def diagnostics(self) -> Sequence[CompilerDiagnostic]: ...
    @property
    def unused_symbols(self) -> Sequence[UnusedSymbol]: ...

    async def tooltip(self, line: int, column: int) -> Tooltip | None: ...
    async def definition(
        self, line: int, column: int
    ) -> SourceRange | None: ...
    async def rename(
        self, line: int, column: int
    ) -> list[SourceRange] | None: ...
    async def completions(
        self, line: int, column: int
    ) -> list[Completion] | None: ...
    async def signature(
        self, line: int, column: int
    ) -> SignatureHelp | None: ...
    async def symbols(self) -> list[DocumentSymbol] | None: ...


class Compiler(Protocol):
    async def compile(
        self, source: SourceFile, resolve: ResolveFn
    ) -> Analysis: ...
    async def format(self, text: str, options: FormatOptions) -> str: ...
    async def release(self, analyses: Sequence[Analysis]) -> None: ...
    async def close(self) -> None: ...
