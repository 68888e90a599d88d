"""Pydantic models exchanged with the compiler.

Field aliases match the camelCase JSON produced by the Node.js bridge,
so bridge responses validate directly into these models.
"""

from pydantic import BaseModel, ConfigDict, Field

from glslx_embedded.constants import DiagnosticKind, PublishedSeverity


class _BridgeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SourcePosition(_BridgeModel):
    """Zero-based line and column."""

    line: int
    column: int


class SourceRange(_BridgeModel):
    """A range inside a named compiler source."""

    source: str | None = None
    start: SourcePosition
    end: SourcePosition


class SourceFile(_BridgeModel):
    """A named input handed to the compiler."""

    name: str
    contents: str


class CompilerDiagnostic(_BridgeModel):
    kind: DiagnosticKind
    range: SourceRange | None = None
    text: str


class UnusedSymbol(_BridgeModel):
    name: str
    range: SourceRange | None = None


class Tooltip(_BridgeModel):
    tooltip: str
    range: SourceRange
    documentation: str = ""


class Completion(_BridgeModel):
    kind: str
    name: str
    detail: str = ""
    documentation: str = ""


class Signature(_BridgeModel):
    text: str
    arguments: list[str] = Field(default_factory=lambda: list[str]())
    documentation: str = ""


class SignatureHelp(_BridgeModel):
    signatures: list[Signature] = Field(
        default_factory=lambda: list[Signature]()
    )
    active_signature: int = Field(default=-1, alias="activeSignature")
    active_argument: int = Field(default=-1, alias="activeArgument")


class DocumentSymbol(_BridgeModel):
    name: str
    kind: str
    range: SourceRange


class FormatOptions(_BridgeModel):
    indent: str = "  "
    newline: str = "\n"
    trailing_newline: str = Field(default="insert", alias="trailingNewline")


class CompileOutput(_BridgeModel):
    """Diagnostics half of a compile response."""

    diagnostics: list[CompilerDiagnostic] = Field(
        default_factory=lambda: list[CompilerDiagnostic]()
    )
    unused_symbols: list[UnusedSymbol] = Field(
        default_factory=lambda: list[UnusedSymbol](),
        alias="unusedSymbols",
    )


class PublishedDiagnostic(BaseModel):
    """A diagnostic ready to be shown in one document."""

    model_config = ConfigDict(frozen=True)

    severity: PublishedSeverity
    range: SourceRange
    message: str
    unnecessary: bool = False
