"""Convert compiler schemas into lsprotocol types."""

from __future__ import annotations

from lsprotocol import types as lsp

from glslx_embedded.compiler.schemas import (
    Completion,
    DocumentSymbol,
    PublishedDiagnostic,
    SignatureHelp,
    SourceRange,
)
from glslx_embedded.constants import PublishedSeverity, SymbolKindName

DIAGNOSTIC_SOURCE = "glslx"

_SEVERITY: dict[PublishedSeverity, lsp.DiagnosticSeverity] = {
    PublishedSeverity.ERROR: lsp.DiagnosticSeverity.Error,
    PublishedSeverity.WARNING: lsp.DiagnosticSeverity.Warning,
    PublishedSeverity.HINT: lsp.DiagnosticSeverity.Hint,
}

_SYMBOL_KINDS: dict[str, lsp.SymbolKind] = {
    SymbolKindName.STRUCT: lsp.SymbolKind.Class,
    SymbolKindName.FUNCTION: lsp.SymbolKind.Function,
}

_COMPLETION_KINDS: dict[str, lsp.CompletionItemKind] = {
    SymbolKindName.STRUCT: lsp.CompletionItemKind.Class,
    SymbolKindName.FUNCTION: lsp.CompletionItemKind.Function,
    SymbolKindName.VARIABLE: lsp.CompletionItemKind.Variable,
}


def to_range(rng: SourceRange) -> lsp.Range:
    return lsp.Range(
        start=lsp.Position(line=rng.start.line, character=rng.start.column),
        end=lsp.Position(line=rng.end.line, character=rng.end.column),
    )


def to_diagnostic(diagnostic: PublishedDiagnostic) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=to_range(diagnostic.range),
        severity=_SEVERITY[diagnostic.severity],
        message=diagnostic.message,
        source=DIAGNOSTIC_SOURCE,
        tags=[lsp.DiagnosticTag.Unnecessary] if diagnostic.unnecessary else None,
    )


def markdown(value: str) -> lsp.MarkupContent:
    return lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=value)


def code_block(language: str, code: str, documentation: str = "") -> str:
    """Fenced code block followed by free-form documentation."""
    return f"```{language}\n{code}\n```\n{documentation}"


def to_symbol_information(
    symbol: DocumentSymbol, uri: str
) -> lsp.SymbolInformation:
    return lsp.SymbolInformation(
        name=symbol.name,
        kind=_SYMBOL_KINDS.get(symbol.kind, lsp.SymbolKind.Variable),
        location=lsp.Location(uri=uri, range=to_range(symbol.range)),
    )


def to_completion_item(
    completion: Completion, language: str
) -> lsp.CompletionItem:
    documentation = None
    if completion.detail:
        documentation = markdown(
            code_block(language, completion.detail, completion.documentation)
        )
    return lsp.CompletionItem(
        label=completion.name,
        kind=_COMPLETION_KINDS.get(
            completion.kind, lsp.CompletionItemKind.Keyword
        ),
        documentation=documentation,
    )


def to_signature_help(help_: SignatureHelp) -> lsp.SignatureHelp:
    return lsp.SignatureHelp(
        signatures=[
            lsp.SignatureInformation(
                label=signature.text,
                documentation=(
                    markdown(signature.documentation)
                    if signature.documentation
                    else None
                ),
                parameters=[
                    lsp.ParameterInformation(label=arg)
                    for arg in signature.arguments
                ],
            )
            for signature in help_.signatures
        ],
        active_signature=(
            help_.active_signature if help_.active_signature != -1 else None
        ),
        active_parameter=(
            help_.active_argument if help_.active_argument != -1 else None
        ),
    )
