"""Compiler boundary: schemas, protocols and the glslx Node.js bridge."""

from glslx_embedded.compiler.bridge import (
    NodeBridge,
    NodeGlslxCompiler,
    collect_includes,
    is_node_available,
)
from glslx_embedded.compiler.protocols import Analysis, Compiler, ResolveFn
from glslx_embedded.compiler.schemas import (
    Completion,
    CompilerDiagnostic,
    DocumentSymbol,
    FormatOptions,
    PublishedDiagnostic,
    SignatureHelp,
    SourceFile,
    SourcePosition,
    SourceRange,
    Tooltip,
    UnusedSymbol,
)

__all__ = [
    "Analysis",
    "Compiler",
    "CompilerDiagnostic",
    "Completion",
    "DocumentSymbol",
    "FormatOptions",
    "NodeBridge",
    "NodeGlslxCompiler",
    "PublishedDiagnostic",
    "ResolveFn",
    "SignatureHelp",
    "SourceFile",
    "SourcePosition",
    "SourceRange",
    "Tooltip",
    "UnusedSymbol",
    "collect_includes",
    "is_node_available",
]
