"""Collect per-document diagnostics from a build result."""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Iterable

from glslx_embedded.build.schemas import BuildResult, CompiledFragment
from glslx_embedded.compiler.schemas import PublishedDiagnostic, SourceRange
from glslx_embedded.constants import DiagnosticKind, PublishedSeverity


def _belongs_to(fragment: CompiledFragment, rng: SourceRange | None) -> bool:
    # Ranges inside included files use that file's coordinates
    return rng is not None and rng.source in (None, fragment.id)


def fragment_diagnostics(
    fragment: CompiledFragment,
) -> list[PublishedDiagnostic]:
    """Errors, warnings and unused-symbol hints of one fragment."""
    out: list[PublishedDiagnostic] = []
    analysis = fragment.analysis

    for diagnostic in analysis.diagnostics:
        if diagnostic.range is None or not _belongs_to(fragment, diagnostic.range):
            continue
        out.append(
            PublishedDiagnostic(
                severity=(
                    PublishedSeverity.ERROR
                    if diagnostic.kind == DiagnosticKind.ERROR
                    else PublishedSeverity.WARNING
                ),
                range=diagnostic.range,
                message=diagnostic.text,
            )
        )

    for symbol in analysis.unused_symbols:
        if symbol.range is None or not _belongs_to(fragment, symbol.range):
            continue
        out.append(
            PublishedDiagnostic(
                severity=PublishedSeverity.HINT,
                range=symbol.range,
                message=f"{json.dumps(symbol.name)} is never used in this file",
                unnecessary=True,
            )
        )

    return out


def collect_diagnostics(
    result: BuildResult, uris: Iterable[str]
) -> dict[str, list[PublishedDiagnostic]]:
    """Diagnostics for every URI in *uris*; empty lists clear old ones."""
    by_uri: dict[str, list[PublishedDiagnostic]] = defaultdict(list)
    for fragment in result.all_fragments():
        by_uri[fragment.document_uri].extend(fragment_diagnostics(fragment))
    return {uri: by_uri.get(uri, []) for uri in uris}
