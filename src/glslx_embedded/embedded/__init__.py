"""Embedded fragment extraction: scan host text, project fragments."""

from glslx_embedded.embedded.projection import project
from glslx_embedded.embedded.scanner import scan_regions
from glslx_embedded.embedded.schemas import ParsedDocument, ScannerConfig, Span

__all__ = [
    "ParsedDocument",
    "ScannerConfig",
    "Span",
    "parse_document",
    "project",
    "scan_regions",
]


def parse_document(
    uri: str,
    source: str,
    language_id: str = "",
    config: ScannerConfig | None = None,
) -> ParsedDocument:
    """Scan *source* and bundle it with its spans."""
    return ParsedDocument(
        uri=uri,
        source=source,
        language_id=language_id,
        spans=scan_regions(source, language_id=language_id, config=config),
    )
