"""Coordinate-preserving projection of one fragment out of its document."""

from __future__ import annotations

from glslx_embedded.constants import LINE_BREAKS
from glslx_embedded.embedded.schemas import Span


def project(text: str, span: Span) -> str:
    """Mask everything outside *span* with spaces, keeping line breaks.

    The result has the same length as *text* in UTF-16 code units, the
    unit both the compiler and LSP count columns in, so line/column
    positions computed on the projection are positions in the original
    document. Characters outside the Basic Multilingual Plane are masked
    with two spaces; for BMP-only text the lengths in characters match too.
    See https://code.visualstudio.com/api/language-extensions/embedded-languages
    """
    start = min(span.start, len(text))
    end = min(span.end, len(text))
    return _mask(text[:start]) + text[start:end] + _mask(text[end:])


def _mask(segment: str) -> str:
    return "".join(
        ch if ch in LINE_BREAKS else "  " if ord(ch) > 0xFFFF else " "
        for ch in segment
    )
