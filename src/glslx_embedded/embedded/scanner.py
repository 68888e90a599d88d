"""Find embedded GLSLX fragments in host-document text.

A fragment is a string literal introduced by a tag token that is
immediately followed by the delimiter, e.g. ``glsl`void main() {}```.
The first unescaped delimiter after the opening one closes the fragment;
nested delimiters are not supported.
"""

from __future__ import annotations

import functools
import re

from glslx_embedded.constants import ESCAPE_CHAR
from glslx_embedded.embedded.schemas import ScannerConfig, Span

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")

_DEFAULT_CONFIG = ScannerConfig()


def scan_regions(
    text: str,
    *,
    language_id: str = "",
    config: ScannerConfig | None = None,
) -> list[Span]:
    """Return the ordered, non-overlapping spans of embedded source.

    Documents whose language id is the embedded language itself are one
    span covering the whole text. Never raises: malformed input (an
    unterminated literal) simply yields no span for that literal.
    """
    cfg = config or _DEFAULT_CONFIG
    if language_id == cfg.language_id:
        return [Span(start=0, end=len(text))] if text else []
    return _scan_tagged(text, cfg)


def _scan_tagged(text: str, cfg: ScannerConfig) -> list[Span]:
    pattern = _tag_pattern(cfg)
    delimiter = cfg.delimiter
    spans: list[Span] = []
    pos = 0

    while True:
        match = pattern.search(text, pos)
        if match is None:
            break
        start = match.end() + 1  # skip the opening delimiter
        end = _find_closing(text, delimiter, start)
        if end is None:
            # Unterminated: no later delimiter can close anything either
            break
        if end > start:
            spans.append(Span(start=start, end=end))
        pos = end + 1

    return spans


def _find_closing(text: str, delimiter: str, pos: int) -> int | None:
    """Index of the next delimiter not escaped by an odd run of backslashes."""
    while True:
        idx = text.find(delimiter, pos)
        if idx == -1:
            return None
        backslashes = 0
        back = idx - 1
        while back >= 0 and text[back] == ESCAPE_CHAR:
            backslashes += 1
            back -= 1
        if backslashes % 2 == 0:
            return idx
        pos = idx + 1


@functools.lru_cache(maxsize=32)
def _tag_pattern(cfg: ScannerConfig) -> re.Pattern[str]:
    """Compile ``(tag1|tag2|...)`` followed by a delimiter lookahead.

    Identifier-like tags must start on an identifier boundary so that
    ``myglsl`...``` is not mistaken for a ``glsl`` literal.
    """
    alternatives: list[str] = []
    for tag in sorted(cfg.tag_tokens, key=len, reverse=True):
        escaped = re.escape(tag)
        if _IDENTIFIER_RE.fullmatch(tag):
            escaped = r"(?<![\w$])" + escaped
        alternatives.append(escaped)
    return re.compile(
        "(?:" + "|".join(alternatives) + ")(?=" + re.escape(cfg.delimiter) + ")"
    )
