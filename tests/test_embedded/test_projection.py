"""Tests for coordinate-preserving projection."""

from __future__ import annotations

from glslx_embedded.embedded import Span, project, scan_regions


def test_single_literal_scenario() -> None:
    text = "glsl`void main(){}`"
    span = scan_regions(text)[0]
    projected = project(text, span)

    assert len(projected) == len(text)
    assert projected[span.start:span.end] == "void main(){}"
    assert projected == "     void main(){} "


def test_line_breaks_survive_masking() -> None:
    text = "const a = 1;\r\nconst s = glsl`\nvoid main() {}\n`;\nexport {};\n"
    span = scan_regions(text)[0]
    projected = project(text, span)

    assert len(projected) == len(text)
    for i, (orig, proj) in enumerate(zip(text, projected, strict=True)):
        if span.start <= i < span.end:
            assert proj == orig
        elif orig in "\r\n":
            assert proj == orig
        else:
            assert proj == " "


def test_line_and_column_match_host_document() -> None:
    """Line/column of a token is identical in both texts."""
    text = "let x = 1;\nlet s = glsl`\n  float value;\n`;\n"
    span = scan_regions(text)[0]
    projected = project(text, span)

    offset = text.index("value")
    assert projected.index("value") == offset
    assert projected.count("\n", 0, offset) == text.count("\n", 0, offset)


def test_span_covering_everything_is_identity() -> None:
    text = "void main() {}\n"
    assert project(text, Span(start=0, end=len(text))) == text


def test_span_past_end_is_clamped() -> None:
    text = "abc"
    assert project(text, Span(start=1, end=10)) == " bc"


def _utf16_column(text: str, offset: int) -> int:
    line_start = text.rfind("\n", 0, offset) + 1
    return len(text[line_start:offset].encode("utf-16-le")) // 2


class TestNonBmpHostText:
    def test_astral_character_before_fragment(self) -> None:
        """An emoji in host code keeps compiler columns aligned with LSP."""
        text = 'const t = "\U0001f600"; const s = glsl`float value;`;'
        span = scan_regions(text)[0]
        projected = project(text, span)

        host = _utf16_column(text, text.index("value"))
        assert host == 37
        assert _utf16_column(projected, projected.index("value")) == host

    def test_utf16_length_preserved(self) -> None:
        text = "\U0001f600\né glsl`x \U0001f600 y`;\n\U0001f680"
        span = scan_regions(text)[0]
        projected = project(text, span)

        assert len(projected.encode("utf-16-le")) == len(
            text.encode("utf-16-le")
        )
        assert "x \U0001f600 y" in projected
        assert projected.split("\n")[1].startswith("  ")

    def test_bmp_characters_mask_to_one_space(self) -> None:
        text = "é中 glsl`a`"
        projected = project(text, scan_regions(text)[0])
        assert len(projected) == len(text)
