"""Tests for the region scanner."""

from __future__ import annotations

import pytest

from glslx_embedded.embedded import ScannerConfig, Span, scan_regions


def _texts(text: str, spans: list[Span]) -> list[str]:
    return [text[s.start:s.end] for s in spans]


class TestTaggedLiterals:
    def test_single_tagged_literal(self) -> None:
        text = "glsl`void main(){}`"
        spans = scan_regions(text)
        assert spans == [Span(start=5, end=18)]
        assert _texts(text, spans) == ["void main(){}"]

    def test_tag_without_delimiter_yields_nothing(self) -> None:
        assert scan_regions("glsl void main(){}") == []

    def test_plain_template_literal_is_ignored(self) -> None:
        assert scan_regions("const s = `void main(){}`;") == []

    def test_block_comment_tag(self) -> None:
        text = "const s = /* glsl */`uniform float t;`;"
        assert _texts(text, scan_regions(text)) == ["uniform float t;"]

    def test_glslx_tag(self) -> None:
        text = "x = glslx`void main(){}`"
        assert _texts(text, scan_regions(text)) == ["void main(){}"]

    def test_identifier_boundary_required(self) -> None:
        """``myglsl`` is not a ``glsl`` tag."""
        assert scan_regions("myglsl`void main(){}`") == []
        assert scan_regions("$glsl`void main(){}`") == []

    def test_member_access_tag_matches(self) -> None:
        text = "shaders.glsl`void main(){}`"
        assert _texts(text, scan_regions(text)) == ["void main(){}"]

    def test_two_sibling_literals_in_order(self) -> None:
        text = (
            "const a = glsl`void a(){}`;\n"
            "const b = glsl`void b(){}`;\n"
        )
        spans = scan_regions(text)
        assert _texts(text, spans) == ["void a(){}", "void b(){}"]
        assert spans[0].end < spans[1].start

    def test_multiline_literal(self) -> None:
        text = "f(glsl`\nvoid main() {\n}\n`)"
        assert _texts(text, scan_regions(text)) == ["\nvoid main() {\n}\n"]

    def test_unterminated_literal_dropped(self) -> None:
        assert scan_regions("glsl`void main(){}") == []

    def test_unterminated_after_complete_keeps_first(self) -> None:
        text = "glsl`a` + glsl`b"
        assert _texts(text, scan_regions(text)) == ["a"]

    def test_empty_literal_dropped(self) -> None:
        assert scan_regions("glsl``") == []

    def test_escaped_delimiter_does_not_close(self) -> None:
        text = r"glsl`a \` b`"
        assert _texts(text, scan_regions(text)) == [r"a \` b"]

    def test_escaped_backslash_before_delimiter_closes(self) -> None:
        text = r"glsl`a \\` + 1"
        assert _texts(text, scan_regions(text)) == [r"a \\"]

    def test_first_delimiter_closes_no_nesting(self) -> None:
        text = "glsl`a ${glsl`b`} c`"
        assert _texts(text, scan_regions(text)) == ["a ${glsl"]

    def test_custom_tags_and_delimiter(self) -> None:
        config = ScannerConfig(tag_tokens=("shader",), delimiter='"')
        text = 'x = shader"void main(){}"; glsl`ignored`'
        assert _texts(text, scan_regions(text, config=config)) == [
            "void main(){}"
        ]


class TestWholeDocument:
    def test_language_id_covers_full_text(self) -> None:
        text = "void main() { glsl`not a tag` }"
        assert scan_regions(text, language_id="glslx") == [
            Span(start=0, end=len(text))
        ]

    def test_empty_document_has_no_span(self) -> None:
        assert scan_regions("", language_id="glslx") == []

    def test_other_language_id_uses_tags(self) -> None:
        text = "glsl`x`"
        assert scan_regions(text, language_id="typescript") == [
            Span(start=5, end=6)
        ]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "`",
        "glsl`",
        "glsl```",
        "glsl`a`glsl`b`glsl`",
        "/* glsl */`\r\n`",
        "\\`glsl`\\",
        "glsl`" + "x" * 1000 + "`" * 3,
    ],
)
def test_spans_are_in_bounds_and_ordered(text: str) -> None:
    spans = scan_regions(text)
    last_end = -1
    for span in spans:
        assert 0 <= span.start < span.end <= len(text)
        assert span.start > last_end
        last_end = span.end
