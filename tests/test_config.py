"""Tests for Settings validators and environment loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from glslx_embedded.config import Settings
from glslx_embedded.embedded.schemas import ScannerConfig


class TestDefaults:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.language_id == "glslx"
        assert s.tag_tokens == ["glsl", "glslx", "/* glsl */", "/* glslx */"]
        assert s.delimiter == "`"
        assert s.debounce_seconds == 0.1
        assert s.log_dir is None

    def test_environment_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GLSLX_DEBOUNCE_SECONDS", "0.25")
        monkeypatch.setenv("GLSLX_LOG_DIR", "/tmp/glslx-logs")
        s = Settings()
        assert s.debounce_seconds == 0.25
        assert s.log_dir == Path("/tmp/glslx-logs")


class TestTagParsing:
    def test_comma_separated_string_parsed_to_list(self) -> None:
        """_parse_tags splits comma-separated strings."""
        s = Settings(tag_tokens="shader,frag")  # type: ignore[arg-type]
        assert s.tag_tokens == ["shader", "frag"]

    def test_comma_separated_with_spaces(self) -> None:
        s = Settings(tag_tokens="shader , /* glsl */")  # type: ignore[arg-type]
        assert s.tag_tokens == ["shader", "/* glsl */"]

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GLSLX_TAG_TOKENS", "a,b")
        assert Settings().tag_tokens == ["a", "b"]

    def test_list_passthrough(self) -> None:
        s = Settings(tag_tokens=["glsl"])
        assert s.tag_tokens == ["glsl"]


class TestValidation:
    def test_empty_tags_raise(self) -> None:
        with pytest.raises(ValueError, match="at least one tag"):
            Settings(tag_tokens="")  # type: ignore[arg-type]

    def test_duplicate_tags_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        """Duplicate tags log a warning but are kept."""
        with caplog.at_level(logging.WARNING, logger="glslx_embedded.config"):
            s = Settings(tag_tokens=["glsl", "glsl"])
        assert "Duplicate tags in GLSLX_TAG_TOKENS" in caplog.text
        assert s.tag_tokens == ["glsl", "glsl"]

    def test_no_warning_without_duplicates(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="glslx_embedded.config"):
            Settings(tag_tokens=["glsl", "glslx"])
        assert "Duplicate" not in caplog.text

    @pytest.mark.parametrize("delimiter", ["", "``"])
    def test_delimiter_must_be_one_char(self, delimiter: str) -> None:
        with pytest.raises(ValueError, match="exactly one character"):
            Settings(delimiter=delimiter)

    def test_negative_debounce_rejected(self) -> None:
        with pytest.raises(ValueError, match="must not be negative"):
            Settings(debounce_seconds=-1)


def test_scanner_config() -> None:
    s = Settings(tag_tokens=["shader"], delimiter='"', language_id="frag")
    assert s.scanner_config == ScannerConfig(
        language_id="frag", tag_tokens=("shader",), delimiter='"'
    )
