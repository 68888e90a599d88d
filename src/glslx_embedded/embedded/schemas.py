"""Pydantic models for the scan → project data flow."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from glslx_embedded.constants import (
    DEFAULT_DELIMITER,
    DEFAULT_LANGUAGE_ID,
    DEFAULT_TAG_TOKENS,
)


class Span(BaseModel):
    """A half-open ``[start, end)`` character range of embedded source."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int

    @model_validator(mode="after")
    def _check_order(self) -> "Span":
        if self.end <= self.start:
            raise ValueError("span end must be greater than start")
        return self

    def contains(self, offset: int) -> bool:
        """Strict interior containment: both boundaries are outside."""
        return self.start < offset < self.end


class ParsedDocument(BaseModel):
    """One open document split into embedded-source spans."""

    uri: str
    source: str
    language_id: str = ""
    spans: list[Span] = Field(default_factory=lambda: list[Span]())


class ScannerConfig(BaseModel):
    """Tag tokens and delimiter recognised by the region scanner."""

    model_config = ConfigDict(frozen=True)

    language_id: str = DEFAULT_LANGUAGE_ID
    tag_tokens: tuple[str, ...] = DEFAULT_TAG_TOKENS
    delimiter: str = Field(default=DEFAULT_DELIMITER, min_length=1, max_length=1)
