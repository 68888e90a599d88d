"""Build results: compiled fragments grouped per document."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from glslx_embedded.compiler.protocols import Analysis
from glslx_embedded.constants import REGION_ID_SEPARATOR
from glslx_embedded.embedded.schemas import Span


def fragment_id(document_uri: str, index: int) -> str:
    """Stable compiler source name for the *index*-th span of a document."""
    return f"{document_uri}{REGION_ID_SEPARATOR}{index}"


@dataclass(frozen=True)
class CompiledFragment:
    """One span of one document plus its compiler analysis."""

    id: str
    document_uri: str
    span: Span
    analysis: Analysis


@dataclass(frozen=True)
class BuildResult:
    """Output of one rebuild pass. Replaced wholesale, never mutated."""

    generation: int = 0
    documents: Mapping[str, tuple[CompiledFragment, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def empty(cls, generation: int = 0) -> BuildResult:
        return cls(generation=generation)

    def get(self, uri: str) -> tuple[CompiledFragment, ...] | None:
        return self.documents.get(uri)

    def all_fragments(self) -> list[CompiledFragment]:
        return [f for frags in self.documents.values() for f in frags]
