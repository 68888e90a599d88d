"""Route a document offset to the compiled fragment that owns it."""

from __future__ import annotations

from glslx_embedded.build.cache import BuildCache
from glslx_embedded.build.schemas import CompiledFragment


class PositionRouter:
    """Reads the scheduler's cache; never triggers a rebuild."""

    def __init__(self, cache: BuildCache) -> None:
        self._cache = cache

    def fragments(self, uri: str) -> tuple[CompiledFragment, ...] | None:
        """Cached fragments of *uri* in span order, or None if not built."""
        return self._cache.current.get(uri)

    def locate(self, uri: str, offset: int) -> CompiledFragment | None:
        """The fragment whose span strictly contains *offset*.

        Offsets on a span boundary (next to a delimiter) belong to the
        host document, so they resolve to None.
        """
        for fragment in self.fragments(uri) or ():
            if fragment.span.contains(offset):
                return fragment
        return None
