"""Holder for the current build result."""

from __future__ import annotations

from glslx_embedded.build.schemas import BuildResult


class BuildCache:
    """Swaps whole BuildResult objects; readers never see a partial build."""

    def __init__(self) -> None:
        self._current = BuildResult.empty()

    @property
    def current(self) -> BuildResult:
        return self._current

    def swap(self, result: BuildResult) -> BuildResult:
        """Install *result* and return the one it replaces."""
        previous, self._current = self._current, result
        return previous
