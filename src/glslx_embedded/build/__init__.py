"""Build layer: debounced rebuilds, cached results, position routing."""

from glslx_embedded.build.cache import BuildCache
from glslx_embedded.build.documents import (
    DocumentStore,
    InMemoryDocument,
    InMemoryDocumentStore,
    OpenDocument,
)
from glslx_embedded.build.resolver import (
    FragmentResolver,
    path_to_uri,
    uri_to_path,
)
from glslx_embedded.build.router import PositionRouter
from glslx_embedded.build.scheduler import BuildScheduler, DebounceTimer
from glslx_embedded.build.schemas import (
    BuildResult,
    CompiledFragment,
    fragment_id,
)

__all__ = [
    "BuildCache",
    "BuildResult",
    "BuildScheduler",
    "CompiledFragment",
    "DebounceTimer",
    "DocumentStore",
    "FragmentResolver",
    "InMemoryDocument",
    "InMemoryDocumentStore",
    "OpenDocument",
    "PositionRouter",
    "fragment_id",
    "path_to_uri",
    "uri_to_path",
]
