"""Shared test fixtures: in-memory documents, fake compiler, scheduler."""

import os

# Keep a developer's GLSLX_* environment out of Settings() in tests.
for _key in [k for k in os.environ if k.startswith("GLSLX_")]:
    del os.environ[_key]

import pytest

from glslx_embedded.build.documents import InMemoryDocumentStore
from glslx_embedded.build.router import PositionRouter
from glslx_embedded.build.scheduler import BuildScheduler
from glslx_embedded.compiler.fakes import FakeCompiler
from glslx_embedded.compiler.schemas import PublishedDiagnostic


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def published() -> dict[str, list[PublishedDiagnostic]]:
    """Last diagnostics published per URI."""
    return {}


@pytest.fixture
def errors() -> list[str]:
    """Messages passed to the scheduler's error notifier."""
    return []


@pytest.fixture
def scheduler(
    store: InMemoryDocumentStore,
    compiler: FakeCompiler,
    published: dict[str, list[PublishedDiagnostic]],
    errors: list[str],
) -> BuildScheduler:
    return BuildScheduler(
        store,
        compiler,
        delay=0.01,
        publish=published.__setitem__,
        notify_error=errors.append,
    )


@pytest.fixture
def router(scheduler: BuildScheduler) -> PositionRouter:
    return PositionRouter(scheduler.cache)
