"""Debounced rebuild of every open document.

Change notifications restart a single timer; when it expires, one rebuild
pass scans every open document, projects each span, compiles each
projection and swaps the result into the BuildCache. Passes never overlap.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from types import MappingProxyType
from typing import TypeAlias

from glslx_embedded.build.cache import BuildCache
from glslx_embedded.build.diagnostics import collect_diagnostics
from glslx_embedded.build.documents import DocumentStore, OpenDocument
from glslx_embedded.build.resolver import FragmentResolver
from glslx_embedded.build.schemas import (
    BuildResult,
    CompiledFragment,
    fragment_id,
)
from glslx_embedded.compiler.protocols import Analysis, Compiler
from glslx_embedded.compiler.schemas import PublishedDiagnostic, SourceFile
from glslx_embedded.constants import (
    DEFAULT_DEBOUNCE_SECONDS,
    MESSAGE_PREFIX,
    SchedulerState,
)
from glslx_embedded.embedded import parse_document, project
from glslx_embedded.embedded.schemas import ScannerConfig
from glslx_embedded.logger import BuildLogger
from glslx_embedded.resilience.errors import classify_error

logger = logging.getLogger(__name__)

DiagnosticsPublisher: TypeAlias = Callable[[str, list[PublishedDiagnostic]], None]
ErrorNotifier: TypeAlias = Callable[[str], None]


class DebounceTimer:
    """Fire-once timer; scheduling again cancels the pending one."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay: float) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()


class BuildScheduler:
    """Owns the BuildCache and the debounce timer.

    ``state`` is SCHEDULED while a timer is pending or its rebuild pass is
    still running, IDLE otherwise. Readers use ``cache.current``, which
    never blocks and is empty before the first pass completes.
    """

    def __init__(
        self,
        store: DocumentStore,
        compiler: Compiler,
        *,
        config: ScannerConfig | None = None,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        publish: DiagnosticsPublisher | None = None,
        notify_error: ErrorNotifier | None = None,
        build_logger: BuildLogger | None = None,
        cache: BuildCache | None = None,
    ) -> None:
        self.cache = cache or BuildCache()
        self._store = store
        self._compiler = compiler
        self._config = config
        self._delay = delay
        self._publish = publish
        self._notify_error = notify_error
        self._build_logger = build_logger
        self._timer = DebounceTimer(self._on_timer)
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[BuildResult] | None = None
        self._generation = 0
        self.rebuild_count = 0

    @property
    def state(self) -> SchedulerState:
        if self._timer.pending or (
            self._task is not None and not self._task.done()
        ):
            return SchedulerState.SCHEDULED
        return SchedulerState.IDLE

    def current(self) -> BuildResult:
        return self.cache.current

    def notify_change(self) -> None:
        """A document or watched file changed: (re)start the timer."""
        self._timer.schedule(self._delay)
        logger.debug("event=rebuild_scheduled delay=%s", self._delay)

    def _on_timer(self) -> None:
        self._task = asyncio.ensure_future(self.rebuild())
        self._task.add_done_callback(_log_crash)

    async def drain(self) -> BuildResult:
        """Wait for the in-flight rebuild pass, if any."""
        while self._task is not None and not self._task.done():
            await self._task
        return self.cache.current

    async def close(self) -> None:
        """Cancel the pending timer and let a running pass finish."""
        self._timer.cancel()
        await self.drain()

    async def rebuild(self) -> BuildResult:
        """Run one full pass and publish diagnostics for open documents.

        Any failure yields an empty result: diagnostics are cleared and
        queries see no fragments until the next successful pass.
        """
        async with self._lock:
            self._generation += 1
            generation = self._generation
            started = time.perf_counter()
            documents: Sequence[OpenDocument] = ()
            compiled: list[Analysis] = []
            error: str | None = None

            try:
                documents = self._store.all()
                result = await self._build(generation, documents, compiled)
            except Exception as e:  # noqa: BLE001
                error = str(e) or type(e).__name__
                logger.error(
                    "event=rebuild_failed generation=%d class=%s error=%s",
                    generation,
                    classify_error(e).value,
                    error,
                    exc_info=True,
                )
                if self._build_logger is not None:
                    self._build_logger.log_error("rebuild", error)
                if self._notify_error is not None:
                    self._notify_error(MESSAGE_PREFIX + error)
                await self._release(compiled)
                result = BuildResult.empty(generation)

            previous = self.cache.swap(result)
            self.rebuild_count += 1
            self._publish_all(result, documents)
            await self._release(
                [f.analysis for f in previous.all_fragments()]
            )

            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            fragment_count = len(result.all_fragments())
            logger.info(
                "event=rebuild_done generation=%d documents=%d "
                "fragments=%d duration_ms=%s",
                generation,
                len(documents),
                fragment_count,
                duration_ms,
            )
            if self._build_logger is not None:
                self._build_logger.log_rebuild(
                    generation,
                    len(documents),
                    fragment_count,
                    duration_ms,
                    error,
                )
            return result

    async def _build(
        self,
        generation: int,
        documents: Sequence[OpenDocument],
        compiled: list[Analysis],
    ) -> BuildResult:
        parsed = [
            parse_document(d.uri, d.text, d.language_id, self._config)
            for d in documents
        ]
        resolve = FragmentResolver({p.uri: p.source for p in parsed})

        by_uri: dict[str, tuple[CompiledFragment, ...]] = {}
        for doc in parsed:
            fragments: list[CompiledFragment] = []
            for index, span in enumerate(doc.spans):
                name = fragment_id(doc.uri, index)
                analysis = await self._compiler.compile(
                    SourceFile(name=name, contents=project(doc.source, span)),
                    resolve,
                )
                compiled.append(analysis)
                fragments.append(
                    CompiledFragment(
                        id=name,
                        document_uri=doc.uri,
                        span=span,
                        analysis=analysis,
                    )
                )
            by_uri[doc.uri] = tuple(fragments)

        return BuildResult(
            generation=generation, documents=MappingProxyType(by_uri)
        )

    def _publish_all(
        self, result: BuildResult, documents: Sequence[OpenDocument]
    ) -> None:
        if self._publish is None:
            return
        diagnostics = collect_diagnostics(result, [d.uri for d in documents])
        for uri, items in diagnostics.items():
            try:
                self._publish(uri, items)
            except Exception as e:  # noqa: BLE001
                logger.warning(
                    "event=publish_failed uri=%s class=%s error=%s",
                    uri,
                    classify_error(e).value,
                    e,
                )

    async def _release(self, analyses: Sequence[Analysis]) -> None:
        if not analyses:
            return
        try:
            await self._compiler.release(analyses)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "event=release_failed count=%d class=%s error=%s",
                len(analyses),
                classify_error(e).value,
                e,
            )


def _log_crash(task: asyncio.Task[BuildResult]) -> None:
    if task.cancelled():
        return
    e = task.exception()
    if e is None:
        return
    logger.error(
        "event=rebuild_crashed class=%s error=%s",
        classify_error(e).value,
        e,
        exc_info=e,
    )
