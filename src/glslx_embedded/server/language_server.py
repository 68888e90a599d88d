"""pygls language server wiring.

Document notifications feed the build scheduler; query requests go
through QueryService against whatever build is cached. Handler failures
are logged and shown to the user instead of failing the request.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from glslx_embedded import __version__
from glslx_embedded.build.router import PositionRouter
from glslx_embedded.build.scheduler import BuildScheduler
from glslx_embedded.compiler.bridge import NodeGlslxCompiler
from glslx_embedded.compiler.protocols import Compiler
from glslx_embedded.compiler.schemas import PublishedDiagnostic
from glslx_embedded.config import Settings
from glslx_embedded.constants import (
    COMPLETION_TRIGGERS,
    MESSAGE_PREFIX,
    SIGNATURE_TRIGGERS,
)
from glslx_embedded.logger import BuildLogger
from glslx_embedded.resilience.errors import classify_error
from glslx_embedded.server.convert import to_diagnostic
from glslx_embedded.server.queries import QueryService
from glslx_embedded.server.workspace import WorkspaceDocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GlslxLanguageServer(LanguageServer):
    """LanguageServer holding the scheduler, query service and compiler."""

    def __init__(self, settings: Settings, compiler: Compiler) -> None:
        super().__init__("glslx-embedded", __version__)
        self.settings = settings
        self.compiler = compiler
        self.store = WorkspaceDocumentStore(self)
        build_logger = (
            BuildLogger(settings.log_dir, settings.log_level)
            if settings.log_dir is not None
            else None
        )
        self.scheduler = BuildScheduler(
            self.store,
            compiler,
            config=settings.scanner_config,
            delay=settings.debounce_seconds,
            publish=self.publish,
            notify_error=self.show_error,
            build_logger=build_logger,
        )
        self.queries = QueryService(
            self.store,
            PositionRouter(self.scheduler.cache),
            compiler,
            language_id=settings.language_id,
        )

    def publish(self, uri: str, diagnostics: list[PublishedDiagnostic]) -> None:
        self.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(
                uri=uri,
                diagnostics=[to_diagnostic(d) for d in diagnostics],
            )
        )

    def show_error(self, message: str) -> None:
        self.window_show_message(
            lsp.ShowMessageParams(type=lsp.MessageType.Error, message=message)
        )

    def report(self, error: Exception) -> None:
        """Log a handler failure and surface it to the user."""
        logger.error(
            "event=request_failed class=%s error=%s",
            classify_error(error).value,
            error,
            exc_info=True,
        )
        self.show_error(MESSAGE_PREFIX + (str(error) or type(error).__name__))


def _reported(
    handler: Callable[[GlslxLanguageServer, Any], Awaitable[T]],
) -> Callable[[GlslxLanguageServer, Any], Awaitable[T | None]]:
    @functools.wraps(handler)
    async def wrapper(ls: GlslxLanguageServer, params: Any) -> T | None:
        try:
            return await handler(ls, params)
        except Exception as e:  # noqa: BLE001
            ls.report(e)
            return None

    return wrapper


def create_server(
    settings: Settings | None = None,
    compiler: Compiler | None = None,
) -> GlslxLanguageServer:
    """Build a server with every feature registered."""
    settings = settings or Settings()
    compiler = compiler or NodeGlslxCompiler.from_settings(settings)
    server = GlslxLanguageServer(settings, compiler)

    # ── Build triggers ───────────────────────────────────

    @server.feature(lsp.INITIALIZED)
    def initialized(ls: GlslxLanguageServer, params: lsp.InitializedParams) -> None:
        ls.scheduler.notify_change()

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(
        ls: GlslxLanguageServer, params: lsp.DidOpenTextDocumentParams
    ) -> None:
        ls.scheduler.notify_change()

    @server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
    def did_change(
        ls: GlslxLanguageServer, params: lsp.DidChangeTextDocumentParams
    ) -> None:
        ls.scheduler.notify_change()

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(
        ls: GlslxLanguageServer, params: lsp.DidCloseTextDocumentParams
    ) -> None:
        # Rebuilds only publish for open documents; clear this one now
        ls.publish(params.text_document.uri, [])
        ls.scheduler.notify_change()

    @server.feature(lsp.WORKSPACE_DID_CHANGE_WATCHED_FILES)
    def did_change_watched_files(
        ls: GlslxLanguageServer, params: lsp.DidChangeWatchedFilesParams
    ) -> None:
        ls.scheduler.notify_change()

    @server.feature(lsp.SHUTDOWN)
    async def shutdown(ls: GlslxLanguageServer, params: None) -> None:
        await ls.scheduler.close()
        await ls.compiler.close()

    # ── Queries ──────────────────────────────────────────

    @server.feature(lsp.TEXT_DOCUMENT_HOVER)
    @_reported
    async def hover(
        ls: GlslxLanguageServer, params: lsp.HoverParams
    ) -> lsp.Hover | None:
        return await ls.queries.hover(params.text_document.uri, params.position)

    @server.feature(lsp.TEXT_DOCUMENT_DEFINITION)
    @_reported
    async def definition(
        ls: GlslxLanguageServer, params: lsp.DefinitionParams
    ) -> lsp.Location | None:
        return await ls.queries.definition(
            params.text_document.uri, params.position
        )

    @server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
    @_reported
    async def document_symbol(
        ls: GlslxLanguageServer, params: lsp.DocumentSymbolParams
    ) -> list[lsp.SymbolInformation] | None:
        return await ls.queries.document_symbols(params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_RENAME)
    @_reported
    async def rename(
        ls: GlslxLanguageServer, params: lsp.RenameParams
    ) -> lsp.WorkspaceEdit | None:
        return await ls.queries.rename(
            params.text_document.uri, params.position, params.new_name
        )

    @server.feature(lsp.TEXT_DOCUMENT_FORMATTING)
    @_reported
    async def formatting(
        ls: GlslxLanguageServer, params: lsp.DocumentFormattingParams
    ) -> list[lsp.TextEdit] | None:
        return await ls.queries.format(params.text_document.uri, params.options)

    @server.feature(
        lsp.TEXT_DOCUMENT_COMPLETION,
        lsp.CompletionOptions(trigger_characters=COMPLETION_TRIGGERS),
    )
    @_reported
    async def completion(
        ls: GlslxLanguageServer, params: lsp.CompletionParams
    ) -> list[lsp.CompletionItem] | None:
        return await ls.queries.completion(
            params.text_document.uri, params.position
        )

    @server.feature(
        lsp.TEXT_DOCUMENT_SIGNATURE_HELP,
        lsp.SignatureHelpOptions(trigger_characters=SIGNATURE_TRIGGERS),
    )
    @_reported
    async def signature_help(
        ls: GlslxLanguageServer, params: lsp.SignatureHelpParams
    ) -> lsp.SignatureHelp | None:
        return await ls.queries.signature_help(
            params.text_document.uri, params.position
        )

    return server
