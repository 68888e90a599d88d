"""Drive the ``glslx`` npm package through a persistent Node.js process.

The bridge script (``glslx_bridge.js``) reads one JSON request per line on
stdin and answers with one JSON line on stdout. Compiled results stay in
the Node.js process, keyed by a handle, so that queries can run against
them until the next rebuild releases them.

Include directives are resolved in Python before compiling: the resolve
callback is called for every ``#include "path"`` reachable from the
source and the resolved files ship with the compile request.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import os
import re
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from glslx_embedded.compiler.protocols import Analysis, ResolveFn
from glslx_embedded.compiler.schemas import (
    CompileOutput,
    Completion,
    CompilerDiagnostic,
    DocumentSymbol,
    FormatOptions,
    SignatureHelp,
    SourceFile,
    SourceRange,
    Tooltip,
    UnusedSymbol,
)
from glslx_embedded.config import Settings
from glslx_embedded.constants import (
    BRIDGE_SCRIPT_NAME,
    BRIDGE_STREAM_LIMIT,
    DEFAULT_COMPILER_TIMEOUT_SECONDS,
    ERROR_TRUNCATION_CHARS,
    BridgeOp,
)
from glslx_embedded.resilience.errors import (
    BridgeProtocolError,
    BridgeTimeoutError,
    BridgeUnavailableError,
    CompilerError,
    is_restartable,
)

logger = logging.getLogger(__name__)

_INCLUDE_RE = re.compile(r'^[ \t]*#include[ \t]+"([^"\n]*)"', re.MULTILINE)

BRIDGE_SCRIPT = Path(__file__).with_name(BRIDGE_SCRIPT_NAME)


def is_node_available(executable: str = "node") -> bool:
    """Check if the Node.js executable is installed."""
    return shutil.which(executable) is not None


def collect_includes(
    source: SourceFile, resolve: ResolveFn
) -> list[dict[str, Any]]:
    """Resolve every include reachable from *source*.

    Returns ``{"origin", "reference", "file"}`` entries; ``file`` is None
    when the reference could not be resolved. Each resolved file is
    scanned once, so include cycles terminate.
    """
    entries: list[dict[str, Any]] = []
    seen: set[tuple[str, str]] = set()
    visited = {source.name}
    pending = [source]

    while pending:
        current = pending.pop()
        for match in _INCLUDE_RE.finditer(current.contents):
            reference = match.group(1)
            key = (current.name, reference)
            if key in seen:
                continue
            seen.add(key)
            resolved = resolve(reference, current.name)
            entries.append({
                "origin": current.name,
                "reference": reference,
                "file": resolved.model_dump() if resolved else None,
            })
            if resolved is not None and resolved.name not in visited:
                visited.add(resolved.name)
                pending.append(resolved)

    return entries


class NodeBridge:
    """One Node.js child process speaking newline-delimited JSON.

    Requests are serialized with an asyncio.Lock: each request/response
    pair completes before the next request is written. Replies left over
    from cancelled requests are read and dropped by the next request. A
    bridge that times out or breaks the protocol is killed and restarted
    lazily on the next request; ``epoch`` counts the restarts.
    """

    def __init__(
        self,
        node_executable: str = "node",
        glslx_module: str = "glslx",
        timeout: float = DEFAULT_COMPILER_TIMEOUT_SECONDS,
        script: Path = BRIDGE_SCRIPT,
    ) -> None:
        self._node = node_executable
        self._module = glslx_module
        self._timeout = timeout
        self._script = script
        self._proc: asyncio.subprocess.Process | None = None
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self.epoch = 0

    @property
    def running(self) -> bool:
        return self._proc is not None and self._proc.returncode is None

    async def request(self, op: BridgeOp, **payload: Any) -> Any:
        """Send one request and return its ``value``.

        Raises CompilerError when the compiler reports a failure, and
        a bridge error subclass when the process itself is unusable.
        """
        async with self._lock:
            proc = await self._ensure_started()
            message = {"id": next(self._ids), "op": str(op), **payload}
            try:
                return await asyncio.wait_for(
                    self._roundtrip(proc, message), self._timeout
                )
            except TimeoutError as e:
                await self._terminate()
                raise BridgeTimeoutError(
                    f"glslx bridge did not answer {op} "
                    f"within {self._timeout}s"
                ) from e
            except CompilerError as e:
                if is_restartable(e):
                    await self._terminate()
                raise

    async def close(self) -> None:
        """Close stdin and wait for the process to exit."""
        async with self._lock:
            proc = self._proc
            self._proc = None
            if proc is None or proc.returncode is not None:
                return
            if proc.stdin is not None:
                proc.stdin.close()
            try:
                await asyncio.wait_for(proc.wait(), 2.0)
            except TimeoutError:
                proc.kill()
                await proc.wait()
            logger.info("event=bridge_stopped pid=%s", proc.pid)

    async def _ensure_started(self) -> asyncio.subprocess.Process:
        if self._proc is not None and self._proc.returncode is None:
            return self._proc

        executable = shutil.which(self._node)
        if executable is None:
            raise BridgeUnavailableError(
                f"Node.js executable {self._node!r} not found on PATH"
            )
        env = {**os.environ, "GLSLX_MODULE": self._module}
        try:
            self._proc = await asyncio.create_subprocess_exec(
                executable,
                str(self._script),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                env=env,
                limit=BRIDGE_STREAM_LIMIT,
            )
        except OSError as e:
            raise BridgeUnavailableError(
                f"could not start glslx bridge: {e}"
            ) from e
        self.epoch += 1
        logger.info(
            "event=bridge_started pid=%s epoch=%d",
            self._proc.pid,
            self.epoch,
        )
        return self._proc

    async def _roundtrip(
        self,
        proc: asyncio.subprocess.Process,
        message: dict[str, Any],
    ) -> Any:
        assert proc.stdin is not None and proc.stdout is not None
        try:
            proc.stdin.write((json.dumps(message) + "\n").encode("utf-8"))
            await proc.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise BridgeUnavailableError("glslx bridge exited") from e

        while True:
            response = await self._read_response(proc)
            reply_id = response.get("id")
            # Replies to cancelled requests arrive before ours; drop them
            if isinstance(reply_id, int) and reply_id < message["id"]:
                logger.debug(
                    "event=bridge_reply_discarded id=%d waiting=%d",
                    reply_id,
                    message["id"],
                )
                continue
            if reply_id != message["id"]:
                raise BridgeProtocolError(
                    f"glslx bridge answered out of order for {message['op']}"
                )
            break

        if not response.get("ok"):
            raise CompilerError(
                str(response.get("error"))[:ERROR_TRUNCATION_CHARS]
            )
        return response.get("value")

    async def _read_response(
        self, proc: asyncio.subprocess.Process
    ) -> dict[str, Any]:
        assert proc.stdout is not None
        try:
            line = await proc.stdout.readline()
        except ValueError as e:
            raise BridgeProtocolError(
                "glslx bridge response exceeded the stream limit"
            ) from e
        if not line:
            raise BridgeUnavailableError(
                f"glslx bridge exited with code {proc.returncode}"
            )

        try:
            response = json.loads(line)
        except json.JSONDecodeError as e:
            raise BridgeProtocolError(
                "glslx bridge sent invalid JSON: "
                + line.decode("utf-8", "replace")[:ERROR_TRUNCATION_CHARS]
            ) from e
        if not isinstance(response, dict):
            raise BridgeProtocolError("glslx bridge sent a non-object reply")
        return response

    async def _terminate(self) -> None:
        proc = self._proc
        self._proc = None
        if proc is None or proc.returncode is not None:
            return
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await proc.wait()
        logger.warning("event=bridge_killed pid=%s", proc.pid)


class BridgeAnalysis:
    """Analysis handle backed by a compile result held in the bridge."""

    def __init__(
        self,
        bridge: NodeBridge,
        handle: str,
        name: str,
        output: CompileOutput,
    ) -> None:
        self._bridge = bridge
        self._epoch = bridge.epoch
        self._released = False
        self.handle = handle
        self.name = name
        self.diagnostics: Sequence[CompilerDiagnostic] = output.diagnostics
        self.unused_symbols: Sequence[UnusedSymbol] = output.unused_symbols

    @property
    def stale(self) -> bool:
        """True once released, or once the bridge restarted and dropped it."""
        return (
            self._released
            or self._bridge.epoch != self._epoch
            or not self._bridge.running
        )

    def mark_released(self) -> None:
        self._released = True

    async def _query(self, op: BridgeOp, **payload: Any) -> Any:
        if self.stale:
            return None
        return await self._bridge.request(
            op, handle=self.handle, name=self.name, **payload
        )

    async def tooltip(self, line: int, column: int) -> Tooltip | None:
        value = await self._query(BridgeOp.TOOLTIP, line=line, column=column)
        return None if value is None else Tooltip.model_validate(value)

    async def definition(self, line: int, column: int) -> SourceRange | None:
        value = await self._query(
            BridgeOp.DEFINITION, line=line, column=column
        )
        return None if value is None else SourceRange.model_validate(value)

    async def rename(
        self, line: int, column: int
    ) -> list[SourceRange] | None:
        value = await self._query(BridgeOp.RENAME, line=line, column=column)
        if value is None:
            return None
        return [SourceRange.model_validate(r) for r in value]

    async def completions(
        self, line: int, column: int
    ) -> list[Completion] | None:
        value = await self._query(
            BridgeOp.COMPLETION, line=line, column=column
        )
        if value is None:
            return None
        return [Completion.model_validate(c) for c in value]

    async def signature(
        self, line: int, column: int
    ) -> SignatureHelp | None:
        value = await self._query(
            BridgeOp.SIGNATURE, line=line, column=column
        )
        return None if value is None else SignatureHelp.model_validate(value)

    async def symbols(self) -> list[DocumentSymbol] | None:
        value = await self._query(BridgeOp.SYMBOLS)
        if value is None:
            return None
        return [DocumentSymbol.model_validate(s) for s in value]


class NodeGlslxCompiler:
    """Compiler implementation backed by :class:`NodeBridge`."""

    def __init__(self, bridge: NodeBridge | None = None) -> None:
        self._bridge = bridge or NodeBridge()
        self._handles = itertools.count(1)
        # (epoch, handle) of compiles cancelled after the request was sent
        self._orphans: list[tuple[int, str]] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> NodeGlslxCompiler:
        return cls(
            NodeBridge(
                node_executable=settings.node_executable,
                glslx_module=settings.glslx_module,
                timeout=settings.compiler_timeout_seconds,
            )
        )

    async def compile(
        self, source: SourceFile, resolve: ResolveFn
    ) -> BridgeAnalysis:
        includes = collect_includes(source, resolve)
        handle = f"{next(self._handles)}:{source.name}"
        try:
            value = await self._bridge.request(
                BridgeOp.COMPILE,
                handle=handle,
                name=source.name,
                contents=source.contents,
                includes=includes,
            )
        except asyncio.CancelledError:
            self._orphans.append((self._bridge.epoch, handle))
            raise
        output = CompileOutput.model_validate(value or {})
        return BridgeAnalysis(self._bridge, handle, source.name, output)

    async def format(self, text: str, options: FormatOptions) -> str:
        value = await self._bridge.request(
            BridgeOp.FORMAT,
            text=text,
            options=options.model_dump(by_alias=True),
        )
        if not isinstance(value, str):
            raise BridgeProtocolError("glslx bridge format returned no text")
        return value

    async def release(self, analyses: Sequence[Analysis]) -> None:
        """Drop compile results in the bridge; released analyses answer None."""
        handles = [
            h for epoch, h in self._orphans if epoch == self._bridge.epoch
        ]
        self._orphans.clear()
        for a in analyses:
            if not isinstance(a, BridgeAnalysis):
                continue
            if not a.stale:
                handles.append(a.handle)
            a.mark_released()
        if handles:
            await self._bridge.request(BridgeOp.RELEASE, handles=handles)

    async def close(self) -> None:
        await self._bridge.close()
