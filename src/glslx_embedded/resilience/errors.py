"""Compiler error taxonomy and classification.

Classifies exceptions raised at the compiler boundary to enable:
- Structured logging (which failures come from the bridge vs the compiler)
- Informative user messages (missing Node.js vs timeout vs crash)
- Bridge recovery (restart the child process only when it is unusable)
"""

from __future__ import annotations

import asyncio
from enum import Enum


class CompilerError(Exception):
    """The compiler rejected a request or failed while serving it."""


class BridgeUnavailableError(CompilerError):
    """The Node.js bridge could not be started or has exited."""


class BridgeTimeoutError(CompilerError):
    """The bridge did not answer within the configured timeout."""


class BridgeProtocolError(CompilerError):
    """The bridge answered with something that is not a valid response."""


class ErrorClass(Enum):
    UNAVAILABLE = "unavailable"  # node missing or exited, restart
    TIMEOUT = "timeout"  # no answer in time, restart
    PROTOCOL = "protocol"  # garbled stream, restart
    COMPILER = "compiler"  # compiler raised, bridge still healthy
    UNKNOWN = "unknown"  # unclassified


def classify_error(error: Exception) -> ErrorClass:
    """Classify an error raised while building or querying fragments.

    Checks the exception hierarchy first, falls back to builtin
    OS and timeout types for errors raised outside the bridge.
    """
    if isinstance(error, BridgeUnavailableError):
        return ErrorClass.UNAVAILABLE
    if isinstance(error, BridgeTimeoutError):
        return ErrorClass.TIMEOUT
    if isinstance(error, BridgeProtocolError):
        return ErrorClass.PROTOCOL
    if isinstance(error, CompilerError):
        return ErrorClass.COMPILER

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT
    if isinstance(error, (FileNotFoundError, BrokenPipeError, ConnectionResetError)):
        return ErrorClass.UNAVAILABLE

    return ErrorClass.UNKNOWN


_RESTARTABLE = frozenset({
    ErrorClass.UNAVAILABLE,
    ErrorClass.TIMEOUT,
    ErrorClass.PROTOCOL,
})


def is_restartable(error: Exception) -> bool:
    """Return True if the bridge process must be replaced after this error."""
    return classify_error(error) in _RESTARTABLE
