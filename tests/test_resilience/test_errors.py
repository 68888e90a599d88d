"""Tests for compiler error classification."""

from __future__ import annotations

import asyncio

from glslx_embedded.resilience.errors import (
    BridgeProtocolError,
    BridgeTimeoutError,
    BridgeUnavailableError,
    CompilerError,
    ErrorClass,
    classify_error,
    is_restartable,
)

# ── classify_error ───────────────────────────────────────────


def test_classify_bridge_unavailable() -> None:
    """Missing Node.js or exited bridge → UNAVAILABLE."""
    err = BridgeUnavailableError("node not found")
    assert classify_error(err) == ErrorClass.UNAVAILABLE


def test_classify_bridge_timeout() -> None:
    assert classify_error(BridgeTimeoutError()) == ErrorClass.TIMEOUT


def test_classify_bridge_protocol() -> None:
    assert classify_error(BridgeProtocolError()) == ErrorClass.PROTOCOL


def test_classify_compiler_error() -> None:
    """Plain CompilerError → COMPILER; the bridge itself is fine."""
    assert classify_error(CompilerError("bad input")) == ErrorClass.COMPILER


def test_classify_builtin_timeout() -> None:
    """TimeoutError instance → TIMEOUT (no string matching)."""
    assert classify_error(TimeoutError()) == ErrorClass.TIMEOUT
    assert classify_error(asyncio.TimeoutError()) == ErrorClass.TIMEOUT


def test_classify_os_errors_as_unavailable() -> None:
    assert classify_error(FileNotFoundError()) == ErrorClass.UNAVAILABLE
    assert classify_error(BrokenPipeError()) == ErrorClass.UNAVAILABLE
    assert classify_error(ConnectionResetError()) == ErrorClass.UNAVAILABLE


def test_classify_unknown() -> None:
    assert classify_error(ValueError("something else")) == ErrorClass.UNKNOWN


# ── is_restartable ───────────────────────────────────────────


def test_bridge_failures_are_restartable() -> None:
    assert is_restartable(BridgeUnavailableError())
    assert is_restartable(BridgeTimeoutError())
    assert is_restartable(BridgeProtocolError())


def test_compiler_errors_not_restartable() -> None:
    """The compiler answered; restarting would not help."""
    assert not is_restartable(CompilerError("syntax"))
    assert not is_restartable(ValueError("x"))


def test_subclasses_are_compiler_errors() -> None:
    for cls in (BridgeUnavailableError, BridgeTimeoutError, BridgeProtocolError):
        assert issubclass(cls, CompilerError)
