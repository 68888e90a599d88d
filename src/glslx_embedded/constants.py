"""Shared constants, the single source of truth for cross-module values.

StrEnum members are str-compatible, so values can be logged or sent to the
compiler bridge unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class SchedulerState(StrEnum):
    """Build scheduler lifecycle state."""

    IDLE = "idle"
    SCHEDULED = "scheduled"


class DiagnosticKind(StrEnum):
    """Severity labels reported by the compiler."""

    ERROR = "error"
    WARNING = "warning"


class PublishedSeverity(StrEnum):
    """Severity of a diagnostic handed to the editor."""

    ERROR = "error"
    WARNING = "warning"
    HINT = "hint"


class SymbolKindName(StrEnum):
    """Symbol and completion kinds reported by the compiler."""

    STRUCT = "struct"
    FUNCTION = "function"
    VARIABLE = "variable"
    KEYWORD = "keyword"


class BridgeOp(StrEnum):
    """Request names understood by the Node.js compiler bridge."""

    COMPILE = "compile"
    RELEASE = "release"
    FORMAT = "format"
    TOOLTIP = "tooltip"
    DEFINITION = "definition"
    RENAME = "rename"
    COMPLETION = "completion"
    SIGNATURE = "signature"
    SYMBOLS = "symbols"


# ── Scanner ──────────────────────────────────────────────

DEFAULT_LANGUAGE_ID = "glslx"
DEFAULT_DELIMITER = "`"
DEFAULT_TAG_TOKENS: tuple[str, ...] = (
    "glsl",
    "glslx",
    "/* glsl */",
    "/* glslx */",
)
ESCAPE_CHAR = "\\"
LINE_BREAKS = frozenset("\r\n")

# ── Build ────────────────────────────────────────────────

DEFAULT_DEBOUNCE_SECONDS = 0.1
REGION_ID_SEPARATOR = "-region-"

# ── Compiler bridge ──────────────────────────────────────

BRIDGE_SCRIPT_NAME = "glslx_bridge.js"
BRIDGE_STREAM_LIMIT = 64 * 1024 * 1024
DEFAULT_COMPILER_TIMEOUT_SECONDS = 30.0
ERROR_TRUNCATION_CHARS = 500

# ── Editor ───────────────────────────────────────────────

MESSAGE_PREFIX = "glslx: "
COMPLETION_TRIGGERS = ["."]
SIGNATURE_TRIGGERS = ["(", ","]
