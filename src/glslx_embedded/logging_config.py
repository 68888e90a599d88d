"""Singleton logging configuration.

The language server speaks the protocol over stdout, so log records always
go to stderr. setup_logging() is idempotent (guarded by a module-level flag).
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Third-party loggers to suppress to WARNING
_SUPPRESSED_LOGGERS = (
    "pygls",
    "pygls.protocol",
    "pygls.feature_manager",
    "asyncio",
)

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger on stderr and quiet third-party loggers.

    Idempotent: second call is a no-op.
    """
    global _configured  # noqa: PLW0603
    if _configured:
        return
    _configured = True

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stderr,
    )

    for name in _SUPPRESSED_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(logging.WARNING)


def apply_log_level(level: str | None) -> None:
    """Change the root log level at runtime (e.g. from a CLI flag)."""
    if not level:
        return
    resolved = getattr(logging, level.upper(), None)
    if isinstance(resolved, int):
        logging.getLogger().setLevel(resolved)
