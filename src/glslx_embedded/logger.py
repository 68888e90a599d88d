"""Structured JSON logger for rebuild passes and failures."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from glslx_embedded.constants import ERROR_TRUNCATION_CHARS
from glslx_embedded.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = ["BuildLogger", "LOG_FORMAT", "LOG_DATEFMT"]


class BuildLogger:
    """Structured JSON logger with one line per rebuild pass."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("glslx_embedded.build_log")
        self._logger.setLevel(getattr(logging, level.upper()))
        self._logger.propagate = False

        if not self._logger.handlers:
            handler = logging.FileHandler(log_dir / "build.log")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    def log_rebuild(
        self,
        generation: int,
        documents: int,
        fragments: int,
        duration_ms: float,
        error: str | None = None,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "rebuild",
                "timestamp": datetime.now(UTC).isoformat(),
                "generation": generation,
                "documents": documents,
                "fragments": fragments,
                "duration_ms": duration_ms,
                "error": error,
            })
        )

    def log_error(
        self,
        component: str,
        error: str,
    ) -> None:
        self._logger.error(
            json.dumps({
                "type": "error",
                "timestamp": datetime.now(UTC).isoformat(),
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            })
        )

    def close(self) -> None:
        """Detach and close the file handler."""
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)
