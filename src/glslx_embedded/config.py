"""Environment-based configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from glslx_embedded.constants import (
    DEFAULT_COMPILER_TIMEOUT_SECONDS,
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_DELIMITER,
    DEFAULT_LANGUAGE_ID,
    DEFAULT_TAG_TOKENS,
)
from glslx_embedded.embedded.schemas import ScannerConfig

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and GLSLX_* environment variables."""

    # Scanner
    language_id: str = DEFAULT_LANGUAGE_ID
    tag_tokens: Annotated[list[str], NoDecode] = list(DEFAULT_TAG_TOKENS)
    delimiter: str = DEFAULT_DELIMITER

    # Build
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS

    # Compiler bridge
    node_executable: str = "node"
    glslx_module: str = "glslx"
    compiler_timeout_seconds: float = DEFAULT_COMPILER_TIMEOUT_SECONDS

    # Logging
    log_level: str = "INFO"
    log_dir: Path | None = None

    @field_validator("tag_tokens", mode="before")
    @classmethod
    def _parse_tags(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("tag_tokens")
    @classmethod
    def _validate_tags(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("tag_tokens must contain at least one tag")
        seen: set[str] = set()
        dupes: list[str] = []
        for tag in v:
            if tag in seen:
                dupes.append(tag)
            seen.add(tag)
        if dupes:
            logger.warning(
                "Duplicate tags in GLSLX_TAG_TOKENS: %s",
                ", ".join(dupes),
            )
        return v

    @field_validator("delimiter")
    @classmethod
    def _validate_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("delimiter must be exactly one character")
        return v

    @field_validator("debounce_seconds", "compiler_timeout_seconds")
    @classmethod
    def _validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("durations must not be negative")
        return v

    @property
    def scanner_config(self) -> ScannerConfig:
        """Scanner options derived from these settings."""
        return ScannerConfig(
            language_id=self.language_id,
            tag_tokens=tuple(self.tag_tokens),
            delimiter=self.delimiter,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "GLSLX_",
        "extra": "ignore",
    }
