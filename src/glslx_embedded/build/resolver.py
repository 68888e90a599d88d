"""Resolve include references for the compiler.

Open documents take precedence over the filesystem, and they are served
unmasked: an include sees the whole file, not one projected fragment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from glslx_embedded.compiler.schemas import SourceFile

logger = logging.getLogger(__name__)


def uri_to_path(uri: str) -> Path | None:
    """Filesystem path of a ``file:`` URI, or None for other schemes."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return None
    return Path(os.path.normpath(url2pathname(parsed.path)))


def path_to_uri(path: Path) -> str:
    return Path(os.path.abspath(path)).as_uri()


class FragmentResolver:
    """Callable ``(reference, origin_uri) -> SourceFile | None``."""

    def __init__(self, open_sources: Mapping[str, str]) -> None:
        self._open: dict[Path, str] = {}
        for uri, source in open_sources.items():
            path = uri_to_path(uri)
            if path is not None:
                self._open[path] = source

    def __call__(self, reference: str, origin_uri: str) -> SourceFile | None:
        origin = uri_to_path(origin_uri)
        if origin is not None:
            target = Path(os.path.normpath(origin.parent / reference))
        else:
            target = Path(os.path.abspath(reference))
        name = path_to_uri(target)

        source = self._open.get(target)
        if source is not None:
            return SourceFile(name=name, contents=source)

        try:
            contents = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(
                "event=include_unresolved reference=%s origin=%s error=%s",
                reference,
                origin_uri,
                e,
            )
            return None
        return SourceFile(name=name, contents=contents)
