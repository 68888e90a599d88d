"""Language Server Protocol surface built on pygls."""

from glslx_embedded.server.language_server import (
    GlslxLanguageServer,
    create_server,
)

__all__ = ["GlslxLanguageServer", "create_server"]
