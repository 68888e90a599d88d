"""CLI entry point: ``glslx-embedded serve`` and ``glslx-embedded scan``."""

from __future__ import annotations

from glslx_embedded.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import json  # noqa: E402
import logging  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

from glslx_embedded import __version__  # noqa: E402
from glslx_embedded.config import Settings  # noqa: E402
from glslx_embedded.embedded import scan_regions  # noqa: E402
from glslx_embedded.logging_config import apply_log_level  # noqa: E402

logger = logging.getLogger(__name__)


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"glslx-embedded {__version__}")
        return

    if args.command == "serve":
        _run_serve(args)
    elif args.command == "scan":
        sys.exit(_run_scan(args))
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="glslx-embedded",
        description=(
            "Language server for GLSLX shaders embedded in "
            "JavaScript and TypeScript string literals."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser(
        "serve",
        help="Start the language server",
    )
    serve.add_argument(
        "--tcp",
        action="store_true",
        help="Listen on TCP instead of stdio",
    )
    serve.add_argument(
        "--host",
        default="127.0.0.1",
        help="Bind address for TCP (default: 127.0.0.1)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=2087,
        help="Port for TCP (default: 2087)",
    )
    serve.add_argument(
        "--log-level",
        default=None,
        help="Override GLSLX_LOG_LEVEL",
    )

    scan = sub.add_parser(
        "scan",
        help="Print the embedded shader spans found in a file",
    )
    scan.add_argument(
        "path",
        type=str,
        help="File to scan",
    )
    scan.add_argument(
        "--language-id",
        default="",
        help=(
            "Language id of the file; the shader language id "
            "scans the whole file as one span"
        ),
    )

    return parser


def _run_serve(args: argparse.Namespace) -> None:
    from glslx_embedded.compiler.bridge import is_node_available
    from glslx_embedded.server import create_server

    settings = Settings()
    apply_log_level(args.log_level or settings.log_level)
    if not is_node_available(settings.node_executable):
        logger.warning(
            "event=node_missing executable=%s",
            settings.node_executable,
        )
    server = create_server(settings)
    if args.tcp:
        server.start_tcp(args.host, args.port)
    else:
        server.start_io()


def _run_scan(args: argparse.Namespace) -> int:
    path = Path(args.path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return 1

    spans = scan_regions(
        text,
        language_id=args.language_id,
        config=Settings().scanner_config,
    )
    print(
        json.dumps(
            [
                {
                    "start": s.start,
                    "end": s.end,
                    "text": text[s.start:s.end],
                }
                for s in spans
            ],
            indent=2,
        )
    )
    return 0


if __name__ == "__main__":
    main()
