"""
``connectq-api`` console script.

Serves ``connectq.api.app:app`` with uvicorn in a single process. The
embedding worker queue lives inside that process, so there is no
``--workers`` option.

Usage::

    connectq-api                          # API_HOST / API_PORT, default 0.0.0.0:5000
    connectq-api --port 8080
    connectq-api --log-level debug        # package and uvicorn logs
    connectq-api --reload                 # development
"""

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from connectq.config import Settings, get_settings
from connectq.core.logging import configure_logging, suppress_third_party_loggers

LOG_LEVELS = ("debug", "info", "warning", "error")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="connectq-api",
        description="ConnectQ marketplace and company search API",
    )
    parser.add_argument("--host", default=settings.api.host, help=f"Bind host (default: {settings.api.host})")
    parser.add_argument(
        "--port",
        type=int,
        default=settings.api.port,
        help=f"Port number (default: {settings.api.port})",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Override LOG_LEVEL for this run",
    )
    parser.add_argument("--reload", action="store_true", help="Restart on source changes")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Parse arguments and run uvicorn."""
    args = build_parser(get_settings()).parse_args(argv)

    if args.log_level:
        configure_logging(level=getattr(logging, args.log_level.upper()))
    suppress_third_party_loggers()

    uvicorn.run(
        "connectq.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level or "info",
    )
