#!/usr/bin/env python3
"""
Screenshot Gateway command line

Usage:
    python -m src.cli serve [--host H] [--port P] [--reload]
    python -m src.cli sign --url URL --version V [--w W] [--h H] [--js JS] [--css CSS]
                           [--secret S] [--base-url URL]

``sign`` prints a signed URL for trusted callers and scripts. The secret
defaults to SCREENSHOT_SECRET from the environment / .env.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import argparse
import sys
from enum import Enum
from urllib.parse import urlencode

from src.core.config.constants import DEFAULT_HEIGHT, DEFAULT_WIDTH
from src.core.config.settings import get_settings
from src.core.security.signature import build_signed_query


class ExitCode(Enum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="screenshot-gateway",
        description="Signed screenshot gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve --port 8080
  %(prog)s sign --url https://example.com --version 3
  %(prog)s sign --url https://example.com --version 3 --h full --base-url https://shots.example.com/
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP server (uvicorn)")
    serve.add_argument("--host", help="Bind address (default: API_HOST)")
    serve.add_argument("--port", type=int, help="Bind port (default: API_PORT)")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    sign = subparsers.add_parser("sign", help="Print a signed screenshot URL")
    sign.add_argument("--url", required=True, help="Target page URL")
    sign.add_argument("--version", required=True, help="Cache-busting version")
    sign.add_argument("--w", default=DEFAULT_WIDTH, help=f"Viewport width (default: {DEFAULT_WIDTH})")
    sign.add_argument("--h", default=DEFAULT_HEIGHT, help=f'Viewport height or "full" (default: {DEFAULT_HEIGHT})')
    sign.add_argument("--js", default="", help="Script to inject")
    sign.add_argument("--css", default="", help="Style to inject")
    sign.add_argument("--secret", help="Signing secret (default: SCREENSHOT_SECRET)")
    sign.add_argument(
        "--base-url",
        default="http://localhost:8000/",
        help="Gateway URL the query string is appended to (default: http://localhost:8000/)",
    )

    return parser


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.application.app:app",
        host=args.host or settings.app.API_HOST,
        port=args.port or settings.app.API_PORT,
        reload=args.reload,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )
    return ExitCode.SUCCESS.value


def run_sign(args: argparse.Namespace) -> int:
    secret = args.secret or get_settings().security.SCREENSHOT_SECRET.get_secret_value()
    if not secret:
        print("No secret: pass --secret or set SCREENSHOT_SECRET", file=sys.stderr)
        return ExitCode.USAGE_ERROR.value

    params = build_signed_query(
        secret,
        target_url=args.url,
        version=args.version,
        width=args.w,
        height=args.h,
        js=args.js,
        css=args.css,
    )
    print(f"{args.base_url}?{urlencode(params)}")
    return ExitCode.SUCCESS.value


def main(argv: list[str] | None = None) -> int:
    """Application entry point."""
    args = create_parser().parse_args(argv)

    command_map = {
        "serve": run_serve,
        "sign": run_sign,
    }
    return command_map[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
