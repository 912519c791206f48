# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""demoscrape CLI: scrape a page once, or serve the HTTP API.

Usage:
    demoscrape scrape URL [--timeout S] [--compact] [--require-video]
    demoscrape serve [--host HOST] [--port PORT]
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import math
import sys

from .config import ScraperSettings
from .errors import NoVideoFoundError, ScrapeError
from .logging_config import configure
from .problem_details import from_exception
from .scraper import scrape_product_page

logger = logging.getLogger(__name__)


def cmd_scrape(args: argparse.Namespace, settings: ScraperSettings) -> int:
    if args.timeout is not None:
        if not math.isfinite(args.timeout) or args.timeout <= 0:
            print("Error: --timeout must be positive and finite", file=sys.stderr)
            return 2
        settings = dataclasses.replace(settings, fetch_timeout=args.timeout)

    try:
        result = asyncio.run(scrape_product_page(args.url, settings=settings))
        if args.require_video and not result.video_sources:
            raise NoVideoFoundError(url=result.original_url)
    except ScrapeError as e:
        print(from_exception(e).to_cli_text(), file=sys.stderr)
        return 1

    indent = None if args.compact else 2
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=indent))
    return 0


def cmd_serve(args: argparse.Namespace, settings: ScraperSettings) -> int:
    import uvicorn

    from .server import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("serving on %s:%d", host, port)
    uvicorn.run(create_app(settings=settings), host=host, port=port, log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="demoscrape", description="Demo-video metadata extraction")
    sub = parser.add_subparsers(dest="command", required=True)

    p_scrape = sub.add_parser("scrape", help="Scrape one product page and print JSON")
    p_scrape.add_argument("url", help="Product page URL (http/https)")
    p_scrape.add_argument("--timeout", type=float, default=None, help="Fetch timeout in seconds")
    p_scrape.add_argument("--compact", action="store_true", help="Single-line JSON output")
    p_scrape.add_argument(
        "--require-video",
        action="store_true",
        help="Exit with an error when no playable video source is found",
    )
    p_scrape.set_defaults(func=cmd_scrape)

    p_serve = sub.add_parser("serve", help="Run the preview/import HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = ScraperSettings.from_env()
    configure(json_output=settings.log_json or args.command == "serve", level=settings.log_level)
    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
