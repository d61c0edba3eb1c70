"""CLI entrypoint for building the log viewer page."""

from __future__ import annotations

import argparse
import logging
import sys
from functools import partial
from pathlib import Path

import anyio
from dotenv import find_dotenv, load_dotenv

from markdown_logbook.config import (
    ViewerConfig,
    default_concurrency,
    default_manifest,
    default_timeout,
)
from markdown_logbook.flows import build_log_page_flow

LOGGER = logging.getLogger("markdown_logbook")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Markdown Logbook page builder")
    parser.add_argument(
        "--manifest",
        default=default_manifest(),
        help="Manifest URL or path (default: $LOGBOOK_MANIFEST or logs.json)",
    )
    parser.add_argument("--out", required=True, help="Output HTML path")
    parser.add_argument("--article", default=None, help="Deep-link entry id to open")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=default_concurrency(),
        help="Concurrent markdown fetches",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=default_timeout(),
        help="HTTP timeout in seconds",
    )
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Exit non-zero when any log fails to load",
    )
    return parser


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    load_dotenv(find_dotenv(usecwd=True))

    parser = build_parser()
    args = parser.parse_args()

    config = ViewerConfig(
        manifest=args.manifest,
        out=Path(args.out),
        article=args.article,
        concurrency=args.concurrency,
        timeout=args.timeout,
        strict=args.strict,
    )

    flow_runner = partial(
        build_log_page_flow,
        manifest=config.manifest,
        out_path=config.out,
        page_url=config.page_url,
        concurrency=config.concurrency,
        timeout=config.timeout,
    )
    try:
        outcome = anyio.run(flow_runner)
    except OSError as exc:
        LOGGER.error("Cannot write page %s: %s", config.out, exc)
        sys.exit(1)

    if outcome.failures and config.strict:
        sys.exit(1)


if __name__ == "__main__":
    main()
