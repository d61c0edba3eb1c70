"""CLI that merges markdown comment metadata into logs.json."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from markdown_logbook.manifest import update_manifest

LOGGER = logging.getLogger("markdown_logbook.extract")

EPILOG = """\
examples:
  logbook-extract logs/my-entry.md
  logbook-extract logs/my-entry.md logs.json

comment format:
  <!-- title: My Log Title -->
  <!-- date: 2026-01-05 -->
  <!-- category: snippet -->
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logbook-extract",
        description="Merge <!-- key: value --> metadata from a markdown file into logs.json",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("markdown_file", nargs="?", help="Markdown log post")
    parser.add_argument(
        "manifest",
        nargs="?",
        help="Manifest path (default: ../logs/logs.json next to the markdown file)",
    )
    return parser


def default_manifest_path(markdown_path: Path) -> Path:
    return markdown_path.parent / ".." / "logs" / "logs.json"


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.markdown_file:
        parser.print_help()
        return 1

    markdown_path = Path(args.markdown_file)
    if args.manifest:
        manifest_path = Path(args.manifest)
    else:
        manifest_path = default_manifest_path(markdown_path)

    if not markdown_path.is_file():
        LOGGER.error("Markdown file not found: %s", markdown_path)
        return 1
    if not manifest_path.is_file():
        LOGGER.error("logs.json not found: %s", manifest_path)
        return 1

    try:
        result = update_manifest(markdown_path, manifest_path)
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Error processing %s: %s", markdown_path, exc)
        return 1

    if result is not None:
        LOGGER.info("Updated %s with metadata from %s", manifest_path, markdown_path)
        LOGGER.info("Attributes: %s", json.dumps(result.attributes, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
