"""Prefect flow orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from prefect import flow, task

from markdown_logbook.loader import LoadedLog, load_entries, load_store, open_source
from markdown_logbook.page import render_page
from markdown_logbook.render import MarkdownRenderer
from markdown_logbook.viewer import History, LogStore, LogViewer

LOGGER = logging.getLogger("markdown_logbook.flow")


@dataclass(frozen=True)
class PageOutcome:
    page_path: Path
    total: int
    rendered: int
    failures: list[str]


def build_viewer(store: LogStore, logs: list[LoadedLog], page_url: str = "/") -> LogViewer:
    """Build the viewer for one page load and follow any deep link in ``page_url``."""

    viewer = LogViewer(store, [log.to_card() for log in logs], history=History(page_url))
    viewer.start()
    return viewer


@task(name="write_page_task")
def write_page_task(html: str, page_path: Path) -> Path:
    """Write the rendered page to disk."""

    page_path.parent.mkdir(parents=True, exist_ok=True)
    page_path.write_text(html, encoding="utf-8")
    return page_path


@flow(name="build_log_page_flow")
async def build_log_page_flow(
    manifest: str,
    out_path: Path,
    page_url: str = "/",
    concurrency: int = 8,
    timeout: float = 30.0,
) -> PageOutcome:
    """Load the manifest and its posts, then render the viewer page."""

    renderer = MarkdownRenderer()
    async with open_source(manifest, timeout=timeout) as source:
        store = await load_store(source)
        logs = await load_entries(source, store, renderer, concurrency=concurrency)

    viewer = build_viewer(store, logs, page_url)
    page_path = write_page_task(render_page(viewer), out_path)

    loaded_ids = {log.entry.id for log in logs}
    failures = [entry.id for entry in store if entry.id not in loaded_ids]
    if failures:
        LOGGER.error("Failed to load logs: %s", failures)
    LOGGER.info("Rendered %s of %s logs to %s", len(logs), len(store), page_path)
    return PageOutcome(
        page_path=page_path,
        total=len(store),
        rendered=len(logs),
        failures=failures,
    )
