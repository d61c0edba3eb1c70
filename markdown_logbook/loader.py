"""Fetch the log manifest and render every referenced markdown post."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

import anyio
import httpx

from markdown_logbook.manifest import LogEntry, LogManifest, ManifestError
from markdown_logbook.render import MarkdownRenderer
from markdown_logbook.viewer import LogCard, LogStore

LOGGER = logging.getLogger("markdown_logbook.loader")


@dataclass(frozen=True)
class LoadedLog:
    entry: LogEntry
    html: str

    def to_card(self) -> LogCard:
        return LogCard(entry=self.entry, body_html=self.html)


class LogSource(ABC):
    """Where the manifest and markdown posts are read from."""

    manifest_location: str

    @abstractmethod
    def resolve(self, relative: str) -> str:
        """Resolve an entry ``file`` against the manifest location."""

    @abstractmethod
    async def fetch_text(self, location: str) -> str:
        """Return the text stored at ``location``."""


class HttpLogSource(LogSource):
    def __init__(self, client: httpx.AsyncClient, manifest_url: str) -> None:
        self.client = client
        self.manifest_location = manifest_url

    def resolve(self, relative: str) -> str:
        return str(httpx.URL(self.manifest_location).join(relative))

    async def fetch_text(self, location: str) -> str:
        response = await self.client.get(location)
        response.raise_for_status()
        return response.text


class DirectoryLogSource(LogSource):
    def __init__(self, manifest_path: Path) -> None:
        self.manifest_location = str(manifest_path)

    def resolve(self, relative: str) -> str:
        return str(Path(self.manifest_location).parent / relative)

    async def fetch_text(self, location: str) -> str:
        return await anyio.Path(location).read_text(encoding="utf-8")


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


@asynccontextmanager
async def open_source(manifest: str, timeout: float = 30.0) -> AsyncIterator[LogSource]:
    """Yield an HTTP source for URLs and a directory source otherwise."""

    if is_url(manifest):
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            yield HttpLogSource(client, manifest)
    else:
        yield DirectoryLogSource(Path(manifest))


async def load_store(source: LogSource) -> LogStore:
    """Fetch the manifest; any failure leaves the viewer empty."""

    try:
        text = await source.fetch_text(source.manifest_location)
        manifest = LogManifest.from_json(text)
    except (
        httpx.HTTPError,
        httpx.InvalidURL,
        OSError,
        UnicodeDecodeError,
        ManifestError,
    ) as exc:
        LOGGER.error("Error loading logs from %s: %s", source.manifest_location, exc)
        return LogStore()
    LOGGER.info("Loaded %s log entries from %s", len(manifest.entries), source.manifest_location)
    return LogStore(manifest.entries)


async def load_entries(
    source: LogSource,
    store: LogStore,
    renderer: MarkdownRenderer,
    concurrency: int = 8,
) -> list[LoadedLog]:
    """Fetch and render all entries concurrently, keeping manifest order.

    A failing entry is logged and left out.
    """

    entries = list(store)
    slots: list[LoadedLog | None] = [None] * len(entries)
    semaphore = anyio.Semaphore(max(concurrency, 1))

    async def load_one(index: int, entry: LogEntry) -> None:
        try:
            async with semaphore:
                markdown = await source.fetch_text(source.resolve(entry.file))
            slots[index] = LoadedLog(entry=entry, html=renderer.render(markdown))
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Error loading log %s: %s", entry.id, exc)

    async with anyio.create_task_group() as tg:
        for index, entry in enumerate(entries):
            tg.start_soon(load_one, index, entry)

    return [log for log in slots if log is not None]
