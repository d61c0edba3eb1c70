"""Log manifest model and metadata merging."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path
from typing import Any

from markdown_logbook.metadata import extract_metadata

LOGGER = logging.getLogger("markdown_logbook.manifest")

EPOCH = date(1970, 1, 1)
ENTRY_KEYS = ("id", "file")


class ManifestError(RuntimeError):
    """Manifest could not be read, parsed or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class LogEntry:
    """Manifest entry for one markdown log post.

    ``key_order`` remembers the key order read from the manifest so that a
    rewrite keeps hand-written entries stable; new keys go last.
    """

    id: str
    file: str
    attributes: dict[str, Any] = field(default_factory=dict)
    key_order: tuple[str, ...] = ()

    @property
    def title(self) -> str | None:
        return self.attributes.get("title")

    @property
    def date(self) -> str | None:
        return self.attributes.get("date")

    @property
    def category(self) -> str | None:
        return self.attributes.get("category")

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> LogEntry:
        if "id" not in payload or "file" not in payload:
            raise ValueError(f"Log entry requires id and file: {payload!r}")
        attributes = {key: value for key, value in payload.items() if key not in ENTRY_KEYS}
        return cls(
            id=str(payload["id"]),
            file=str(payload["file"]),
            attributes=attributes,
            key_order=tuple(payload),
        )

    def to_dict(self) -> dict[str, Any]:
        values = {"id": self.id, "file": self.file, **self.attributes}
        ordered = {key: values[key] for key in self.key_order if key in values}
        ordered.update(values)
        return ordered

    def merged(self, attributes: dict[str, str]) -> LogEntry:
        """Return a copy with ``attributes`` overlaid on the stored ones.

        ``id`` is the manifest key and is never taken from metadata.
        """

        file = self.file
        combined = dict(self.attributes)
        for key, value in attributes.items():
            if key == "id":
                LOGGER.warning("Ignoring id metadata %r for %s", value, self.id)
            elif key == "file":
                file = value
            else:
                combined[key] = value
        return replace(self, file=file, attributes=combined)


def date_sort_key(entry: LogEntry) -> date:
    """Sort key placing missing or malformed dates at the epoch."""

    if not entry.date:
        return EPOCH
    try:
        return date.fromisoformat(entry.date)
    except (TypeError, ValueError):
        return EPOCH


def sort_entries(entries: list[LogEntry]) -> list[LogEntry]:
    """Sort entries newest first; equal dates keep their relative order."""

    return sorted(entries, key=date_sort_key, reverse=True)


class LogManifest:
    """In-memory copy of a ``logs.json`` document.

    ``document`` is the parsed top-level object; writing replaces its ``logs``
    in place so the field order survives.
    """

    def __init__(self, entries: list[LogEntry], document: dict[str, Any] | None = None) -> None:
        self.entries = entries
        self.document = document or {}

    @classmethod
    def from_json(cls, text: str, path: Path | None = None) -> LogManifest:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Invalid manifest JSON: {exc}", path=path) from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("logs"), list):
            raise ManifestError("Manifest must be an object with a 'logs' list.", path=path)
        try:
            entries = [LogEntry.from_dict(item) for item in payload["logs"]]
        except (TypeError, ValueError) as exc:
            raise ManifestError(f"Invalid manifest entry: {exc}", path=path) from exc
        return cls(entries, payload)

    @classmethod
    def load(cls, path: Path) -> LogManifest:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"Cannot read manifest {path}: {exc}", path=path) from exc
        return cls.from_json(text, path=path)

    def find(self, entry_id: str) -> LogEntry | None:
        return next((entry for entry in self.entries if entry.id == entry_id), None)

    def upsert(self, entry_id: str, file: str, attributes: dict[str, str]) -> LogEntry:
        """Merge ``attributes`` into the entry for ``entry_id`` and re-sort."""

        for index, entry in enumerate(self.entries):
            if entry.id == entry_id:
                updated = entry.merged(attributes)
                self.entries[index] = updated
                break
        else:
            updated = LogEntry(id=entry_id, file=file).merged(attributes)
            self.entries.append(updated)
        self.entries = sort_entries(self.entries)
        return updated

    def to_json(self) -> str:
        payload = dict(self.document)
        payload["logs"] = [entry.to_dict() for entry in self.entries]
        return json.dumps(payload, indent=4, ensure_ascii=False) + "\n"

    def save(self, path: Path) -> None:
        try:
            path.write_text(self.to_json(), encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"Cannot write manifest {path}: {exc}", path=path) from exc


@dataclass(frozen=True)
class MergeResult:
    """Outcome of merging one markdown file into the manifest."""

    entry: LogEntry
    attributes: dict[str, str]
    created: bool


def relative_file_path(markdown_path: Path, manifest_path: Path) -> str:
    """Path of the markdown file relative to the manifest directory."""

    relative = os.path.relpath(markdown_path, manifest_path.parent)
    return Path(relative).as_posix()


def update_manifest(markdown_path: Path, manifest_path: Path) -> MergeResult | None:
    """Merge comment metadata from ``markdown_path`` into ``manifest_path``.

    Returns ``None`` when the markdown has no metadata; the manifest is left
    untouched in that case.
    """

    attributes = extract_metadata(markdown_path.read_text(encoding="utf-8"))
    if not attributes:
        LOGGER.info("No HTML comments found in %s", markdown_path)
        return None

    manifest = LogManifest.load(manifest_path)
    entry_id = markdown_path.stem
    created = manifest.find(entry_id) is None
    entry = manifest.upsert(
        entry_id,
        relative_file_path(markdown_path, manifest_path),
        attributes,
    )
    manifest.save(manifest_path)
    return MergeResult(entry=entry, attributes=attributes, created=created)
