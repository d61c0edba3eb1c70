"""Environment-backed defaults for the viewer build."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from markdown_logbook.viewer import article_href

MANIFEST_ENV_VAR = "LOGBOOK_MANIFEST"
CONCURRENCY_ENV_VAR = "LOGBOOK_CONCURRENCY"
TIMEOUT_ENV_VAR = "LOGBOOK_TIMEOUT"

MANIFEST_DEFAULT = "logs.json"
CONCURRENCY_DEFAULT = 8
TIMEOUT_DEFAULT = 30.0


@dataclass(frozen=True)
class ViewerConfig:
    manifest: str
    out: Path
    article: str | None = None
    concurrency: int = CONCURRENCY_DEFAULT
    timeout: float = TIMEOUT_DEFAULT
    strict: bool = False

    @property
    def page_url(self) -> str:
        """Initial browser URL, carrying the deep link when one is requested."""

        if not self.article:
            return "/"
        return "/" + article_href(self.article)


def default_manifest() -> str:
    return os.getenv(MANIFEST_ENV_VAR, MANIFEST_DEFAULT)


def default_concurrency() -> int:
    raw = os.getenv(CONCURRENCY_ENV_VAR)
    if not raw:
        return CONCURRENCY_DEFAULT
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{CONCURRENCY_ENV_VAR} must be an integer: {raw}") from exc
    if value <= 0:
        raise RuntimeError(f"{CONCURRENCY_ENV_VAR} must be positive: {raw}")
    return value


def default_timeout() -> float:
    raw = os.getenv(TIMEOUT_ENV_VAR)
    if not raw:
        return TIMEOUT_DEFAULT
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{TIMEOUT_ENV_VAR} must be a number: {raw}") from exc
