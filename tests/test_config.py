"""Tests for environment-backed configuration."""

from pathlib import Path

import pytest

from markdown_logbook.config import (
    ViewerConfig,
    default_concurrency,
    default_manifest,
    default_timeout,
)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LOGBOOK_MANIFEST", "LOGBOOK_CONCURRENCY", "LOGBOOK_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    assert default_manifest() == "logs.json"
    assert default_concurrency() == 8
    assert default_timeout() == 30.0


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGBOOK_MANIFEST", "https://example.com/logs.json")
    monkeypatch.setenv("LOGBOOK_CONCURRENCY", "3")
    monkeypatch.setenv("LOGBOOK_TIMEOUT", "2.5")
    assert default_manifest() == "https://example.com/logs.json"
    assert default_concurrency() == 3
    assert default_timeout() == 2.5


def test_invalid_concurrency(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGBOOK_CONCURRENCY", "0")
    with pytest.raises(RuntimeError):
        default_concurrency()


def test_page_url_carries_article() -> None:
    assert ViewerConfig(manifest="logs.json", out=Path("index.html")).page_url == "/"
    config = ViewerConfig(manifest="logs.json", out=Path("index.html"), article="xyz")
    assert config.page_url == "/?article=xyz"
