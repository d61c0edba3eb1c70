"""HTML rendering of the log viewer state."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from markdown_logbook.viewer import LogViewer

TEMPLATES_DIR = Path(__file__).parent / "templates"

_ENV = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_overview(viewer: LogViewer) -> str:
    """Overview list items, or a single placeholder when there are no logs."""

    return _ENV.get_template("overview.html").render(viewer=viewer)


def render_cards(viewer: LogViewer) -> str:
    return _ENV.get_template("cards.html").render(viewer=viewer)


def render_page(viewer: LogViewer, title: str = "Logs") -> str:
    return _ENV.get_template("page.html").render(viewer=viewer, title=title)
