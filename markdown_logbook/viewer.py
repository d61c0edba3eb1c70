"""Log viewer components: overview, cards, category filter and deep links."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator
from urllib.parse import parse_qs, urlencode, urljoin, urlsplit

from markdown_logbook.manifest import LogEntry

LOGGER = logging.getLogger("markdown_logbook.viewer")

ALL_CATEGORIES = "all"
ARTICLE_PARAM = "article"
SCROLL_OFFSET_PX = 32

CATEGORY_LABELS = {
    "snippet": "Snippets",
    "climbing-analysis": "Climbing Video Analysis",
    "crux-beta-ios": "Crux & Beta iOS",
    "crux-web": "Crux Web",
    "boulder-quest": "Boulder Quest",
}


def category_label(category: str | None) -> str:
    """Human-readable label; unknown categories are shown as-is."""

    if not category:
        return ""
    return CATEGORY_LABELS.get(category, category)


def format_date(value: str | None) -> str:
    """Format an ISO date like 2026-01-05 as ``Jan 5, 2026``."""

    if not value:
        return ""
    try:
        parsed = date.fromisoformat(value)
    except (TypeError, ValueError):
        return str(value)
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def article_href(entry_id: str) -> str:
    return "?" + urlencode({ARTICLE_PARAM: entry_id})


class LogStore:
    """Read-only snapshot of the manifest entries for one page load."""

    def __init__(self, entries: Iterable[LogEntry] = ()) -> None:
        self._entries = tuple(entries)
        self._by_id = {entry.id: entry for entry in self._entries}

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> LogEntry | None:
        return self._by_id.get(entry_id)


class History:
    """Browser location and history stack."""

    def __init__(self, url: str = "/") -> None:
        self.entries = [url]

    @property
    def url(self) -> str:
        return self.entries[-1]

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    def query_param(self, name: str) -> str | None:
        values = parse_qs(urlsplit(self.url).query).get(name)
        return values[0] if values else None

    @property
    def article(self) -> str | None:
        return self.query_param(ARTICLE_PARAM)

    def push_state(self, url: str) -> None:
        self.entries.append(urljoin(self.url, url))

    def replace_state(self, url: str) -> None:
        self.entries[-1] = urljoin(self.url, url)


@dataclass
class OverviewItem:
    entry: LogEntry

    @property
    def title(self) -> str:
        return self.entry.title or self.entry.id

    @property
    def date_label(self) -> str:
        return format_date(self.entry.date)

    @property
    def category_label(self) -> str:
        return category_label(self.entry.category)

    @property
    def href(self) -> str:
        return article_href(self.entry.id)


@dataclass
class Sidebar:
    """Scrollable sidebar holding the log cards."""

    hidden: bool = True
    header_height: int = 0
    scroll_top: int = 0
    scrolled_to: str | None = None

    def reveal(self) -> None:
        self.hidden = False

    def hide(self) -> None:
        self.hidden = True

    def scroll_to(self, card: LogCard, top: int) -> None:
        self.scroll_top = top
        self.scrolled_to = card.entry.id


@dataclass
class LogCard:
    """Rendered log post shown in the sidebar."""

    entry: LogEntry
    body_html: str
    active: bool = True
    offset_top: int = 0

    @property
    def dom_id(self) -> str:
        return f"log-{self.entry.id}"

    @property
    def category(self) -> str | None:
        return self.entry.category

    @property
    def date_label(self) -> str:
        return format_date(self.entry.date)

    @property
    def category_label(self) -> str:
        return category_label(self.entry.category)

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def scroll_into_view(self, sidebar: Sidebar) -> None:
        """Scroll so the card sits just below the sidebar's fixed header."""

        top = self.offset_top - sidebar.header_height - SCROLL_OFFSET_PX
        sidebar.scroll_to(self, max(top, 0))


@dataclass
class FilterButton:
    category: str
    label: str
    active: bool = False


class CategoryFilter:
    """Exactly one active category; "all" shows every card."""

    def __init__(self, cards: list[LogCard], history: History) -> None:
        self.cards = cards
        self.history = history
        categories = dict.fromkeys(card.category for card in cards if card.category)
        self.buttons = [FilterButton(ALL_CATEGORIES, "All", active=True)]
        self.buttons.extend(
            FilterButton(category, category_label(category)) for category in categories
        )

    @property
    def active_category(self) -> str:
        return next(button.category for button in self.buttons if button.active)

    def button(self, category: str) -> FilterButton | None:
        return next((button for button in self.buttons if button.category == category), None)

    def active_cards(self) -> list[LogCard]:
        return [card for card in self.cards if card.active]

    def select(self, category: str, user_initiated: bool = False) -> bool:
        """Switch to ``category``.

        User-initiated switches drop the deep-link query from the URL.
        """

        selected = self.button(category)
        if selected is None:
            LOGGER.debug("No filter for category %r", category)
            return False

        for button in self.buttons:
            button.active = button is selected
        for card in self.cards:
            if category == ALL_CATEGORIES or card.category == category:
                card.activate()
            else:
                card.deactivate()

        if user_initiated:
            self.history.replace_state(self.history.path)
        return True


class LogViewer:
    """Overview list plus filterable sidebar for one page load."""

    def __init__(
        self,
        store: LogStore,
        cards: list[LogCard],
        history: History | None = None,
        sidebar: Sidebar | None = None,
    ) -> None:
        self.store = store
        self.overview = [OverviewItem(entry) for entry in store]
        self.cards = cards
        self.history = history or History()
        self.sidebar = sidebar or Sidebar()
        self.filter = CategoryFilter(self.cards, self.history)
        self._cards_by_id = {card.entry.id: card for card in cards}

    def card(self, entry_id: str) -> LogCard | None:
        return self._cards_by_id.get(entry_id)

    def start(self) -> LogCard | None:
        return self.apply_deep_link()

    def apply_deep_link(self) -> LogCard | None:
        """Follow the ``article`` query parameter, if it names a known card."""

        article = self.history.article
        if not article:
            return None
        if self.card(article) is None:
            LOGGER.debug("Ignoring unknown article %r", article)
            return None
        self.sidebar.reveal()
        return self.scroll_to_article(article)

    def scroll_to_article(self, entry_id: str) -> LogCard | None:
        card = self.card(entry_id)
        if card is None:
            return None
        self.filter.select(card.category or ALL_CATEGORIES)
        card.scroll_into_view(self.sidebar)
        return card

    def follow_overview_link(self, entry_id: str) -> LogCard | None:
        self.sidebar.reveal()
        card = self.scroll_to_article(entry_id)
        self.history.push_state(article_href(entry_id))
        return card

    def open_sidebar(self) -> None:
        self.sidebar.reveal()
        self.apply_deep_link()

    def close_sidebar(self) -> None:
        self.sidebar.hide()

    def toggle_sidebar(self) -> None:
        if self.sidebar.hidden:
            self.open_sidebar()
        else:
            self.close_sidebar()
