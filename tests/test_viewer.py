"""Tests for the category filter and deep-link navigation."""

from markdown_logbook.manifest import LogEntry
from markdown_logbook.viewer import (
    ALL_CATEGORIES,
    History,
    LogCard,
    LogStore,
    LogViewer,
    Sidebar,
    category_label,
    format_date,
)

ENTRIES = [
    LogEntry(id="xyz", file="xyz.md", attributes={"date": "2026-01-05", "category": "crux-web"}),
    LogEntry(id="tip", file="tip.md", attributes={"date": "2026-01-03", "category": "snippet"}),
    LogEntry(id="trick", file="trick.md", attributes={"date": "2026-01-01", "category": "snippet"}),
    LogEntry(id="misc", file="misc.md", attributes={"category": "gardening"}),
]


def _viewer(url: str = "/logs") -> LogViewer:
    cards = [LogCard(entry=entry, body_html=f"<p>{entry.id}</p>") for entry in ENTRIES]
    cards[0].offset_top = 400
    return LogViewer(
        LogStore(ENTRIES),
        cards,
        history=History(url),
        sidebar=Sidebar(header_height=60),
    )


def _active_ids(viewer: LogViewer) -> list[str]:
    return [card.entry.id for card in viewer.filter.active_cards()]


def test_labels_and_dates() -> None:
    assert category_label("crux-beta-ios") == "Crux & Beta iOS"
    assert category_label("gardening") == "gardening"
    assert category_label(None) == ""
    assert format_date("2026-01-05") == "Jan 5, 2026"
    assert format_date("someday") == "someday"
    assert format_date(None) == ""


def test_initial_state_is_all() -> None:
    viewer = _viewer()
    viewer.start()

    assert viewer.filter.active_category == ALL_CATEGORIES
    assert _active_ids(viewer) == ["xyz", "tip", "trick", "misc"]
    assert viewer.sidebar.hidden


def test_filter_buttons_follow_data() -> None:
    viewer = _viewer()
    assert [button.category for button in viewer.filter.buttons] == [
        "all",
        "crux-web",
        "snippet",
        "gardening",
    ]


def test_select_snippet_then_all() -> None:
    viewer = _viewer()

    assert viewer.filter.select("snippet")
    assert _active_ids(viewer) == ["tip", "trick"]
    assert viewer.filter.active_category == "snippet"
    assert sum(button.active for button in viewer.filter.buttons) == 1

    viewer.filter.select(ALL_CATEGORIES)
    assert _active_ids(viewer) == ["xyz", "tip", "trick", "misc"]


def test_select_unknown_category_is_noop() -> None:
    viewer = _viewer()
    assert not viewer.filter.select("nope")
    assert viewer.filter.active_category == ALL_CATEGORIES


def test_user_selection_clears_deep_link() -> None:
    viewer = _viewer("/logs?article=xyz")
    viewer.filter.select("snippet", user_initiated=True)
    assert viewer.history.url == "/logs"


def test_programmatic_selection_keeps_url() -> None:
    viewer = _viewer("/logs?article=xyz")
    viewer.filter.select("snippet")
    assert viewer.history.url == "/logs?article=xyz"


def test_deep_link_on_load() -> None:
    viewer = _viewer("/logs?article=xyz")

    card = viewer.start()

    assert card is viewer.card("xyz")
    assert viewer.filter.active_category == "crux-web"
    assert _active_ids(viewer) == ["xyz"]
    assert not viewer.sidebar.hidden
    assert viewer.sidebar.scrolled_to == "xyz"
    assert viewer.sidebar.scroll_top == 400 - 60 - 32
    assert viewer.history.url == "/logs?article=xyz"


def test_unknown_deep_link_is_ignored() -> None:
    viewer = _viewer("/logs?article=missing")

    assert viewer.start() is None
    assert viewer.filter.active_category == ALL_CATEGORIES
    assert viewer.sidebar.hidden
    assert viewer.sidebar.scrolled_to is None


def test_scroll_is_clamped_at_top() -> None:
    viewer = _viewer()
    viewer.scroll_to_article("tip")
    assert viewer.sidebar.scroll_top == 0


def test_follow_overview_link() -> None:
    viewer = _viewer()

    viewer.follow_overview_link("tip")

    assert not viewer.sidebar.hidden
    assert viewer.filter.active_category == "snippet"
    assert viewer.sidebar.scrolled_to == "tip"
    assert viewer.history.url == "/logs?article=tip"
    assert viewer.history.entries == ["/logs", "/logs?article=tip"]


def test_opening_sidebar_follows_deep_link() -> None:
    viewer = _viewer("/logs?article=trick")
    viewer.filter.select(ALL_CATEGORIES)

    viewer.toggle_sidebar()

    assert not viewer.sidebar.hidden
    assert viewer.filter.active_category == "snippet"
    assert viewer.sidebar.scrolled_to == "trick"

    viewer.toggle_sidebar()
    assert viewer.sidebar.hidden


def test_close_sidebar() -> None:
    viewer = _viewer()
    viewer.open_sidebar()
    viewer.close_sidebar()
    assert viewer.sidebar.hidden


def test_format_date_non_string() -> None:
    assert format_date(20260105) == "20260105"


def test_uncategorized_link_resets_filter() -> None:
    loose = LogEntry(id="loose", file="loose.md")
    cards = [LogCard(entry=entry, body_html="") for entry in [*ENTRIES, loose]]
    viewer = LogViewer(LogStore([*ENTRIES, loose]), cards, history=History("/logs"))
    viewer.filter.select("snippet")

    viewer.follow_overview_link("loose")

    assert viewer.filter.active_category == ALL_CATEGORIES
    assert viewer.card("loose").active
    assert viewer.sidebar.scrolled_to == "loose"
