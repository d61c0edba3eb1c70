"""Markdown rendering with pluggable link attributes."""

from __future__ import annotations

import html
import re
from typing import Callable, Iterable

from markdown_it import MarkdownIt
from markdown_it.token import Token

LinkHook = Callable[[Token], None]

ANCHOR_TAG = re.compile(r"<a\b([^>]*)>", re.IGNORECASE)
TAG_ATTRIBUTE = re.compile(
    r"""([^\s=/>"']+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?"""
)


def open_in_new_context(token: Token) -> None:
    """Open the link in a new browsing context without opener or referrer."""

    token.attrSet("target", "_blank")
    token.attrSet("rel", "noopener noreferrer")


def anchor_token(attributes: str) -> Token:
    """Build a ``link_open`` token from the attribute text of a raw ``<a>`` tag."""

    token = Token("link_open", "a", 1)
    for match in TAG_ATTRIBUTE.finditer(attributes):
        name, double, single, bare = match.groups()
        value = next((part for part in (double, single, bare) if part is not None), "")
        token.attrSet(name.lower(), html.unescape(value))
    return token


class MarkdownRenderer:
    """Markdown to HTML renderer owning its own markdown-it instance.

    ``link_hooks`` run in order on every link, whatever syntax produced it:
    inline, reference, autolink, or an ``<a>`` tag written as raw HTML.
    """

    def __init__(self, link_hooks: Iterable[LinkHook] = (open_in_new_context,)) -> None:
        self.link_hooks = tuple(link_hooks)
        self._md = MarkdownIt("commonmark").enable("table").enable("strikethrough")
        self._md.add_render_rule("link_open", self._build_link_rule())
        raw_html_rule = self._build_raw_html_rule()
        self._md.add_render_rule("html_inline", raw_html_rule)
        self._md.add_render_rule("html_block", raw_html_rule)

    def _apply_hooks(self, token: Token) -> None:
        for hook in self.link_hooks:
            hook(token)

    def _build_link_rule(self):
        def render_link_open(renderer, tokens, idx, options, env):
            self._apply_hooks(tokens[idx])
            return renderer.renderToken(tokens, idx, options, env)

        return render_link_open

    def _build_raw_html_rule(self):
        def render_raw_html(renderer, tokens, idx, options, env):
            def rewrite(match: re.Match[str]) -> str:
                token = anchor_token(match.group(1))
                self._apply_hooks(token)
                return f"<a{renderer.renderAttrs(token)}>"

            return ANCHOR_TAG.sub(rewrite, tokens[idx].content)

        return render_raw_html

    def render(self, markdown: str) -> str:
        return self._md.render(markdown)
