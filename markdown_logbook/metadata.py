"""Metadata extraction from markdown comment headers."""

from __future__ import annotations

import re

# A match stays inside one comment on one line: the key may not run past
# the first colon, a newline or a closing ``-->``.
COMMENT_PATTERN = re.compile(r"<!--[ \t]*((?:(?!-->)[^:\n])+?)[ \t]*:[ \t]*(.*?)[ \t]*-->")


def extract_metadata(text: str) -> dict[str, str]:
    """Collect ``<!-- key: value -->`` pairs from markdown text.

    Later duplicates of a key overwrite earlier ones. An empty dict means the
    document carries no metadata.
    """

    attributes: dict[str, str] = {}
    for match in COMMENT_PATTERN.finditer(text):
        key = match.group(1).strip()
        if key:
            attributes[key] = match.group(2).strip()
    return attributes
