"""
Tree helpers shared by the extraction stages.

All stages work on BeautifulSoup trees. Elements found by an earlier query
may already have been decomposed together with an ancestor, so removals go
through decompose_all(), which skips those.
"""

import re
from typing import Iterable

from bs4 import Tag

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE.sub(" ", text or "").strip()


def text_of(tag: Tag) -> str:
    """Return the trimmed text of an element."""
    return tag.get_text().strip()


def decompose_all(tags: Iterable[Tag]) -> int:
    """Decompose each still-attached tag; return how many were removed."""
    removed = 0
    for tag in tags:
        if tag.decomposed:
            continue
        tag.decompose()
        removed += 1
    return removed
