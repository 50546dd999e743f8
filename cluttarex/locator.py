"""
Main content location for Cluttarex.

Pure selection: picks the subtree most likely to hold the article without
touching the tree.
"""

import logging
from typing import List, Union

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# Tried in order; a comma group counts as one step
CONTENT_SELECTORS: List[str] = [
    "main",
    "article",
    '[role="main"]',
    ".content, .post-content, .article-body",
]


def _has_content(tag: Tag) -> bool:
    return bool(tag.get_text(strip=True)) or tag.find("img") is not None


def locate_main_content(soup: BeautifulSoup,
                        selectors: List[str] = CONTENT_SELECTORS) -> Union[Tag, BeautifulSoup]:
    """
    Select the single best candidate subtree.

    The first selector whose first non-empty match exists wins; otherwise
    the body, or the whole document when the markup has no body.
    """
    for selector in selectors:
        for candidate in soup.select(selector):
            if _has_content(candidate):
                logger.debug(f"Main content located with {selector!r}")
                return candidate

    body = soup.find("body")
    if body is not None:
        logger.debug("No content container found, using <body>")
        return body
    return soup
