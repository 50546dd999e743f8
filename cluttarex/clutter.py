"""
Clutter removal for Cluttarex.

Deletes structurally irrelevant elements (scripts, navigation, ads, forms,
social widgets, ...) via a selector denylist, and textually irrelevant
elements (comment prompts, relative timestamps) via phrase and pattern
matching. The lists are plain data held by a Denylist, so callers can
extend them without touching the remover.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Pattern

import soupsieve
from bs4 import BeautifulSoup

from .constants import MAX_PHRASE_BLOCK_LENGTH
from .dom import decompose_all, text_of

logger = logging.getLogger(__name__)


# Elements that never carry article content
CLUTTER_TAGS = [
    "script", "style", "iframe", "nav", "footer", "header", "aside",
    "noscript", "svg", "form", "button", "input", "link", "meta",
    "textarea", "select",
]

# Class, id and role patterns, grouped by what they catch
CLUTTER_PATTERNS = [
    # ads
    ".ad", ".ads", ".advert", "ins.adsbygoogle", '[class^="ad-"]', '[class*=" ad-"]',
    '[id^="ad-"]', '[id^="ad_"]', '[class*="advertisement"]', '[id*="advertisement"]',
    '[class*="sponsored"]', '[id*="google_ads"]',
    # menus and navbars
    '[class*="menu"]', '[id*="menu"]', '[class*="navbar"]', '[id*="navbar"]',
    '[class*="navigation"]', '[role="navigation"]',
    # sidebars
    '[class*="sidebar"]', '[id*="sidebar"]', '[role="complementary"]',
    # banners
    '[class*="banner"]', '[id*="banner"]', '[role="banner"]',
    # popups and modals
    '[class*="popup"]', '[id*="popup"]', '[class*="modal"]', '[id*="modal"]',
    # social and share widgets
    '[class*="social"]', '[id*="social"]', '[class*="share"]', '[id*="share"]',
    # tables of contents
    ".toc", "#toc", '[class*="table-of-contents"]',
    # related and recommended blocks
    '[class*="related"]', '[id*="related"]', '[class*="recommended"]', '[id*="recommended"]',
    # comment sections
    '[class*="comment"]', '[id*="comment"]', "#disqus_thread",
    # search boxes
    '[class*="search"]', '[id*="search"]', '[role="search"]',
    # breadcrumbs
    '[class*="breadcrumb"]', '[id*="breadcrumb"]',
    # testimonials and reviews
    '[class*="testimonial"]', '[class*="reviews"]', ".review",
    # cookie, consent and newsletter prompts
    '[class*="cookie"]', '[id*="cookie"]', '[class*="consent"]', '[id*="consent"]',
    '[class*="newsletter"]', '[id*="newsletter"]', '[class*="subscribe"]',
    # wiki furniture
    ".navbox", ".infobox", ".reference", ".reflist", ".ambox", ".metadata",
]

CLUTTER_SELECTORS = CLUTTER_TAGS + CLUTTER_PATTERNS

CLUTTER_PHRASES = [
    "leave a comment",
    "leave a reply",
    "cancel reply",
    "post a comment",
    "more from the",
    "you may also like",
    "you might also like",
    "related articles",
    "recommended for you",
    "share this article",
    "sign up for our newsletter",
    "subscribe to our newsletter",
]

# Tags whose text is checked against the phrases and the timestamp pattern
TEXT_CHECK_TAGS = ["div", "section", "p", "form", "h2", "h3", "span", "time"]

RELATIVE_TIMESTAMP = re.compile(
    r"^\d+\s+(hrs?|hours?|mins?|minutes?|days?)\s+ago$", re.IGNORECASE
)

# Removing these would leave nothing to extract from
PROTECTED_TAGS = {"html", "body"}


@dataclass
class Denylist:
    """Selectors, phrases and patterns the clutter remover deletes."""
    selectors: List[str] = field(default_factory=lambda: list(CLUTTER_SELECTORS))
    phrases: List[str] = field(default_factory=lambda: list(CLUTTER_PHRASES))
    text_tags: List[str] = field(default_factory=lambda: list(TEXT_CHECK_TAGS))
    timestamp_pattern: Pattern = RELATIVE_TIMESTAMP
    max_phrase_length: int = MAX_PHRASE_BLOCK_LENGTH

    def extended(self, selectors: Iterable[str] = (), phrases: Iterable[str] = ()) -> "Denylist":
        """Return a copy with extra selectors and phrases appended."""
        return replace(
            self,
            selectors=self.selectors + [s for s in selectors if s not in self.selectors],
            phrases=self.phrases + [p.lower() for p in phrases if p.lower() not in self.phrases],
            text_tags=list(self.text_tags),
        )

    def matches_text(self, text: str) -> bool:
        """Check lowercase trimmed block text against phrases and the timestamp pattern."""
        if len(text) < self.max_phrase_length and any(p in text for p in self.phrases):
            return True
        return bool(self.timestamp_pattern.fullmatch(text))


def remove_clutter(soup: BeautifulSoup, denylist: Denylist = None) -> int:
    """
    Remove denylisted elements from the tree in place.

    Args:
        soup: Parsed document
        denylist: Lists to apply (defaults to the built-in Denylist)

    Returns:
        Number of elements removed
    """
    denylist = denylist or Denylist()
    removed = _remove_by_selector(soup, denylist.selectors)
    removed += _remove_by_text(soup, denylist)
    logger.debug(f"Clutter remover dropped {removed} elements")
    return removed


def _remove_by_selector(soup: BeautifulSoup, selectors: List[str]) -> int:
    removed = 0
    for selector in selectors:
        try:
            matches = soup.select(selector)
        except soupsieve.SelectorSyntaxError as e:
            logger.warning(f"Skipping invalid clutter selector {selector!r}: {e}")
            continue
        removed += decompose_all([tag for tag in matches if tag.name not in PROTECTED_TAGS])
    return removed


def _remove_by_text(soup: BeautifulSoup, denylist: Denylist) -> int:
    removed = 0
    for tag in soup.find_all(denylist.text_tags):
        if tag.decomposed:
            continue
        if denylist.matches_text(text_of(tag).lower()):
            tag.decompose()
            removed += 1
    return removed
