"""
Attribute and empty-node scrubbing for Cluttarex.

Presentation is reassigned by whoever renders the article, so styling
attributes from the source page are dropped. Elements emptied by earlier
stages are then removed until none remain.
"""

import logging

from bs4 import Tag

logger = logging.getLogger(__name__)

STRIPPED_ATTRIBUTES = ["style", "class", "id", "width", "height"]

EMPTY_CANDIDATE_TAGS = ["p", "div", "span", "h1", "h2", "h3", "h4", "h5", "h6", "li"]


def strip_attributes(root: Tag) -> None:
    for tag in [root] + root.find_all(True):
        for attr in STRIPPED_ATTRIBUTES:
            tag.attrs.pop(attr, None)


def is_empty(tag: Tag) -> bool:
    """An element is empty when it has no text and no child elements."""
    return not tag.get_text(strip=True) and tag.find(True) is None


def remove_empty_nodes(root: Tag) -> int:
    """
    Remove empty candidate elements, repeating until a pass removes nothing.

    Every pass removes at least one element, so the loop is bounded by the
    size of the subtree.

    Returns:
        Number of elements removed
    """
    total = 0
    while True:
        removed = 0
        for tag in root.find_all(EMPTY_CANDIDATE_TAGS):
            if is_empty(tag):
                tag.decompose()
                removed += 1
        if not removed:
            break
        total += removed
    return total


def scrub(root: Tag) -> int:
    """Strip presentational attributes, then remove empty elements."""
    strip_attributes(root)
    removed = remove_empty_nodes(root)
    logger.debug(f"Scrubber removed {removed} empty elements")
    return removed
