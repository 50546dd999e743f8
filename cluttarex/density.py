"""
Link-density filtering for Cluttarex.

Blocks packed with short links and little prose are navigation or menus,
not content.
"""

import logging

from bs4 import Tag

from .constants import LINK_DENSITY_MIN_CHARS_PER_LINK, LINK_DENSITY_MIN_LINKS
from .dom import text_of

logger = logging.getLogger(__name__)

BLOCK_TAGS = ["div", "ul", "section"]


def is_link_dense(block: Tag,
                  min_links: int = LINK_DENSITY_MIN_LINKS,
                  min_chars_per_link: int = LINK_DENSITY_MIN_CHARS_PER_LINK) -> bool:
    """Return True when a block has more than min_links links and too little text per link."""
    link_count = len(block.find_all("a"))
    if link_count <= min_links:
        return False
    return len(text_of(block)) / link_count < min_chars_per_link


def remove_link_dense_blocks(root: Tag) -> int:
    """
    Remove link-dense div/ul/section descendants of root, deepest first.

    The root itself is never examined.

    Returns:
        Number of blocks removed
    """
    removed = 0
    # Reversed document order visits descendants before their ancestors
    for block in reversed(root.find_all(BLOCK_TAGS)):
        if is_link_dense(block):
            block.decompose()
            removed += 1
    logger.debug(f"Link-density filter dropped {removed} blocks")
    return removed
