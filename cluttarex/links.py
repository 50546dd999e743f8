"""
Hyperlink resolution for Cluttarex.

Rewrites relative hrefs to absolute URLs so links keep working once the
content is shown outside its page. In-page fragments, mailto: links and
anything that already carries a scheme are left alone.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from bs4 import Tag

from .images import resolve_url

logger = logging.getLogger(__name__)


def needs_resolution(href: str) -> bool:
    """Return True for hrefs that are relative, not fragments, and not mailto:."""
    if not href or href.startswith("#") or href.lower().startswith("mailto:"):
        return False
    try:
        return not urlparse(href).scheme
    except ValueError:
        return False


def resolve_links(root: Tag, base_url: Optional[str]) -> int:
    """
    Resolve every relative <a href> under root against base_url, in place.

    Returns:
        Number of links rewritten
    """
    resolved = 0
    for anchor in root.find_all("a", href=True):
        href = anchor["href"].strip()
        if not needs_resolution(href):
            continue
        absolute = resolve_url(href, base_url)
        if absolute != href:
            anchor["href"] = absolute
            resolved += 1
    logger.debug(f"Link resolver rewrote {resolved} links")
    return resolved
