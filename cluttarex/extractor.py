"""
Article extraction for Cluttarex.

Runs the full pipeline over one page: parse, remove clutter, locate the main
content, filter link-dense blocks, normalize images, resolve links, scrub,
and assemble an ArticleDocument. Every call parses its own tree and keeps
its own dedup state; nothing is shared between calls.
"""

import logging
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from .clutter import Denylist, remove_clutter
from .constants import NO_TITLE
from .density import remove_link_dense_blocks
from .dom import collapse_whitespace
from .errors import CluttarexError, InternalError, MissingInput
from .fetcher import ContentFetcher, create_fetcher
from .images import normalize_images
from .links import resolve_links
from .locator import locate_main_content
from .models import ArticleDocument
from .scrubber import scrub

logger = logging.getLogger(__name__)


def extract_title(soup: BeautifulSoup) -> str:
    """Title from <title>, else the first <h1>, else NO_TITLE."""
    title_tag = soup.find("title")
    if title_tag:
        title = collapse_whitespace(title_tag.get_text())
        if title:
            return title

    h1 = soup.find("h1")
    if h1:
        title = collapse_whitespace(h1.get_text())
        if title:
            return title

    return NO_TITLE


def extract_direction(soup: BeautifulSoup) -> str:
    html = soup.find("html")
    direction = (html.get("dir") or "").strip().lower() if html else ""
    return "rtl" if direction == "rtl" else "ltr"


def assemble(soup: BeautifulSoup, root: Union[Tag, BeautifulSoup],
             base_url: Optional[str] = None) -> ArticleDocument:
    """Package the cleaned subtree and document metadata into an ArticleDocument."""
    return ArticleDocument(
        title=extract_title(soup),
        content=root.decode_contents(),
        text_content=collapse_whitespace(root.get_text(" ")),
        direction=extract_direction(soup),
        url=base_url or None,
    )


def extract_article(markup: Union[str, bytes, None], base_url: Optional[str] = None,
                    denylist: Optional[Denylist] = None,
                    encoding: Optional[str] = None) -> ArticleDocument:
    """
    Extract the main article from raw markup.

    Args:
        markup: Page HTML as text or bytes
        base_url: URL the page was loaded from, for resolving relative URLs
        denylist: Clutter lists to apply (defaults to the built-in Denylist)
        encoding: Charset of byte markup, when the source declared one;
            detected from the markup otherwise

    Returns:
        The cleaned ArticleDocument

    Raises:
        MissingInput: If no markup was given
        InternalError: If parsing or extraction fails unexpectedly
    """
    if markup is None:
        raise MissingInput("Missing page markup")

    try:
        if isinstance(markup, bytes) and encoding:
            soup = BeautifulSoup(markup, "html.parser", from_encoding=encoding)
        else:
            soup = BeautifulSoup(markup, "html.parser")

        remove_clutter(soup, denylist)
        root = locate_main_content(soup)
        remove_link_dense_blocks(root)
        normalize_images(root, base_url)
        resolve_links(root, base_url)
        scrub(root)

        return assemble(soup, root, base_url)
    except CluttarexError:
        raise
    except Exception as e:
        logger.error(f"Failed to extract content from {base_url or 'document'}: {e}")
        raise InternalError(str(e)) from e


class ReaderExtractor:
    """Fetch pages and extract their articles."""

    def __init__(self, fetcher: Optional[ContentFetcher] = None,
                 denylist: Optional[Denylist] = None):
        self.fetcher = fetcher or ContentFetcher()
        self.denylist = denylist or Denylist()

    def read(self, url: Optional[str]) -> ArticleDocument:
        """
        Fetch a remote page and extract its article.

        Relative URLs are resolved against the final URL after redirects.
        Byte markup is decoded with the charset the response declared, if any.

        Raises:
            MissingInput: If no URL was given
            FetchFailed: If the page could not be fetched
            InternalError: If extraction fails
        """
        page = self.fetcher.fetch(url)
        article = extract_article(page.markup, page.url, self.denylist, page.encoding)
        logger.info(f"Successfully extracted content from {page.url}")
        return article

    def extract(self, markup: Union[str, bytes, None],
                base_url: Optional[str] = None) -> ArticleDocument:
        """Extract the article from markup already in hand."""
        return extract_article(markup, base_url, self.denylist)


def create_extractor(config=None) -> ReaderExtractor:
    """
    Create a ReaderExtractor from a CluttarexConfig.

    Args:
        config: Configuration to read network and denylist settings from;
            built-in defaults when omitted
    """
    if config is None:
        return ReaderExtractor()

    fetcher = create_fetcher(
        timeout=config.timeout,
        user_agent=config.user_agent,
        verify_ssl=config.verify_ssl,
    )
    denylist = Denylist().extended(
        selectors=config.extra_clutter_selectors,
        phrases=config.extra_clutter_phrases,
    )
    return ReaderExtractor(fetcher=fetcher, denylist=denylist)
