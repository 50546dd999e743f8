"""
Cluttarex - distraction-free reading.

Extracts the main content of an arbitrary web page and returns it as a
cleaned, deduplicated fragment ready to be re-rendered in a reading view.

Example Usage:
    >>> from cluttarex import ReaderExtractor, extract_article
    >>> article = ReaderExtractor().read("https://example.com/post")
    >>> article.title, article.direction
    >>> extract_article(open("saved.html").read(), "https://example.com/post")
"""

__version__ = "1.0.0"
__author__ = "Cluttarex Contributors"

# Pipeline
from cluttarex.extractor import ReaderExtractor, create_extractor, extract_article
from cluttarex.clutter import Denylist
from cluttarex.fetcher import ContentFetcher

# Models and errors
from cluttarex.models import ArticleDocument
from cluttarex.errors import CluttarexError, FetchFailed, InternalError, MissingInput

# Configuration
from cluttarex.config import CluttarexConfig, get_config, init_config

__all__ = [
    # Pipeline
    "ReaderExtractor",
    "create_extractor",
    "extract_article",
    "Denylist",
    "ContentFetcher",
    # Models and errors
    "ArticleDocument",
    "CluttarexError",
    "FetchFailed",
    "InternalError",
    "MissingInput",
    # Config
    "CluttarexConfig",
    "get_config",
    "init_config",
]
