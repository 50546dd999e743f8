"""
Data models for Cluttarex.

ArticleDocument is the contract handed to readers and UI collaborators.
It is frozen: callers may re-theme or re-layout it, but never edit it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import NO_TITLE, WORDS_PER_MINUTE

DIRECTIONS = ("ltr", "rtl")


@dataclass(frozen=True)
class ArticleDocument:
    """A cleaned article extracted from one page."""
    title: str
    content: str
    text_content: str
    direction: str = "ltr"
    url: Optional[str] = None

    def __post_init__(self):
        if not self.title:
            object.__setattr__(self, "title", NO_TITLE)
        if self.direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {self.direction!r}")

    @property
    def word_count(self) -> int:
        return len(self.text_content.split())

    @property
    def reading_time(self) -> int:
        """Estimated reading time in minutes (0 for an empty article)."""
        words = self.word_count
        if not words:
            return 0
        return max(1, round(words / WORDS_PER_MINUTE))

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON wire form of the article."""
        data = {
            "title": self.title,
            "content": self.content,
            "textContent": self.text_content,
            "direction": self.direction,
        }
        if self.url:
            data["url"] = self.url
        return data


@dataclass
class ImageRecord:
    """An image already kept during one deduplication pass."""
    key: str
    raw_src: str


@dataclass
class FetchedPage:
    """Raw markup returned by the fetcher."""
    url: str
    markup: bytes
    status_code: int = 200
    encoding: Optional[str] = None
    content_type: str = ""
