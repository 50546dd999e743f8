"""
Image normalization and deduplication for Cluttarex.

Each <img> in the selected subtree goes through a fixed sequence of steps,
in source order:

1. promote a lazy-load attribute (data-src, data-original) to src
2. resolve a relative src against the base URL
3. drop the loading attribute
4. remove the image when it still has no src
5. remove placeholders, tracking pixels, thumbnails and unavailable images
6. remove duplicates, keyed by the hash-like file name when there is one
7. remove images declared smaller than MIN_IMAGE_WIDTH x MIN_IMAGE_HEIGHT

An image removed at one step skips the remaining steps.
"""

import logging
import re
from typing import Dict, Optional
from urllib.parse import urljoin

from bs4 import Tag

from .constants import MIN_IMAGE_HEIGHT, MIN_IMAGE_WIDTH
from .models import ImageRecord

logger = logging.getLogger(__name__)

LAZY_SRC_ATTRIBUTES = ["data-src", "data-original"]

PLACEHOLDER_MARKERS = [
    "grey-placeholder",
    "transparent.gif",
    "pixel.gif",
    "placeholder",
    "pixel",
    "160x90",
    "100x100",
    "thumbnail",
]

UNAVAILABLE_LABEL = "image unavailable"

HASHED_FILENAME = re.compile(r"/([a-z0-9-]{10,})\.(jpg|jpeg|png|webp)", re.IGNORECASE)

_LEADING_INT = re.compile(r"^\s*(\d+)")


def resolve_url(url: str, base_url: Optional[str]) -> str:
    """Resolve url against base_url, returning url unchanged when that fails."""
    if not base_url:
        return url
    try:
        return urljoin(base_url, url)
    except ValueError as e:
        logger.debug(f"Could not resolve {url!r} against {base_url!r}: {e}")
        return url


def is_absolute_src(src: str) -> bool:
    return src.lower().startswith(("http", "data:"))


def dedup_key(src: str) -> str:
    """Return the hash-like file name segment of src, or src itself."""
    match = HASHED_FILENAME.search(src)
    return match.group(1) if match else src


def is_placeholder(img: Tag, src: str) -> bool:
    lowered = src.lower()
    if any(marker in lowered for marker in PLACEHOLDER_MARKERS):
        return True
    for attr in ("aria-label", "alt"):
        if (img.get(attr) or "").strip().lower() == UNAVAILABLE_LABEL:
            return True
    return False


def declared_size(value) -> int:
    """Parse a declared width/height; 0 means undeclared."""
    if not value or "%" in value:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def is_too_small(img: Tag) -> bool:
    width = declared_size(img.get("width"))
    height = declared_size(img.get("height"))
    return 0 < width < MIN_IMAGE_WIDTH or 0 < height < MIN_IMAGE_HEIGHT


def _resolve_srcset(srcset: str, base_url: Optional[str]) -> str:
    candidates = []
    for candidate in srcset.split(","):
        parts = candidate.strip().split(None, 1)
        if not parts:
            continue
        if not is_absolute_src(parts[0]):
            parts[0] = resolve_url(parts[0], base_url)
        candidates.append(" ".join(parts))
    return ", ".join(candidates)


def normalize_images(root: Tag, base_url: Optional[str]) -> Dict[str, int]:
    """
    Normalize and deduplicate every image under root, in place.

    Args:
        root: Selected content subtree
        base_url: URL relative sources are resolved against

    Returns:
        Counts of kept and removed images, for logging
    """
    seen: Dict[str, ImageRecord] = {}
    stats = {"kept": 0, "missing": 0, "placeholder": 0, "duplicate": 0, "small": 0}

    for img in root.find_all("img"):
        src = (img.get("src") or "").strip()
        if not src:
            for attr in LAZY_SRC_ATTRIBUTES:
                lazy = (img.get(attr) or "").strip()
                if lazy:
                    src = lazy
                    break

        if src and not is_absolute_src(src):
            src = resolve_url(src, base_url)
        if src:
            img["src"] = src

        if img.get("srcset"):
            img["srcset"] = _resolve_srcset(img["srcset"], base_url)

        if "loading" in img.attrs:
            del img["loading"]

        if not src:
            img.decompose()
            stats["missing"] += 1
            continue

        if is_placeholder(img, src):
            img.decompose()
            stats["placeholder"] += 1
            continue

        key = dedup_key(src)
        if key in seen:
            logger.debug(f"Dropping duplicate image {src} (first seen as {seen[key].raw_src})")
            img.decompose()
            stats["duplicate"] += 1
            continue
        seen[key] = ImageRecord(key=key, raw_src=src)

        if is_too_small(img):
            img.decompose()
            stats["small"] += 1
            continue

        stats["kept"] += 1

    logger.debug(f"Image normalizer: {stats}")
    return stats
