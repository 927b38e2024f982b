"""
Attribute extraction for listing cards.

Derives the semantic fields of one release card (Dolby Vision, HDR, rating,
size, release group, resolution, category) from its loosely structured
markup. Every getter is total: missing or malformed markup yields the
field's default and never prevents other cards from being evaluated.
"""

import logging
import re
from typing import Any, Callable

from bs4 import Tag

from models import Category, ItemAttributes

logger = logging.getLogger(__name__)

# Card sub-elements
DV_MARKER_SELECTOR = ".imdb_r span"
HDR_BADGE_SELECTOR = ".buttonhdr"
RESOLUTION_BADGE_SELECTOR = ".calidad3"
CATEGORY_LINK_SELECTOR = ".calidad4 a"
TITLE_SELECTOR = "h5"

DV_IMAGE_MARKER = "dv.png"

_RATING_RE = re.compile(r"Rating\s*:\s*(\d+(?:\.\d+)?)\s*/\s*10", re.IGNORECASE)
_SIZE_RE = re.compile(r"–\s*(\d+(?:\.\d+)?)\s*GB", re.IGNORECASE)
_TRAILING_SIZE_RE = re.compile(r"\s*–\s*[\d.]+\s*(?:GB|MB)\s*$", re.IGNORECASE)
# Release names use ASCII hyphens, listing titles use en dashes as separators
_GROUP_SEPARATOR_RE = re.compile(r"[-–]")
_RESOLUTION_RE = re.compile(r"\d{3,4}p", re.IGNORECASE)


# ===== Text helpers =====


def item_text(item: Tag) -> str:
    """Rendered text of a card with whitespace collapsed."""
    return re.sub(r"\s+", " ", item.get_text(separator=" ")).strip()


def title_text(item: Tag) -> str:
    title = item.select_one(TITLE_SELECTOR)
    if title is None:
        return ""
    return re.sub(r"\s+", " ", title.get_text(separator=" ")).strip()


# ===== Field getters =====


def has_dolby_vision(item: Tag) -> bool:
    span = item.select_one(DV_MARKER_SELECTOR)
    if span is None:
        return False
    style = span.get("style")
    return isinstance(style, str) and DV_IMAGE_MARKER in style


def has_hdr(item: Tag) -> bool:
    return item.select_one(HDR_BADGE_SELECTOR) is not None


def get_rating(item: Tag) -> float:
    match = _RATING_RE.search(item_text(item))
    return float(match.group(1)) if match else 0.0


def get_size(item: Tag) -> float | None:
    """Size in GB from the title's `– N GB` part, or None when there is none."""
    match = _SIZE_RE.search(title_text(item))
    return float(match.group(1)) if match else None


def get_group(item: Tag) -> str:
    """Release group: last separator-delimited segment of the title.

    The trailing size suffix is stripped first. Titles with a single segment
    have no group. Hyphens inside the human-readable title are not
    distinguished from the group separator.
    """
    clean = _TRAILING_SIZE_RE.sub("", title_text(item)).strip()
    parts = _GROUP_SEPARATOR_RE.split(clean)
    return parts[-1].strip() if len(parts) > 1 else ""


def get_resolution(item: Tag) -> str:
    for badge in item.select(RESOLUTION_BADGE_SELECTOR):
        text = badge.get_text()
        if _RESOLUTION_RE.search(text):
            return text.strip()
    return ""


def get_category(item: Tag) -> Category:
    """Classify a card by its category links.

    tv-packs wins over tv-shows when both appear; cards without either are movies.
    """
    hrefs = [a.get("href") or "" for a in item.select(CATEGORY_LINK_SELECTOR)]
    hrefs = [h for h in hrefs if isinstance(h, str)]
    if any("tv-packs" in h for h in hrefs):
        return Category.TV_PACKS
    if any("tv-shows" in h for h in hrefs):
        return Category.TV_SHOWS
    return Category.MOVIES


# ===== Full attribute set =====


def _safe(getter: Callable[[Tag], Any], item: Tag, default: Any) -> Any:
    try:
        return getter(item)
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug(f"{getter.__name__} failed, using default {default!r}: {e}")
        return default


def extract_attributes(item: Tag) -> ItemAttributes:
    """Extract every attribute of a card, degrading each field independently."""
    return ItemAttributes(
        has_dolby_vision=_safe(has_dolby_vision, item, False),
        has_hdr=_safe(has_hdr, item, False),
        rating=_safe(get_rating, item, 0.0),
        size_gb=_safe(get_size, item, None),
        release_group=_safe(get_group, item, ""),
        resolution=_safe(get_resolution, item, ""),
        category=_safe(get_category, item, Category.MOVIES),
    )
