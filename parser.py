"""
Listing page parsing.

Locates the release container in a listing document, enumerates the release
cards, strips pagination from fetched pages and holds the live collection
that additional pages are merged into.
"""

import re
from typing import Callable, Iterable

from bs4 import BeautifulSoup, Tag

CONTAINER_SELECTORS = ("div.peliculas", ".box")
GRID_SELECTOR = ".item_2.items"
ITEM_SELECTOR = ".fit.item"
PAGINATION_SELECTOR = "#paginador"

_DISPLAY_NONE_RE = re.compile(r"display\s*:\s*none\s*;?", re.IGNORECASE)


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def find_container(soup: BeautifulSoup) -> Tag | None:
    """Return the element holding the release cards, or None if the page has none."""
    for selector in CONTAINER_SELECTORS:
        container = soup.select_one(selector)
        if container is not None:
            return container
    return None


def find_grid(root: BeautifulSoup | Tag) -> BeautifulSoup | Tag:
    """The element cards are appended to; falls back to the root itself."""
    return root.select_one(GRID_SELECTOR) or root


def select_items(root: BeautifulSoup | Tag) -> list[Tag]:
    return root.select(ITEM_SELECTOR)


def remove_pagination(root: BeautifulSoup | Tag) -> None:
    """Drop the pagination subtree so fetched pages don't duplicate it."""
    pagination = root.select_one(PAGINATION_SELECTOR)
    if pagination is not None:
        pagination.decompose()


def parse_fetched_items(html: str) -> list[Tag]:
    """Cards of a fetched listing page, with its pagination removed first."""
    grid = find_grid(parse_html(html))
    remove_pagination(grid)
    return select_items(grid)


# ===== Inline visibility =====


def is_hidden(item: Tag) -> bool:
    style = item.get("style")
    return isinstance(style, str) and bool(_DISPLAY_NONE_RE.search(style))


def set_hidden(item: Tag, hidden: bool) -> None:
    if hidden:
        if not is_hidden(item):
            style = (item.get("style") or "").strip()
            if style and not style.endswith(";"):
                style += ";"
            item["style"] = f"{style} display:none".strip()
    else:
        show(item)


def show(item: Tag) -> None:
    """Remove any inline display:none, dropping the style attribute if it ends up empty."""
    style = item.get("style")
    if not isinstance(style, str):
        return
    style = _DISPLAY_NONE_RE.sub("", style).strip()
    if style:
        item["style"] = style
    else:
        del item["style"]


# ===== Live collection =====


class ListingPage:
    """The origin listing page as an in-memory document.

    Cards fetched from later pages are appended to its grid; listeners
    registered with `observe` are told once per appended batch.
    """

    def __init__(self, soup: BeautifulSoup, url: str):
        self.soup = soup
        self.url = url
        container = find_container(soup)
        if container is None:
            raise ValueError(f"No release container found on {url}")
        self.container: Tag = container
        self.grid = find_grid(container)
        self._listeners: list[Callable[[], None]] = []

    @classmethod
    def from_html(cls, html: str, url: str) -> "ListingPage":
        return cls(parse_html(html), url)

    def items(self) -> list[Tag]:
        return select_items(self.container)

    def visible_items(self) -> list[Tag]:
        return [item for item in self.items() if not is_hidden(item)]

    def observe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def append_items(self, nodes: Iterable[Tag]) -> int:
        count = 0
        for node in nodes:
            self.grid.append(node)
            count += 1
        if count:
            for listener in self._listeners:
                listener()
        return count

    def hide_pagination(self) -> None:
        pagination = self.soup.select_one(PAGINATION_SELECTOR)
        if pagination is not None:
            set_hidden(pagination, True)
