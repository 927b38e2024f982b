from typing import Callable

import pytest
from bs4 import Tag

from markup import ORIGIN_URL, card_html, listing_html
from parser import ListingPage, parse_html


@pytest.fixture
def make_card() -> Callable[..., Tag]:
    """Build a single parsed card from keyword options."""

    def _make(**kwargs) -> Tag:
        return parse_html(card_html(**kwargs)).select_one(".fit.item")

    return _make


@pytest.fixture
def make_page() -> Callable[..., ListingPage]:
    """Build a live listing page from card markup strings."""

    def _make(cards: list[str], url: str = ORIGIN_URL, pagination: bool = True) -> ListingPage:
        return ListingPage.from_html(listing_html(cards, pagination), url)

    return _make


@pytest.fixture
def sample_cards() -> list[str]:
    return [
        card_html(
            title="Dune.Part.Two.2024.2160p.UHD.BluRay.DV-FraMeSToR – 58.3 GB",
            rating=8.6,
            dv=True,
            hdr=True,
            badges=("2160p",),
        ),
        card_html(
            title="Oppenheimer.2023.1080p.BluRay.x264-SPARKS – 14.1 GB",
            rating=8.4,
            badges=("1080p",),
        ),
        card_html(
            title="Shogun.S01.1080p.WEB.h264-ETHEL – 32 GB",
            rating=8.7,
            badges=("1080p",),
            category_hrefs=("https://example.org/tv-packs/",),
        ),
        card_html(
            title="The.Bear.S03E01.720p.WEB.h264-sparks",
            rating=7.9,
            badges=("720p",),
            category_hrefs=("https://example.org/tv-shows/",),
        ),
    ]
