import pytest

from markup import card_html
from parser import (
    ListingPage,
    find_container,
    parse_fetched_items,
    parse_html,
    set_hidden,
    show,
)


class TestContainer:
    def test_prefers_peliculas_container(self) -> None:
        soup = parse_html('<div class="box"></div><div class="peliculas" id="main"></div>')

        assert find_container(soup)["id"] == "main"

    def test_falls_back_to_box(self) -> None:
        soup = parse_html('<div class="box" id="fallback"></div>')

        assert find_container(soup)["id"] == "fallback"

    def test_page_without_container_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="No release container"):
            ListingPage.from_html("<html><body><p>nothing</p></body></html>", "https://example.org/")

    def test_cards_without_grid_append_to_container(self) -> None:
        page = ListingPage.from_html(f'<div class="box">{card_html(title="A-GRP")}</div>', "https://example.org/")

        page.append_items(parse_fetched_items(card_html(title="B-GRP")))

        assert len(page.items()) == 2
        assert page.grid is page.container


class TestFetchedItems:
    def test_pagination_inside_grid_is_removed(self) -> None:
        html = (
            '<div class="item_2 items">'
            + card_html(title="A-GRP")
            + '<div id="paginador"><div class="fit item">not a release</div></div>'
            + "</div>"
        )

        items = parse_fetched_items(html)

        assert [i.get_text() for i in items] == ["A-GRP"]


class TestVisibility:
    def test_hide_keeps_other_styles(self) -> None:
        item = parse_html('<div style="color:red"></div>').div

        set_hidden(item, True)

        assert item["style"] == "color:red; display:none"

    def test_show_drops_empty_style(self) -> None:
        item = parse_html('<div style="display: none"></div>').div

        show(item)

        assert not item.has_attr("style")
