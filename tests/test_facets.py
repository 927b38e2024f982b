from controls import GROUP, ControlBar
from facets import collect_groups, rebuild_group_select
from models import SelectOption


class TestCollectGroups:
    def test_distinct_sorted_case_insensitively(self, make_card) -> None:
        cards = [
            make_card(title="A.Film-zeta"),
            make_card(title="B.Film-Alpha"),
            make_card(title="C.Film-beta"),
            make_card(title="D.Film-ALPHA"),
        ]

        groups = collect_groups(cards)

        assert [g.value for g in groups] == ["alpha", "beta", "zeta"]

    def test_first_casing_is_displayed(self, make_card) -> None:
        cards = [make_card(title="A.Film-SPARKS"), make_card(title="B.Film-sparks")]

        assert collect_groups(cards) == [SelectOption(value="sparks", label="SPARKS")]

    def test_empty_group_is_never_offered(self, make_card) -> None:
        cards = [make_card(title="No Group Here"), make_card(), make_card(title="Film-GRP")]

        assert [g.value for g in collect_groups(cards)] == ["grp"]


class TestRebuildGroupSelect:
    def test_keeps_selection_still_offered(self) -> None:
        select = ControlBar()[GROUP]
        rebuild_group_select(select, [SelectOption(value="grp", label="GRP")])
        select.set("grp")

        rebuild_group_select(
            select,
            [SelectOption(value="abc", label="ABC"), SelectOption(value="grp", label="GRP")],
        )

        assert select.value == "grp"
        assert select.option_values() == ["", "abc", "grp"]

    def test_resets_selection_no_longer_offered(self) -> None:
        select = ControlBar()[GROUP]
        rebuild_group_select(select, [SelectOption(value="grp", label="GRP")])
        select.set("grp")

        rebuild_group_select(select, [SelectOption(value="abc", label="ABC")])

        assert select.value == ""

    def test_all_groups_option_comes_first(self) -> None:
        select = ControlBar()[GROUP]

        rebuild_group_select(select, [])

        assert select.options == [SelectOption(value="", label="All groups")]
