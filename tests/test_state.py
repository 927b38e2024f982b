from pathlib import Path

import orjson
import pytest

import controls
from controls import ControlBar
from state import STORAGE_KEY, FilterStateStore, JsonFileStore, MemoryStore


class FailingStore:
    """A store whose every operation fails, like a full or blocked storage area."""

    def get_item(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    def set_item(self, key: str, value: str) -> None:
        raise OSError("storage unavailable")

    def remove_item(self, key: str) -> None:
        raise OSError("storage unavailable")


@pytest.fixture
def configured_bar() -> ControlBar:
    bar = ControlBar()
    bar.set(controls.DV, True)
    bar.set(controls.RESOLUTION, "1080p")
    bar.set(controls.RATING, "7")
    bar.set(controls.SEARCH, "dune")
    bar.set(controls.PAGE_LIMIT, "10")
    return bar


class TestSave:
    def test_saves_every_filter_control(self, configured_bar: ControlBar) -> None:
        store = MemoryStore()

        FilterStateStore(store).save(configured_bar)

        data = orjson.loads(store.get_item(STORAGE_KEY))
        assert data[controls.DV] is True
        assert data[controls.HDR] is False
        assert data[controls.RESOLUTION] == "1080p"
        assert data[controls.RATING] == "7"
        assert data[controls.GROUP] == ""

    def test_page_limit_is_never_saved(self, configured_bar: ControlBar) -> None:
        store = MemoryStore()

        FilterStateStore(store).save(configured_bar)

        assert controls.PAGE_LIMIT not in orjson.loads(store.get_item(STORAGE_KEY))

    def test_storage_failure_is_silent(self, configured_bar: ControlBar) -> None:
        FilterStateStore(FailingStore()).save(configured_bar)


class TestLoad:
    def test_round_trip(self, configured_bar: ControlBar) -> None:
        state = FilterStateStore(MemoryStore())
        state.save(configured_bar)
        bar = ControlBar()

        state.load(bar)

        assert bar.value(controls.DV) is True
        assert bar.value(controls.RESOLUTION) == "1080p"
        assert bar.value(controls.RATING) == "7"
        assert bar.value(controls.SEARCH) == "dune"
        assert bar.value(controls.PAGE_LIMIT) == controls.PAGE_LIMIT_ALL

    def test_ignores_unknown_ids_and_page_limit(self) -> None:
        saved = {"f-unknown": "x", controls.PAGE_LIMIT: "5", controls.HDR: True}
        store = MemoryStore({STORAGE_KEY: orjson.dumps(saved).decode()})
        bar = ControlBar()

        FilterStateStore(store).load(bar)

        assert bar.value(controls.HDR) is True
        assert bar.value(controls.PAGE_LIMIT) == controls.PAGE_LIMIT_ALL

    def test_select_value_not_offered_reads_empty(self) -> None:
        saved = {controls.RESOLUTION: "480p"}
        store = MemoryStore({STORAGE_KEY: orjson.dumps(saved).decode()})
        bar = ControlBar()

        FilterStateStore(store).load(bar)

        assert bar.value(controls.RESOLUTION) == ""

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2, 3]", '"text"', ""])
    def test_corrupt_state_is_treated_as_empty(self, raw: str) -> None:
        bar = ControlBar()

        FilterStateStore(MemoryStore({STORAGE_KEY: raw})).load(bar)

        assert all(c.value == c.default for c in bar.controls.values())

    def test_missing_state(self) -> None:
        bar = ControlBar()

        FilterStateStore(MemoryStore()).load(bar)

        assert all(c.value == c.default for c in bar.controls.values())

    def test_storage_failure_is_silent(self) -> None:
        bar = ControlBar()

        FilterStateStore(FailingStore()).load(bar)

        assert bar.value(controls.DV) is False


class TestClear:
    def test_resets_controls_and_forgets_state(self, configured_bar: ControlBar) -> None:
        store = MemoryStore()
        state = FilterStateStore(store)
        state.save(configured_bar)

        state.clear(configured_bar)

        assert store.get_item(STORAGE_KEY) is None
        assert configured_bar.value(controls.PAGE_LIMIT) == controls.PAGE_LIMIT_ALL
        for control in configured_bar.filter_controls():
            assert control.value in ("", False)

    def test_reload_after_clear_restores_nothing(self, configured_bar: ControlBar) -> None:
        state = FilterStateStore(MemoryStore())
        state.save(configured_bar)
        state.clear(configured_bar)
        bar = ControlBar()

        state.load(bar)

        assert all(c.value == c.default for c in bar.controls.values())

    def test_storage_failure_is_silent(self, configured_bar: ControlBar) -> None:
        FilterStateStore(FailingStore()).clear(configured_bar)

        assert configured_bar.value(controls.DV) is False


class TestJsonFileStore:
    def test_persists_across_instances(self, tmp_path: Path, configured_bar: ControlBar) -> None:
        path = tmp_path / "filters.json"
        FilterStateStore(JsonFileStore(path)).save(configured_bar)
        bar = ControlBar()

        FilterStateStore(JsonFileStore(path)).load(bar)

        assert bar.value(controls.SEARCH) == "dune"

    def test_remove_item(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "filters.json")
        store.set_item("a", "1")
        store.set_item("b", "2")

        store.remove_item("a")

        assert store.get_item("a") is None
        assert store.get_item("b") == "2"

    def test_corrupt_file_is_treated_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "filters.json"
        path.write_text("{{{")
        bar = ControlBar()

        FilterStateStore(JsonFileStore(path)).load(bar)

        assert bar.value(controls.SEARCH) == ""

    def test_save_replaces_corrupt_file(self, tmp_path: Path, configured_bar: ControlBar) -> None:
        path = tmp_path / "filters.json"
        path.write_text("{{{")
        FilterStateStore(JsonFileStore(path)).save(configured_bar)
        bar = ControlBar()

        FilterStateStore(JsonFileStore(path)).load(bar)

        assert bar.value(controls.SEARCH) == "dune"
        assert STORAGE_KEY in orjson.loads(path.read_bytes())
