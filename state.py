"""
Persisted filter state.

Control values are saved as one flat JSON mapping of control id to value
under a single key of a key-value store. The page-limit control is never
saved or restored, so every session starts unbounded. Storage faults are
swallowed: a missing or corrupt entry reads as empty.
"""

import logging
from pathlib import Path
from typing import Protocol

import orjson

import controls
from controls import ControlBar

logger = logging.getLogger(__name__)

STORAGE_KEY = "releaseFilterSuite"

_STORAGE_ERRORS = (OSError, orjson.JSONDecodeError, TypeError, ValueError)


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, used in tests and for throwaway sessions."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """Key-value store kept as a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = orjson.loads(self.path.read_bytes())
        except orjson.JSONDecodeError as e:
            logger.debug(f"Ignoring corrupt state file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self.path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))


class FilterStateStore:
    def __init__(self, store: KeyValueStore | None = None, key: str = STORAGE_KEY):
        self.store = store if store is not None else MemoryStore()
        self.key = key

    def save(self, bar: ControlBar) -> None:
        """Persist every filter control's value (checkbox as bool, others as string)."""
        data = {c.id: (bool(c.value) if c.kind == "checkbox" else str(c.value)) for c in bar.filter_controls()}
        try:
            self.store.set_item(self.key, orjson.dumps(data).decode())
        except _STORAGE_ERRORS as e:
            logger.debug(f"Could not save filter state: {e}")

    def load(self, bar: ControlBar) -> None:
        """Restore saved values onto the bar. Unknown ids and the page limit are ignored."""
        try:
            raw = self.store.get_item(self.key)
            data = orjson.loads(raw) if raw else {}
        except _STORAGE_ERRORS as e:
            logger.debug(f"Ignoring unreadable filter state: {e}")
            return
        if not isinstance(data, dict):
            logger.debug("Ignoring filter state that is not a mapping")
            return

        restored = 0
        for control_id, value in data.items():
            if control_id == controls.PAGE_LIMIT:
                continue
            control = bar.get(control_id)
            if control is None:
                logger.debug(f"Ignoring unknown control {control_id!r} in saved state")
                continue
            control.set(value)
            restored += 1
        if restored:
            logger.info(f"Restored {restored} filter values")

    def clear(self, bar: ControlBar) -> None:
        """Reset every control to its default and forget the saved state.

        The caller re-applies filters afterwards.
        """
        for control in bar.controls.values():
            control.reset()
        try:
            self.store.remove_item(self.key)
        except _STORAGE_ERRORS as e:
            logger.debug(f"Could not remove filter state: {e}")
