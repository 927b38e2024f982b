"""
Control bar model.

Holds the named filter controls whose values form the filter criteria, plus
the bar's read-only affordances: the result counter, the page-load progress
indicator, the transient status line and the load trigger.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Literal

from models import RESOLUTIONS, Category, SelectOption

PROGRESS_HIDE_SECONDS = 1.5
STATUS_CLEAR_SECONDS = 5.0

# Control ids double as the persisted keys
DV = "f-dv"
HDR = "f-hdr"
RESOLUTION = "f-res"
RATING = "f-rating"
MIN_SIZE = "f-minsize"
MAX_SIZE = "f-maxsize"
CATEGORY = "f-category"
GROUP = "f-group"
SEARCH = "f-search"
PAGE_LIMIT = "f-pagelimit"

PAGE_LIMIT_ALL = "all"
PAGE_LIMIT_CHOICES = [PAGE_LIMIT_ALL, "5", "10", "20", "50", "100"]

ControlKind = Literal["checkbox", "select", "number", "text"]


@dataclass
class Control:
    id: str
    kind: ControlKind
    default: bool | str = ""
    options: list[SelectOption] = field(default_factory=list)  # select only
    value: bool | str = ""
    highlighted: bool = False

    def __post_init__(self) -> None:
        self.value = self.default

    def set(self, value: bool | str) -> None:
        """Assign a value the way a form control would accept it.

        Checkboxes coerce to bool. Selects fall back to "" for a value that is
        not among their options.
        """
        if self.kind == "checkbox":
            self.value = bool(value)
            return
        value = "" if value is None else str(value)
        if self.kind == "select" and value not in self.option_values():
            value = ""
        self.value = value

    def reset(self) -> None:
        self.value = self.default

    def option_values(self) -> list[str]:
        return [o.value for o in self.options]

    @property
    def active(self) -> bool:
        if self.kind == "checkbox":
            return bool(self.value)
        return self.value != ""


def _select(control_id: str, options: list[tuple[str, str]], default: str = "") -> Control:
    return Control(
        id=control_id,
        kind="select",
        default=default,
        options=[SelectOption(value=v, label=label) for v, label in options],
    )


# ===== Progress indicator and status line =====


@dataclass
class ProgressIndicator:
    visible: bool = False
    width: int = 0  # percent
    label: str = ""
    percent_text: str = ""
    hide_delay: float = PROGRESS_HIDE_SECONDS

    def show(self) -> None:
        self.visible = True

    def update(self, loaded: int, total: int) -> None:
        pct = round(loaded / total * 100) if total else 100
        self.width = pct
        self.label = f"Page {loaded} of {total}"
        self.percent_text = f"{pct}%"

    def running(self, loaded: int) -> None:
        """Report progress when the total page count is unknown."""
        self.width = 100
        self.label = f"{loaded} page(s) loaded..."
        self.percent_text = ""

    def finish(self) -> None:
        """Force the bar to done, then hide and reset it after a short pause."""
        self.width = 100
        self.percent_text = "100%"
        self.label = "Done!"
        _call_later(self.hide_delay, self._hide)

    def _hide(self) -> None:
        self.visible = False
        self.width = 0


@dataclass
class StatusLine:
    text: str = ""
    clear_delay: float = STATUS_CLEAR_SECONDS
    _handle: asyncio.TimerHandle | None = field(default=None, repr=False)

    def flash(self, text: str) -> None:
        """Show a message that clears itself after `clear_delay` seconds."""
        self.text = text
        if self._handle is not None:
            self._handle.cancel()
        self._handle = _call_later(self.clear_delay, self.clear)

    def clear(self) -> None:
        self.text = ""
        self._handle = None


def _call_later(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle | None:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No event loop to defer on; apply immediately.
        callback()
        return None
    return loop.call_later(delay, callback)


@dataclass
class LoadTrigger:
    disabled: bool = False


# ===== The bar =====


class ControlBar:
    def __init__(self, progress: ProgressIndicator | None = None, status: StatusLine | None = None):
        controls = [
            Control(id=DV, kind="checkbox", default=False),
            Control(id=HDR, kind="checkbox", default=False),
            _select(RESOLUTION, [("", "All resolutions")] + [(r, r) for r in RESOLUTIONS]),
            Control(id=RATING, kind="number"),
            Control(id=MIN_SIZE, kind="number"),
            Control(id=MAX_SIZE, kind="number"),
            _select(
                CATEGORY,
                [
                    ("", "All"),
                    (Category.MOVIES.value, "Movies"),
                    (Category.TV_SHOWS.value, "TV Shows"),
                    (Category.TV_PACKS.value, "TV Packs"),
                ],
            ),
            _select(GROUP, [("", "All groups")]),
            Control(id=SEARCH, kind="text"),
            _select(
                PAGE_LIMIT,
                [(PAGE_LIMIT_ALL, "All pages")] + [(n, f"{n} pages") for n in PAGE_LIMIT_CHOICES[1:]],
                default=PAGE_LIMIT_ALL,
            ),
        ]
        self.controls: dict[str, Control] = {c.id: c for c in controls}
        self.counter = ""
        self.progress = progress or ProgressIndicator()
        self.status = status or StatusLine()
        self.load_trigger = LoadTrigger()

    def __getitem__(self, control_id: str) -> Control:
        return self.controls[control_id]

    def get(self, control_id: str) -> Control | None:
        return self.controls.get(control_id)

    def value(self, control_id: str) -> bool | str:
        return self.controls[control_id].value

    def set(self, control_id: str, value: bool | str) -> None:
        self.controls[control_id].set(value)

    def filter_controls(self) -> list[Control]:
        """Every control except the page limit, which is not a filter."""
        return [c for c in self.controls.values() if c.id != PAGE_LIMIT]

    def refresh_highlights(self) -> None:
        for control in self.filter_controls():
            control.highlighted = control.active
