import math
from enum import Enum

from pydantic import BaseModel, field_validator


class Category(str, Enum):
    MOVIES = "movies"
    TV_SHOWS = "tv-shows"
    TV_PACKS = "tv-packs"


# Resolutions offered by the resolution selector, highest first
RESOLUTIONS = ["2160p", "1080p", "720p"]


class ItemAttributes(BaseModel):
    """Semantic fields derived from one listing card.

    Computed on demand from markup; never cached on the card itself.
    """

    has_dolby_vision: bool = False
    has_hdr: bool = False
    rating: float = 0.0
    size_gb: float | None = None  # None means "no parseable size", distinct from 0
    release_group: str = ""
    resolution: str = ""
    category: Category = Category.MOVIES


class FilterCriteria(BaseModel):
    """Snapshot of the control bar's filter values.

    Rebuilt from the live controls on every evaluation. String filters are
    stored lowercased and trimmed.
    """

    only_dv: bool = False
    only_hdr: bool = False
    resolution: str = ""
    category: str = ""
    min_rating: float = 0.0
    min_size: float = 0.0
    max_size: float = math.inf
    group: str = ""
    search: str = ""

    @field_validator("group", "search")
    @classmethod
    def normalize_text(cls, v: str) -> str:
        return v.lower().strip()

    @field_validator("min_rating", "min_size", "max_size")
    @classmethod
    def clamp_non_negative(cls, v: float) -> float:
        return max(v, 0.0)

    @property
    def has_active_filters(self) -> bool:
        return bool(
            self.only_dv
            or self.only_hdr
            or self.resolution
            or self.category
            or self.min_rating > 0
            or self.min_size > 0
            or self.max_size < math.inf
            or self.group
            or self.search
        )

    def without_group(self) -> "FilterCriteria":
        return self.model_copy(update={"group": ""})


class SelectOption(BaseModel):
    """One entry of a select control."""

    value: str  # what the control reports; release groups use the lowercased name
    label: str  # display text, original casing


class ResultCount(BaseModel):
    visible: int
    total: int
    filters_active: bool = False

    @property
    def no_results(self) -> bool:
        """True when items exist but the active filters hide all of them."""
        return self.visible == 0 and self.total > 0 and self.filters_active

    @property
    def text(self) -> str:
        if self.no_results:
            return "No results — try adjusting your filters"
        return f"Showing {self.visible} / {self.total} releases"


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class TerminationCause(str, Enum):
    LIMIT_REACHED = "limit-reached"
    EXHAUSTED = "exhausted"
    FETCH_NOT_OK = "fetch-not-ok"
    FETCH_ERROR = "fetch-error"

    @property
    def is_failure(self) -> bool:
        return self in (TerminationCause.FETCH_NOT_OK, TerminationCause.FETCH_ERROR)
