"""
Filter evaluation.

Reads the control bar into a criteria snapshot, decides per card whether it
stays visible and updates the bar's counter and highlights.

Visibility is computed in two passes. The first applies every criterion
except the release group and its survivors feed the group facet; the group
filter is then applied over those survivors only.
"""

import logging
import math

from bs4 import Tag

import controls
from controls import ControlBar
from extractor import (
    get_category,
    get_group,
    get_rating,
    get_resolution,
    get_size,
    has_dolby_vision,
    has_hdr,
    item_text,
)
from facets import collect_groups, rebuild_group_select
from models import FilterCriteria, ResultCount
from parser import ListingPage, is_hidden, set_hidden

logger = logging.getLogger(__name__)


def _parse_float(value: bool | str, default: float) -> float:
    """Float value of a number control; empty, unparsable or zero gives `default`."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or number == 0:
        return default
    return number


def read_criteria(bar: ControlBar) -> FilterCriteria:
    return FilterCriteria(
        only_dv=bool(bar.value(controls.DV)),
        only_hdr=bool(bar.value(controls.HDR)),
        resolution=str(bar.value(controls.RESOLUTION)),
        category=str(bar.value(controls.CATEGORY)),
        min_rating=_parse_float(bar.value(controls.RATING), 0.0),
        min_size=_parse_float(bar.value(controls.MIN_SIZE), 0.0),
        max_size=_parse_float(bar.value(controls.MAX_SIZE), math.inf),
        group=str(bar.value(controls.GROUP)),
        search=str(bar.value(controls.SEARCH)),
    )


def matches(item: Tag, criteria: FilterCriteria) -> bool:
    """True if the card satisfies every set criterion.

    A card without a parseable size is never excluded by the size bounds.
    """
    if criteria.only_dv and not has_dolby_vision(item):
        return False
    if criteria.only_hdr and not has_hdr(item):
        return False
    if criteria.resolution and get_resolution(item) != criteria.resolution:
        return False
    if criteria.category and get_category(item).value != criteria.category:
        return False
    if get_rating(item) < criteria.min_rating:
        return False
    size = get_size(item)
    if size is not None and (size < criteria.min_size or size > criteria.max_size):
        return False
    if criteria.group and get_group(item).lower() != criteria.group:
        return False
    if criteria.search and criteria.search not in item_text(item).lower():
        return False
    return True


def apply_filters(page: ListingPage, bar: ControlBar) -> ResultCount:
    """Recompute card visibility, the group facet, the counter and the highlights."""
    criteria = read_criteria(bar)
    items = page.items()

    # Pass 1: everything but the group filter
    ungrouped = criteria.without_group()
    for item in items:
        set_hidden(item, not matches(item, ungrouped))

    if not criteria.group:
        rebuild_group_select(bar[controls.GROUP], collect_groups(i for i in items if not is_hidden(i)))

    # Pass 2: group filter over the pass-1 survivors
    visible = 0
    for item in items:
        if is_hidden(item):
            continue
        if criteria.group and get_group(item).lower() != criteria.group:
            set_hidden(item, True)
        else:
            visible += 1

    count = ResultCount(visible=visible, total=len(items), filters_active=criteria.has_active_filters)
    bar.counter = count.text
    bar.refresh_highlights()
    logger.debug(f"Filters applied: {count.visible}/{count.total} visible")
    return count
