"""
Release-group facet.

The group selector offers every distinct release group among the cards that
survive all other filters. It must not be rebuilt while a group is selected,
or the selection could vanish from its own option list.
"""

import logging
from typing import Iterable

from bs4 import Tag

from controls import Control
from extractor import get_group
from models import SelectOption

logger = logging.getLogger(__name__)

ALL_GROUPS = SelectOption(value="", label="All groups")


def collect_groups(items: Iterable[Tag]) -> list[SelectOption]:
    """Distinct non-empty release groups, case-insensitively deduplicated and sorted.

    The first casing seen for a group is kept for display.
    """
    seen: dict[str, str] = {}
    for item in items:
        group = get_group(item)
        if group and group.lower() not in seen:
            seen[group.lower()] = group
    return [SelectOption(value=key, label=seen[key]) for key in sorted(seen)]


def rebuild_group_select(select: Control, groups: list[SelectOption]) -> None:
    """Replace the selector's options, keeping the current value if still offered."""
    current = select.value
    select.options = [ALL_GROUPS, *groups]
    select.set(current if current in select.option_values() else "")
    logger.debug(f"Group selector rebuilt with {len(groups)} groups")
