"""
Filter suite wiring.

Connects a listing page, its control bar and the persisted state: restores
filters at startup, re-applies them on input and on structural changes,
and runs page aggregation behind the load trigger.
"""

import logging

import httpx

import controls
import filters
from controls import ControlBar
from debounce import DEBOUNCE_SECONDS, Debouncer
from facets import collect_groups, rebuild_group_select
from loader import PAGE_DELAY_SECONDS, AggregationSession, load_pages, parse_page_limit
from models import ResultCount
from parser import ListingPage
from state import FilterStateStore

logger = logging.getLogger(__name__)

SUITE_NAME = "Release Filter Suite"
SUITE_VERSION = "1.0"


class FilterSuite:
    def __init__(
        self,
        page: ListingPage,
        bar: ControlBar | None = None,
        state: FilterStateStore | None = None,
        debounce_delay: float = DEBOUNCE_SECONDS,
        page_delay: float = PAGE_DELAY_SECONDS,
    ):
        self.page = page
        self.bar = bar or ControlBar()
        self.state = state or FilterStateStore()
        self.page_delay = page_delay
        self.last_count: ResultCount | None = None
        self._debouncer = Debouncer(self.apply_filters, debounce_delay)

    def start(self) -> ResultCount:
        """Build the group list, restore saved filters and apply them."""
        self.rebuild_groups()
        self.state.load(self.bar)
        count = self.apply_filters()
        self.page.observe(self.notify_change)
        logger.info(f"{SUITE_NAME} {SUITE_VERSION} started: {count.text}")
        return count

    def rebuild_groups(self) -> None:
        if self.bar.value(controls.GROUP):
            return
        rebuild_group_select(self.bar[controls.GROUP], collect_groups(self.page.visible_items()))

    def apply_filters(self) -> ResultCount:
        self.last_count = filters.apply_filters(self.page, self.bar)
        self.state.save(self.bar)
        return self.last_count

    def on_input(self, control_id: str, value: bool | str) -> ResultCount:
        self.bar.set(control_id, value)
        return self.apply_filters()

    def clear_filters(self) -> ResultCount:
        self.state.clear(self.bar)
        return self.apply_filters()

    def notify_change(self) -> None:
        """Structural change in the listing; re-apply once things settle."""
        self._debouncer.notify()

    async def load_pages(self, client: httpx.AsyncClient) -> AggregationSession | None:
        """Handle the load trigger. Returns None if a session is already running."""
        trigger = self.bar.load_trigger
        if trigger.disabled:
            logger.warning("Page loading already in progress, ignoring trigger")
            return None

        trigger.disabled = True
        self.page.hide_pagination()
        try:
            session = await load_pages(
                self.page,
                client,
                limit=parse_page_limit(self.bar.value(controls.PAGE_LIMIT)),
                progress=self.bar.progress,
                status=self.bar.status,
                delay=self.page_delay,
            )
            self._debouncer.cancel()
            self.rebuild_groups()
            self.apply_filters()
            return session
        except Exception:
            logger.error("Error loading pages", exc_info=True)
            self.bar.status.flash("Error loading pages")
            return None
        finally:
            trigger.disabled = False
