"""
Multi-page aggregation.

Fetches listing pages 2, 3, 4, ... one at a time and appends their cards to
the live page. The site only links a small window of pages, so the total
page count is unknown: a page without cards is the end-of-results signal.
A session also stops at the operator's page limit or on the first failed
fetch, keeping everything merged so far.
"""

import asyncio
import copy
import logging
import re
from dataclasses import dataclass, field
from urllib.parse import urlsplit, urlunsplit

import httpx
from bs4 import Tag

from controls import PAGE_LIMIT_ALL, ProgressIndicator, StatusLine
from models import SessionState, TerminationCause
from parser import ListingPage, parse_fetched_items, show

logger = logging.getLogger(__name__)

PAGE_DELAY_SECONDS = 0.3
UNBOUNDED_PAGE_LIMIT = 99_999
FIRST_FETCHED_PAGE = 2  # the origin page is page 1 and is already rendered

_PAGE_SEGMENT_RE = re.compile(r"/page/\d+/")


def page_url(current_url: str, page: int) -> str:
    """URL of listing page `page`, derived from the current page's URL.

    An existing `/page/N/` segment is replaced; otherwise one is appended to
    the path, ahead of any query string.
    """
    parts = urlsplit(current_url)
    if _PAGE_SEGMENT_RE.search(parts.path):
        path = _PAGE_SEGMENT_RE.sub(f"/page/{page}/", parts.path, count=1)
        return urlunsplit(parts._replace(path=path))
    path = parts.path.rstrip("/") + f"/page/{page}/"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


def parse_page_limit(value: bool | str) -> int:
    """Page limit from the selector value: "all" means unbounded."""
    if value == PAGE_LIMIT_ALL:
        return UNBOUNDED_PAGE_LIMIT
    if value == "":
        logger.warning("No page limit selected, loading all pages")
        return UNBOUNDED_PAGE_LIMIT
    try:
        limit = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Unrecognized page limit {value!r}, loading all pages")
        return UNBOUNDED_PAGE_LIMIT
    return limit if limit > 0 else UNBOUNDED_PAGE_LIMIT


@dataclass
class AggregationSession:
    """State of one load-pages run. Lives only for the duration of the run."""

    origin_url: str
    limit: int = UNBOUNDED_PAGE_LIMIT
    state: SessionState = SessionState.IDLE
    loaded: int = 0
    items_merged: int = 0
    requested: list[str] = field(default_factory=list)
    cause: TerminationCause | None = None

    @property
    def unbounded(self) -> bool:
        return self.limit >= UNBOUNDED_PAGE_LIMIT

    def start(self) -> None:
        self.state = SessionState.RUNNING

    def finish(self, cause: TerminationCause) -> None:
        self.cause = cause
        self.state = SessionState.ABORTED if cause.is_failure else SessionState.COMPLETED


def _clone_item(node: Tag) -> Tag:
    clone = copy.copy(node)
    show(clone)
    return clone


async def load_pages(
    page: ListingPage,
    client: httpx.AsyncClient,
    limit: int = UNBOUNDED_PAGE_LIMIT,
    progress: ProgressIndicator | None = None,
    status: StatusLine | None = None,
    delay: float = PAGE_DELAY_SECONDS,
) -> AggregationSession:
    """Run one aggregation session, appending fetched cards to `page`.

    Fetches are strictly sequential, `delay` seconds apart. The client should
    carry the origin's cookies so pages are fetched as the same visitor.
    The caller is responsible for re-running the facet and filters afterwards.
    """
    progress = progress or ProgressIndicator()
    status = status or StatusLine()
    session = AggregationSession(origin_url=page.url, limit=limit)
    session.start()
    logger.info(f"Loading pages from {page.url} (limit: {'all' if session.unbounded else limit})")

    progress.show()
    if session.unbounded:
        progress.running(0)
    else:
        progress.update(0, limit)

    try:
        page_number = FIRST_FETCHED_PAGE
        while session.loaded < session.limit:
            url = page_url(page.url, page_number)
            session.requested.append(url)

            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                logger.error(f"Fetch failed for {url}: {e}", exc_info=True)
                session.finish(TerminationCause.FETCH_ERROR)
                break

            if not response.is_success:
                logger.warning(f"Stopping at {url}: HTTP {response.status_code}")
                session.finish(TerminationCause.FETCH_NOT_OK)
                break

            fetched = parse_fetched_items(response.text)
            if not fetched:
                logger.info(f"No releases on page {page_number}, end of results")
                session.finish(TerminationCause.EXHAUSTED)
                break

            session.items_merged += page.append_items(_clone_item(node) for node in fetched)
            session.loaded += 1
            logger.info(f"Page {page_number}: merged {len(fetched)} releases")

            if session.unbounded:
                progress.running(session.loaded)
            else:
                progress.update(session.loaded, session.limit)

            page_number += 1
            if session.loaded < session.limit:
                await asyncio.sleep(delay)
        else:
            session.finish(TerminationCause.LIMIT_REACHED)
    finally:
        progress.finish()
        status.flash(f"{session.loaded} page(s) loaded")

    logger.info(
        f"Page loading {session.state.value} ({session.cause.value}): "
        f"{session.loaded} page(s), {session.items_merged} releases merged"
    )
    return session
