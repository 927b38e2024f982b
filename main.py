"""
Listing filter driver.

Fetches a listing page, restores the saved filters, applies any control
values given on the command line, optionally merges further pages, then
writes the visible releases to releases.json and prints a report.

Usage: python main.py <listing-url> [page-limit] [control-id=value ...]

`page-limit` is "all" or one of the page-limit choices (5, 10, 20, 50, 100);
leave it out to skip page loading.
"""

import asyncio
import logging
import sys
import time
from pathlib import Path

import httpx
import orjson

import controls
from extractor import extract_attributes, title_text
from loader import AggregationSession
from parser import ListingPage
from state import FilterStateStore, JsonFileStore
from suite import SUITE_NAME, FilterSuite

logger = logging.getLogger(__name__)

STATE_FILE = Path(__file__).parent / "filters.json"
OUTPUT_FILE = Path(__file__).parent / "releases.json"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def _parse_assignment(arg: str) -> tuple[str, bool | str]:
    control_id, _, value = arg.partition("=")
    if value.lower() in ("true", "false"):
        return control_id, value.lower() == "true"
    return control_id, value


async def run(url: str, page_limit: str | None, assignments: list[str]) -> tuple[FilterSuite, AggregationSession | None]:
    async with httpx.AsyncClient(headers={"User-Agent": USER_AGENT}, follow_redirects=True) as client:
        logger.info(f"Fetching {url}...")
        response = await client.get(url)
        response.raise_for_status()

        page = ListingPage.from_html(response.text, str(response.url))
        suite = FilterSuite(page, state=FilterStateStore(JsonFileStore(STATE_FILE)))
        suite.start()

        for arg in assignments:
            control_id, value = _parse_assignment(arg)
            if suite.bar.get(control_id) is None:
                logger.warning(f"Unknown control {control_id!r}, skipping")
                continue
            suite.on_input(control_id, value)

        session = None
        if page_limit is not None:
            suite.bar.set(controls.PAGE_LIMIT, page_limit)
            session = await suite.load_pages(client)

    return suite, session


def print_report(suite: FilterSuite, session: AggregationSession | None, wall_clock: float) -> None:
    bar = suite.bar
    visible = suite.page.visible_items()

    print(f"\n{'='*70}")
    print(SUITE_NAME.upper())
    print(f"{'='*70}")

    print(f"\n── Filters ──")
    for control in bar.controls.values():
        marker = "*" if control.highlighted else " "
        print(f"  {marker} {control.id:<14} {control.value!r}")
    print(f"\n  {bar.counter}")

    print(f"\n── Release groups ({len(bar[controls.GROUP].options) - 1}) ──")
    labels = [o.label for o in bar[controls.GROUP].options[1:]]
    for i in range(0, len(labels), 6):
        print("  " + ", ".join(labels[i : i + 6]))

    if session is not None:
        print(f"\n── Page loading ──")
        print(f"  Outcome:         {session.state.value} ({session.cause.value if session.cause else '-'})")
        print(f"  Pages loaded:    {session.loaded}")
        print(f"  Releases merged: {session.items_merged}")
        print(f"  Pages requested: {len(session.requested)}")

    print(f"\n── Visible releases ──")
    print(f"  {'Title':<60} {'Res':>6} {'GB':>6} {'Rating':>7}")
    print(f"  {'-'*82}")
    for item in visible[:50]:
        attrs = extract_attributes(item)
        size = f"{attrs.size_gb:.1f}" if attrs.size_gb is not None else "-"
        print(f"  {title_text(item)[:60]:<60} {attrs.resolution or '-':>6} {size:>6} {attrs.rating:>7.1f}")
    if len(visible) > 50:
        print(f"  ... and {len(visible) - 50} more")

    print(f"\n  Wall clock: {wall_clock:.2f}s")
    print(f"\n{'='*70}")


async def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)

    url = sys.argv[1]
    rest = sys.argv[2:]
    page_limit = None
    if rest and "=" not in rest[0]:
        page_limit, rest = rest[0], rest[1:]
    if page_limit is not None and page_limit not in controls.PAGE_LIMIT_CHOICES:
        print(f"Page limit must be one of: {', '.join(controls.PAGE_LIMIT_CHOICES)}\n")
        print(__doc__)
        sys.exit(2)

    t_wall_start = time.monotonic()
    suite, session = await run(url, page_limit, rest)
    wall_clock = time.monotonic() - t_wall_start

    releases = []
    for item in suite.page.visible_items():
        releases.append({"title": title_text(item), **extract_attributes(item).model_dump(mode="json")})
    OUTPUT_FILE.write_bytes(orjson.dumps(releases, option=orjson.OPT_INDENT_2))
    logger.info(f"Wrote {len(releases)} releases to {OUTPUT_FILE}")

    print_report(suite, session, wall_clock)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(main())
