"""
Diagnostic: run attribute extraction over saved listing pages (no network).
Reports, per file, how many cards yielded each attribute vs fell back to its default.
"""

from pathlib import Path

from extractor import extract_attributes, title_text
from models import Category, ItemAttributes
from parser import find_container, parse_html, select_items

DATA_DIR = Path(__file__).parent / "data"

# Attribute -> predicate telling whether the value came from markup rather than the default
FIELD_FOUND = {
    "has_dolby_vision": lambda a: a.has_dolby_vision,
    "has_hdr": lambda a: a.has_hdr,
    "rating": lambda a: a.rating > 0,
    "size_gb": lambda a: a.size_gb is not None,
    "release_group": lambda a: a.release_group != "",
    "resolution": lambda a: a.resolution != "",
    "category": lambda a: a.category != Category.MOVIES,
}


def diagnose_file(filepath: Path) -> dict:
    soup = parse_html(filepath.read_text(encoding="utf-8"))
    container = find_container(soup)
    items = select_items(container) if container is not None else []

    report = {
        "file": filepath.name,
        "container": container is not None,
        "items": len(items),
        "found": {field: 0 for field in FIELD_FOUND},
        "unparsed_titles": [],
    }

    for item in items:
        attrs: ItemAttributes = extract_attributes(item)
        for field, found in FIELD_FOUND.items():
            if found(attrs):
                report["found"][field] += 1
        if attrs.size_gb is None or not attrs.release_group:
            report["unparsed_titles"].append(title_text(item))

    return report


def main():
    html_files = sorted(DATA_DIR.glob("*.html"))
    print(f"Diagnosing {len(html_files)} listing snapshots (extraction only, NO network)\n")

    all_reports = []
    for filepath in html_files:
        report = diagnose_file(filepath)
        all_reports.append(report)

        print(f"{'=' * 70}")
        print(f"  {report['file']}")
        print(f"{'=' * 70}")

        if not report["container"]:
            print("  No release container found\n")
            continue

        print(f"  Cards: {report['items']}")
        for field, count in report["found"].items():
            print(f"    {field:<18} {count:>4}/{report['items']}")

        if report["unparsed_titles"]:
            print(f"\n  Titles without size or group ({len(report['unparsed_titles'])}):")
            for title in report["unparsed_titles"][:5]:
                print(f"    {title}")
            if len(report["unparsed_titles"]) > 5:
                print(f"    ... and {len(report['unparsed_titles']) - 5} more")

        print()

    # Summary table
    print(f"\n{'=' * 70}")
    print("SUMMARY: Attribute coverage across all files")
    print(f"{'=' * 70}")
    print(f"{'Field':<20} ", end="")
    for r in all_reports:
        print(f"{r['file'][:12]:<14}", end="")
    print()
    print("-" * 90)

    for field in FIELD_FOUND:
        print(f"{field:<20} ", end="")
        for r in all_reports:
            if not r["items"]:
                print(f"{'-':<14}", end="")
            else:
                print(f"{r['found'][field] / r['items'] * 100:>5.0f}%{'':<8}", end="")
        print()


if __name__ == "__main__":
    main()
