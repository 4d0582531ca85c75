#!/usr/bin/env python3
"""Preview how a digest renders as Slack messages.

Usage:
    python scripts/preview_digest.py FILE [--date YYYY-MM-DD] [--links FILE] [--json]

Examples:
    python scripts/preview_digest.py summary.md                  # Page overview
    python scripts/preview_digest.py summary.md --json           # Block Kit payloads
    python scripts/preview_digest.py - < summary.md              # Read from stdin
    python scripts/preview_digest.py summary.md --links links.json
"""

import argparse
import json
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from digest.links.registry import CategoryMeta, ChannelMeta, TopicMeta, get_link_registry
from digest.render.pipeline import render
from digest.timewindow import get_utc_daily_window


def load_links(path: str) -> int:
    """Register channels/categories/topics from a JSON file; returns the count."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    registry = get_link_registry()
    count = 0
    for item in data.get("channels", []):
        count += registry.register_channel(ChannelMeta(**item))
    for item in data.get("categories", []):
        count += registry.register_category(CategoryMeta(**item))
    for item in data.get("topics", []):
        count += registry.register_topic(TopicMeta(**item))
    return count


def read_summary(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render a digest summary to Slack Block Kit")
    parser.add_argument("file", help="Markdown summary file, or - for stdin")
    parser.add_argument("--date", "-d", type=str, help="Digest day (YYYY-MM-DD, default: yesterday UTC)")
    parser.add_argument("--links", "-l", type=str, help="JSON file of channels/categories/topics to link")
    parser.add_argument("--json", action="store_true", help="Print Block Kit payloads")
    parser.add_argument("--no-sort", action="store_true", help="Keep topic order as written")

    args = parser.parse_args(argv)

    if args.date:
        start = datetime.strptime(args.date, "%Y-%m-%d")
        end = start + timedelta(days=1)
        date_title = args.date
    else:
        start, end, date_title = get_utc_daily_window()

    if args.links:
        print(f"Registered {load_links(args.links)} link targets", file=sys.stderr)

    pages = render(read_summary(args.file), date_title, start, end,
                   sort_by_priority=False if args.no_sort else None)

    if args.json:
        print(json.dumps([page.to_payload() for page in pages], indent=2, ensure_ascii=False))
        return 0

    for page in pages:
        print(f"--- Message {page.index + 1}/{page.total}: {len(page.blocks)} blocks, "
              f"{len(page.text)} fallback chars")
        for block in page.blocks:
            preview = block.text.replace("\n", " ")
            print(f"  [{block.kind:<7}] {preview[:100]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
