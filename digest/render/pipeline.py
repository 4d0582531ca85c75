"""Digest rendering pipeline - summariser output to Slack message pages.

Stages:
1. Sanitise    - drop preambles and leaked artifacts
2. Dedupe      - one Participants line per section
3. Convert     - markdown to Slack mrkdwn
4. Reorder     - topics by emoji priority (optional)
5. Link        - resolve source labels through the link registry
6. Segment     - bounded sections with participant annotations
7. Paginate    - Block Kit pages under Slack's limits

``render`` never raises: a failure in any stage is logged and the digest is
rendered through the plain soft-split path instead.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Optional, Union

from digest import config
from digest.links.inject import inject_source_links
from digest.links.registry import LinkRegistry
from digest.render.mrkdwn import normalize_to_slack_mrkdwn, strip_leading_digest_title
from digest.render.paginator import MessagePage, format_digest, paginate
from digest.render.participants import collapse_duplicate_participants
from digest.render.priority import sort_and_reconstruct_summary, strip_rule_lines
from digest.render.sanitiser import sanitize_llm_output
from digest.render.segmenter import segment_sections, split_by_window
from digest.types import DigestItem
from logger import logger

Timestamp = Union[datetime, str]


def normalize_digest_input(raw) -> str:
    """Accept a markdown string, a DigestItem or a {headline, url, summary} mapping."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, DigestItem):
        return raw.to_markdown()
    if isinstance(raw, Mapping) and raw.get('headline'):
        return DigestItem(
            headline=str(raw.get('headline', '')),
            url=str(raw.get('url') or ''),
            summary=str(raw.get('summary') or ''),
        ).to_markdown()
    if raw is not None:
        logger.warning(f"Unsupported digest input {type(raw).__name__}, rendering empty digest")
    return ''


def build_digest_pages(
    summary: str,
    date_title: str,
    start: Timestamp,
    end: Timestamp,
    registry: Optional[LinkRegistry] = None,
    link_sources: Optional[bool] = None
) -> list[MessagePage]:
    """Convert, link, segment and paginate already-sanitised digest text.

    Args:
        summary: Digest text (markdown or mrkdwn)
        date_title: YYYY-MM-DD for the page header
        start: Window start (UTC)
        end: Window end (UTC)
        registry: Link registry to resolve labels against (process-wide by default)
        link_sources: Resolve source labels (defaults to config.LINKED_SOURCE_LABELS)

    Returns:
        Message pages, at least one
    """
    if link_sources is None:
        link_sources = config.LINKED_SOURCE_LABELS

    text = normalize_to_slack_mrkdwn(strip_leading_digest_title(summary or ''))
    if link_sources:
        text = inject_source_links(text, registry)

    sections = segment_sections(text)
    plain = strip_rule_lines(text)
    return paginate(sections, date_title, start, end, fallback_text=format_digest(plain) if plain else '')


def render(
    raw,
    date_title: str,
    start: Timestamp,
    end: Timestamp,
    registry: Optional[LinkRegistry] = None,
    sort_by_priority: Optional[bool] = None,
    link_sources: Optional[bool] = None
) -> list[MessagePage]:
    """Render summariser output into Slack message pages.

    Args:
        raw: Markdown string, DigestItem, or {headline, url, summary} mapping
        date_title: YYYY-MM-DD for the page header
        start: Window start (UTC)
        end: Window end (UTC)
        registry: Link registry (process-wide by default)
        sort_by_priority: Reorder topics by emoji (defaults to config.SORT_BY_PRIORITY)
        link_sources: Resolve source labels (defaults to config.LINKED_SOURCE_LABELS)

    Returns:
        One or more MessagePages, each within Slack's block and text limits
    """
    if sort_by_priority is None:
        sort_by_priority = config.SORT_BY_PRIORITY

    text = ''
    try:
        text = sanitize_llm_output(normalize_digest_input(raw))
        text = collapse_duplicate_participants(text)
        text = normalize_to_slack_mrkdwn(strip_leading_digest_title(text))
        if sort_by_priority:
            text = sort_and_reconstruct_summary(text)
        pages = build_digest_pages(text, date_title, start, end, registry, link_sources)
    except Exception as e:
        logger.exception(f"Digest render failed, falling back to plain split: {e}")
        return _render_fallback(text, date_title, start, end)

    logger.info(f"Rendered digest {date_title}: {len(pages)} message(s), "
                f"{sum(len(p.sections()) for p in pages)} section(s)")
    return pages


def _render_fallback(text: str, date_title: str, start: Timestamp, end: Timestamp) -> list[MessagePage]:
    try:
        text = strip_rule_lines(text) if isinstance(text, str) else ''
        sections = split_by_window(text, config.SECTION_CHAR_LIMIT) if text else []
        return paginate(sections, date_title, start, end, fallback_text=format_digest(text) if text else '')
    except Exception as e:
        logger.exception(f"Fallback render failed, sending scaffold only: {e}")
        return paginate([], date_title, str(start), str(end), fallback_text='')
