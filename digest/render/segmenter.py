"""Segmenter - splits digest text into bounded sections.

Summaries do not reliably carry section markers, so a cascade of strategies is
tried in order and the first one that applies wins:

    1. explicit *Summary* marker   -> blank-line paragraphs, truncated
    2. legacy "---" group lines    -> one unit per group, divider between groups
    3. bold topic headers          -> one section per topic
    4. blank-line paragraphs       -> one section per paragraph
    5. fixed window soft split     -> always applies

Trailing "Participants:" lines are popped into ``Section.participants`` so
they render as context blocks rather than body text.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from digest import config
from digest.render.mrkdwn import truncate_section
from digest.render.participants import PARTICIPANTS_LINE_RE, pop_trailing_participants
from digest.render.priority import find_topic_headers


@dataclass
class Section:
    """One digest section; an empty body marks a participants-only annotation."""
    body: str
    participants: list[str] = field(default_factory=list)
    divider_after: bool = False

    @property
    def block_count(self) -> int:
        return (1 if self.body else 0) + (1 if self.participants else 0) + (1 if self.divider_after else 0)


SUMMARY_MARKER_RE = re.compile(r'^\*{1,2}Summary\*{1,2}[ \t]*$', re.MULTILINE | re.IGNORECASE)
LEGACY_DELIMITER_RE = re.compile(r'\n[ \t]*\n[ \t]*---[ \t]*\n[ \t]*\n')
_PARAGRAPH_SPLIT_RE = re.compile(r'\n[ \t]*\n')


def split_paragraphs(text: str) -> list[str]:
    return [p.strip() for p in _PARAGRAPH_SPLIT_RE.split(text) if p.strip()]


def soft_split(text: str, limit: int) -> list[str]:
    """Cut text into chunks of at most ``limit`` characters.

    Each cut prefers the last paragraph break in the window, as long as it sits
    at least a quarter of the window in; otherwise the window edge is used.
    """
    limit = max(limit, 1)
    chunks = []
    rest = text.strip()
    while len(rest) > limit:
        cut = rest.rfind('\n\n', 0, limit)
        if cut <= 0 or cut < limit // 4:
            cut = limit
        chunk = rest[:cut].rstrip()
        if chunk:
            chunks.append(chunk)
        rest = rest[cut:].lstrip()
    if rest:
        chunks.append(rest)
    return chunks


def _with_summary_label(sections: list[Section]) -> list[Section]:
    for section in sections:
        if section.body:
            section.body = f"{config.SUMMARY_LABEL}\n{section.body}"
            break
    return sections


def _build_sections(units: list[str], limit: int, split_long: bool) -> list[Section]:
    """Turn text units into sections, popping trailing Participants lines.

    A unit holding nothing but a Participants line is attached to the section
    before it; failing that it becomes a body-less annotation.
    """
    sections: list[Section] = []
    for unit in units:
        body, names = pop_trailing_participants(unit)
        body = body.strip()

        if not body:
            if not names:
                continue
            if sections and not sections[-1].participants:
                sections[-1].participants = names
            else:
                sections.append(Section(body='', participants=names))
            continue

        if split_long and len(body) > limit:
            chunks = soft_split(body, limit)
            sections.extend(Section(body=chunk) for chunk in chunks)
            sections[-1].participants = names
        else:
            sections.append(Section(body=truncate_section(body, limit), participants=names))
    return sections


# =============================================================================
# STRATEGIES - each returns sections, or None when it does not apply
# =============================================================================

def split_by_summary_marker(text: str, limit: int) -> Optional[list[Section]]:
    if not SUMMARY_MARKER_RE.search(text):
        return None
    return _build_sections(split_paragraphs(text), limit, split_long=False)


def split_by_legacy_delimiter(text: str, limit: int) -> Optional[list[Section]]:
    groups = [g.strip() for g in LEGACY_DELIMITER_RE.split(text) if g.strip()]
    if len(groups) < 2:
        return None

    sections: list[Section] = []
    for index, group in enumerate(groups):
        units = split_paragraphs(group) if len(group) > limit else [group]
        group_sections = _build_sections(units, limit, split_long=True)
        if not group_sections:
            continue
        # Only the first group carries the label on this path
        if index == 0:
            _with_summary_label(group_sections)
        if index < len(groups) - 1:
            group_sections[-1].divider_after = True
        sections.extend(group_sections)
    return sections


def split_by_topic_headers(text: str, limit: int) -> Optional[list[Section]]:
    headers = find_topic_headers(text)
    if len(headers) < 2:
        return None

    spans = []
    preamble = text[:headers[0].start()].strip()
    if preamble:
        spans.append(preamble)
    for i, header in enumerate(headers):
        end = headers[i + 1].start() if i + 1 < len(headers) else len(text)
        spans.append(text[header.start():end].strip())

    sections: list[Section] = []
    for span in spans:
        sections.extend(_build_sections([span], limit, split_long=True))
    return _with_summary_label(sections)


def split_by_paragraphs(text: str, limit: int) -> Optional[list[Section]]:
    paragraphs = split_paragraphs(text)
    if len(paragraphs) < 2:
        return None
    return _with_summary_label(_build_sections(paragraphs, limit, split_long=True))


def split_by_window(text: str, limit: int) -> list[Section]:
    return _with_summary_label(_build_sections([text], limit, split_long=True))


SEGMENT_STRATEGIES: tuple[Callable[[str, int], Optional[list[Section]]], ...] = (
    split_by_summary_marker,
    split_by_legacy_delimiter,
    split_by_topic_headers,
    split_by_paragraphs,
    split_by_window,
)


def extract_global_participants(text: str) -> tuple[str, list[str]]:
    """Pop a final Participants paragraph that belongs to the whole digest.

    It only counts as global when it is the sole Participants line; otherwise
    it is the last topic's own line and stays where it is.
    """
    paragraphs = split_paragraphs(text)
    if len(paragraphs) < 2:
        return text, []

    body, names = pop_trailing_participants(paragraphs[-1])
    if not names or body.strip():
        return text, []

    participant_lines = [line for line in text.split('\n') if PARTICIPANTS_LINE_RE.match(line)]
    if len(participant_lines) > 1:
        return text, []

    last = text.rstrip()
    cut = last.rfind(paragraphs[-1])
    return last[:cut].rstrip(), names


def segment_sections(text: str, max_chars: Optional[int] = None) -> list[Section]:
    """Split converted digest text into sections.

    Args:
        text: Sanitized, mrkdwn-converted, link-injected digest text
        max_chars: Per-section body ceiling (defaults to config.SECTION_CHAR_LIMIT)

    Returns:
        Ordered sections; [] for empty text
    """
    limit = max_chars or config.SECTION_CHAR_LIMIT
    text = (text or '').strip()
    if not text:
        return []

    text, trailing = extract_global_participants(text)

    sections: list[Section] = []
    for strategy in SEGMENT_STRATEGIES:
        result = strategy(text, limit) if text else []
        if result is not None:
            sections = result
            break

    if trailing:
        sections.append(Section(body='', participants=trailing))
    return sections
