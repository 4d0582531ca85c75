"""Paginator - packs sections into Slack Block Kit messages.

Every page opens with a header/context/divider scaffold and holds whole
sections until the block budget is reached. Slack rejects messages over 50
blocks or 30000 characters of fallback text, so both are enforced per page.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from digest import config
from digest.render.participants import format_participants
from digest.render.segmenter import Section, soft_split
from logger import logger

SCAFFOLD_BLOCKS = 3

# Room left in each fallback chunk for " (Part i/N)"
FALLBACK_SUFFIX_RESERVE = 20


@dataclass
class Block:
    """One Block Kit block: header, context, divider or section."""
    kind: str
    text: str = ''

    def to_dict(self) -> dict:
        if self.kind == 'header':
            return {'type': 'header', 'text': {'type': 'plain_text', 'text': self.text, 'emoji': True}}
        if self.kind == 'context':
            return {'type': 'context', 'elements': [{'type': 'mrkdwn', 'text': self.text}]}
        if self.kind == 'divider':
            return {'type': 'divider'}
        return {'type': 'section', 'text': {'type': 'mrkdwn', 'text': self.text}}


@dataclass
class MessagePage:
    """One Slack message: ordered blocks plus plain-text fallback."""
    blocks: list[Block] = field(default_factory=list)
    text: str = ''
    index: int = 0
    total: int = 1

    @property
    def is_continuation(self) -> bool:
        return self.index > 0

    def sections(self) -> list[Block]:
        return [b for b in self.blocks if b.kind == 'section']

    def to_payload(self) -> dict:
        return {'blocks': [b.to_dict() for b in self.blocks], 'text': self.text}


def _bounded(text: str, limit: int, kind: str) -> str:
    if len(text) <= limit:
        return text
    logger.warning(f"Truncating {kind} block text from {len(text)} to {limit} chars")
    return text[:limit - 1] + '…'


def format_window(start: Union[datetime, str], end: Union[datetime, str]) -> str:
    def _stamp(value):
        if isinstance(value, datetime):
            return value.strftime('%Y-%m-%d %H:%M')
        return str(value)
    return f"Time window: {_stamp(start)}–{_stamp(end)} UTC"


def header_title(date_title: str, index: int = 0, total: int = 1) -> str:
    title = f"{config.DIGEST_TITLE} — {date_title} (UTC)"
    if total <= 1:
        return title
    if index == 0:
        return f"{title} · Part 1 of {total}"
    return f"{title} [continued] · Part {index + 1} of {total}"


def format_digest(summary: str) -> str:
    """Plain fallback rendering of a whole digest."""
    return f"*{config.DIGEST_TITLE}*\n{summary}"


def _fallback_from_sections(sections: list[Section]) -> str:
    parts = []
    for section in sections:
        if section.body:
            parts.append(section.body)
        if section.participants:
            parts.append(format_participants(section.participants))
    return format_digest('\n\n'.join(parts))


def pack_sections(sections: list[Section], budget: Optional[int] = None) -> list[list[Section]]:
    """Greedy in-order packing of whole sections under the per-page budget."""
    if budget is None:
        budget = config.BLOCK_BUDGET
    capacity = max(min(budget, config.MAX_BLOCKS_PER_MESSAGE) - SCAFFOLD_BLOCKS, 1)

    groups: list[list[Section]] = []
    current: list[Section] = []
    used = 0
    for section in sections:
        cost = section.block_count
        if cost == 0:
            continue
        if current and used + cost > capacity:
            groups.append(current)
            current, used = [], 0
        current.append(section)
        used += cost
    if current:
        groups.append(current)
    return groups


def _section_blocks(section: Section) -> list[Block]:
    blocks = []
    if section.body:
        blocks.append(Block('section', _bounded(section.body, config.SECTION_TEXT_LIMIT, 'section')))
    if section.participants:
        text = format_participants(section.participants)
        blocks.append(Block('context', _bounded(text, config.CONTEXT_TEXT_LIMIT, 'context')))
    if section.divider_after:
        blocks.append(Block('divider'))
    return blocks


def paginate(
    sections: list[Section],
    date_title: str,
    start: Union[datetime, str],
    end: Union[datetime, str],
    fallback_text: Optional[str] = None
) -> list[MessagePage]:
    """Pack sections into Slack-sized message pages.

    Args:
        sections: Output of the segmenter, in order
        date_title: YYYY-MM-DD shown in each page header
        start: Window start (UTC)
        end: Window end (UTC)
        fallback_text: Plain-text rendering; built from the sections when omitted

    Returns:
        One or more pages; an empty digest yields a single scaffold-only page
    """
    groups = pack_sections(sections) or [[]]

    if fallback_text is None:
        fallback_text = _fallback_from_sections(sections)
    chunk_size = config.MAX_FALLBACK_CHARS - FALLBACK_SUFFIX_RESERVE
    chunks = soft_split(fallback_text, chunk_size) if fallback_text else []

    total = max(len(groups), len(chunks), 1)
    if len(chunks) > len(groups):
        logger.info(f"Fallback text needs {len(chunks)} pages for {len(groups)} block pages")
        groups.extend([] for _ in range(len(chunks) - len(groups)))

    window = _bounded(format_window(start, end), config.CONTEXT_TEXT_LIMIT, 'context')
    pages = []
    for index, group in enumerate(groups):
        title = header_title(date_title, index, total)
        blocks = [
            Block('header', _bounded(title, config.HEADER_TEXT_LIMIT, 'header')),
            Block('context', window),
            Block('divider'),
        ]
        for section in group:
            blocks.extend(_section_blocks(section))

        text = chunks[index] if index < len(chunks) else title
        if total > 1:
            text = f"{text} (Part {index + 1}/{total})"

        pages.append(MessagePage(blocks=blocks, text=text, index=index, total=total))

    if total > 1:
        logger.debug(f"Digest paginated into {total} messages")
    return pages
