"""Digest rendering: summariser text to Slack Block Kit pages."""

from .mrkdwn import normalize_to_slack_mrkdwn, strip_leading_digest_title, truncate_section
from .paginator import Block, MessagePage, format_digest, paginate
from .participants import collapse_duplicate_participants, inject_missing_participants
from .pipeline import build_digest_pages, render
from .priority import ParsedTopic, sort_and_reconstruct_summary
from .sanitiser import sanitize_llm_output
from .segmenter import Section, segment_sections

__all__ = [
    'Block',
    'MessagePage',
    'ParsedTopic',
    'Section',
    'build_digest_pages',
    'collapse_duplicate_participants',
    'format_digest',
    'inject_missing_participants',
    'normalize_to_slack_mrkdwn',
    'paginate',
    'render',
    'sanitize_llm_output',
    'segment_sections',
    'sort_and_reconstruct_summary',
    'strip_leading_digest_title',
    'truncate_section',
]
