"""Mrkdwn - markdown to Slack mrkdwn dialect conversion.

Rewrites the generic markdown a summariser produces into the subset Slack
renders: single-asterisk bold, <url|text> links, dash bullets. Code spans are
protected from every rewrite and restored verbatim.

Converting already-converted text is a no-op.
"""

import re
from typing import Optional

from digest import config

# Placeholders are NUL-delimited so no emphasis rule can match across them
_PLACEHOLDER_RE = re.compile(r'\x00(\d+)\x00')

_FENCE_RE = re.compile(r'```[\s\S]*?```')
_INLINE_CODE_RE = re.compile(r'`[^`\n]+`')
_MD_LINK_RE = re.compile(r'\[([^\]\n]+)\]\((https?://[^\s)]+)\)')
_SLACK_LINK_RE = re.compile(r'<(?:https?://|mailto:)[^>\n]*>')
# Bare URL, ending at whitespace, brackets, emphasis or a placeholder
_BARE_URL_RE = re.compile(r'https?://[^\s<>*\x00]+')

_HEADING_RE = re.compile(r'^#{1,6}[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$', re.MULTILINE)
_BULLET_LINE_RE = re.compile(r'^-[ \t]')


# =============================================================================
# REWRITE RULES - applied in order after code and links are protected
# =============================================================================

MRKDWN_RULES = [
    {
        'name': 'triple_asterisk_emphasis',
        'pattern': re.compile(r'\*{3,}([^*\n]+)\*{3,}'),
        'replacement': r'*\1*',
        'description': '***bold italic*** becomes *bold italic*'
    },
    {
        'name': 'triple_underscore_emphasis',
        'pattern': re.compile(r'_{3,}([^_\n]+)_{3,}'),
        'replacement': r'*\1*',
        'description': '___bold italic___ becomes *bold italic*'
    },
    {
        'name': 'double_asterisk_bold',
        'pattern': re.compile(r'\*\*([^*\n]+)\*\*'),
        'replacement': r'*\1*',
        'description': '**bold** becomes *bold*'
    },
    {
        'name': 'double_underscore_bold',
        'pattern': re.compile(r'__([^_\n]+)__'),
        'replacement': r'*\1*',
        'description': '__bold__ becomes *bold*'
    },
    {
        'name': 'ordered_list',
        'pattern': re.compile(r'^[ \t]*\d+\.[ \t]+', re.MULTILINE),
        'replacement': '- ',
        'description': 'Numbered list markers become dash bullets'
    },
    {
        'name': 'star_bullets',
        'pattern': re.compile(r'^[ \t]*[•*][ \t]+', re.MULTILINE),
        'replacement': '- ',
        'description': 'Asterisk and round bullets become dash bullets'
    },
    {
        'name': 'indented_bullets',
        'pattern': re.compile(r'^[ \t]+-([ \t]+)', re.MULTILINE),
        'replacement': r'-\1',
        'description': 'Strip indentation in front of dash bullets'
    },
    # Models mix ** and * around "Label:" tokens; settle on one form
    {
        'name': 'bullet_label_emphasis',
        'pattern': re.compile(r'^-[ \t]+\*{1,2}([^*\n]+:)\*{1,2}(?=\s|$)', re.MULTILINE),
        'replacement': r'- *\1*',
        'description': 'Bullet label with mismatched emphasis'
    },
    {
        'name': 'line_label_emphasis',
        'pattern': re.compile(r'^\*{1,2}([^*\n]+:)\*{1,2}(?=\s|$)', re.MULTILINE),
        'replacement': r'*\1*',
        'description': 'Line-leading label with mismatched emphasis'
    },
]


def _convert_heading(match: re.Match) -> str:
    title = re.sub(r'^[*_]+|[*_]+$', '', match.group(1)).strip()
    if not title:
        return match.group(0)
    return f"*{title}*"


def _space_bullet_runs(text: str) -> str:
    """Insert a blank line before a bullet run that follows plain text."""
    out: list[str] = []
    for line in text.split('\n'):
        if (_BULLET_LINE_RE.match(line) and out and out[-1].strip()
                and not _BULLET_LINE_RE.match(out[-1])):
            out.append('')
        out.append(line)
    return '\n'.join(out)


def normalize_to_slack_mrkdwn(md: str) -> str:
    """Convert generic markdown into Slack mrkdwn.

    Args:
        md: Markdown text (headings, **bold**, [links](url), numbered lists...)

    Returns:
        Equivalent Slack mrkdwn text
    """
    if not md or not isinstance(md, str):
        return ''

    protected: list[str] = []

    def _protect(match: re.Match) -> str:
        protected.append(match.group(0))
        return f"\x00{len(protected) - 1}\x00"

    def _protect_link(match: re.Match) -> str:
        protected.append(f"<{match.group(2)}|{match.group(1)}>")
        return f"\x00{len(protected) - 1}\x00"

    text = md.replace('\r\n', '\n').replace('\x00', '')

    text = _FENCE_RE.sub(_protect, text)
    text = _INLINE_CODE_RE.sub(_protect, text)
    text = _SLACK_LINK_RE.sub(_protect, text)
    text = _HEADING_RE.sub(_convert_heading, text)
    text = _MD_LINK_RE.sub(_protect_link, text)
    text = _BARE_URL_RE.sub(_protect, text)

    for rule in MRKDWN_RULES:
        text = rule['pattern'].sub(rule['replacement'], text)

    text = _space_bullet_runs(text)
    text = re.sub(r'\n{3,}', '\n\n', text)

    # Links may wrap protected code, so restore until nothing is left
    while _PLACEHOLDER_RE.search(text):
        text = _PLACEHOLDER_RE.sub(lambda m: protected[int(m.group(1))], text)

    return text


def truncate_section(text: str, limit: Optional[int] = None) -> str:
    """Bound text to ``limit`` characters, ending with an ellipsis when cut."""
    if limit is None:
        limit = config.SECTION_CHAR_LIMIT
    if len(text) <= limit:
        return text
    if limit <= 1:
        return '…'[:max(limit, 0)]
    return text[:limit - 1] + '…'


_DIGEST_TITLE_RE = re.compile(
    r'^\s*(?:#{1,6}[ \t]*)?[*_]{0,2}[ \t]*Community[ \t]+Digest'
    r'(?:[ \t]*[-–—][ \t]*\d{4}-\d{2}-\d{2})?(?:[ \t]*\(UTC\))?[ \t]*:?[ \t]*[*_]{0,2}[ \t]*(?:\n|$)',
    re.IGNORECASE
)


def strip_leading_digest_title(text: str) -> str:
    """Drop a leading "Community Digest" title line; the page header carries it."""
    if not text:
        return ''
    return _DIGEST_TITLE_RE.sub('', text, count=1).lstrip()
