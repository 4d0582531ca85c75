"""Topic priority - reorders digest topics by their leading emoji.

Runs on mrkdwn text, where every topic opens with a bold header line
(``*🔴 Security Alert*``). Topics are stably sorted so security and funding
news lead the digest; unlabelled topics keep their relative order at the end.
"""

import re
from dataclasses import dataclass
from typing import Optional

# Lower = higher priority
EMOJI_PRIORITY = {
    '🔴': 1,   # Security
    '💰': 2,   # Funding
    '🏛️': 3,   # Governance
    '💬': 4,   # Customer feedback
    '📈': 5,   # Adoption
    '🚀': 6,   # Growth
}

DEFAULT_PRIORITY = 99

HEADER_RE = re.compile(r'^\*([^*\n]+)\*[ \t]*$', re.MULTILINE)

# Governance may arrive with or without the variation selector
_EMOJI_RE = re.compile(r'^(🔴|💰|🏛️?|💬|📈|🚀)')

# Standalone "---" group delimiter line
RULE_LINE_RE = re.compile(r'^[ \t]*---[ \t]*$\n?', re.MULTILINE)


@dataclass
class ParsedTopic:
    """One topic span, header line included."""
    header: str
    content: str
    emoji: Optional[str]
    priority: int


def extract_emoji(header: str) -> Optional[str]:
    match = _EMOJI_RE.match(header.strip())
    if not match:
        return None
    emoji = match.group(1)
    return '🏛️' if emoji.startswith('🏛') else emoji


def find_topic_headers(summary: str) -> list[re.Match]:
    """Header line matches, skipping "*Key Topics:*" labels and the *Summary* marker."""
    return [
        m for m in HEADER_RE.finditer(summary)
        if not m.group(1).rstrip().endswith(':') and m.group(1).strip().lower() != 'summary'
    ]


def parse_topics_from_summary(summary: str) -> list[ParsedTopic]:
    """Parse header-delimited topics.

    Args:
        summary: Mrkdwn digest text

    Returns:
        Topics in document order; [] for empty input, one "Summary" topic
        (priority 99) when there are no header lines
    """
    if not summary:
        return []

    matches = find_topic_headers(summary)
    if not matches:
        return [ParsedTopic(header='Summary', content=summary, emoji=None, priority=DEFAULT_PRIORITY)]

    topics = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(summary)
        header = match.group(1).strip()
        emoji = extract_emoji(header)
        topics.append(ParsedTopic(
            header=header,
            content=summary[match.start():end].strip(),
            emoji=emoji,
            priority=EMOJI_PRIORITY[emoji] if emoji else DEFAULT_PRIORITY,
        ))
    return topics


def sort_topics_by_priority(topics: list[ParsedTopic]) -> list[ParsedTopic]:
    """Stable ascending sort; the input list is not modified."""
    return sorted(topics, key=lambda t: t.priority)


def reconstruct_summary(topics: list[ParsedTopic], separator: str = '\n\n') -> str:
    return separator.join(t.content for t in topics)


def strip_rule_lines(text: str) -> str:
    """Remove standalone "---" lines and the blank-line runs they leave."""
    return re.sub(r'\n{3,}', '\n\n', RULE_LINE_RE.sub('', text)).strip()


def sort_and_reconstruct_summary(summary: str) -> str:
    """Parse, sort and rejoin in one call.

    Text ahead of the first header stays at the top. Text without headers is
    returned unchanged. When topics were separated by "---" group lines, the
    lines are lifted out of the moved spans and put back between topics so
    they still mark group boundaries after sorting.
    """
    if not summary:
        return ''

    matches = find_topic_headers(summary)
    if not matches:
        return summary

    separator = '\n\n'
    topics = parse_topics_from_summary(summary)
    preamble = summary[:matches[0].start()].strip()
    if RULE_LINE_RE.search(summary):
        separator = '\n\n---\n\n'
        preamble = strip_rule_lines(preamble)
        for topic in topics:
            topic.content = strip_rule_lines(topic.content)

    body = reconstruct_summary(sort_topics_by_priority(topics), separator)
    return f"{preamble}{separator}{body}" if preamble else body
