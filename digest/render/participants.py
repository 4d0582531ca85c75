"""Participants - "Participants: a, b" line handling.

Summaries close each topic with a Participants line. These helpers find and
pop those lines so they render as context annotations, collapse duplicates the
model repeats, and back-fill lines the model forgot using topic clusters.
"""

import re
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from digest.topics import TopicCluster

# Tolerates the bold variants dialect conversion leaves behind ("*Participants:* a")
PARTICIPANTS_LINE_RE = re.compile(
    r'^[ \t]*(?:-[ \t]+)?[_*]{0,2}Participants[_*]{0,2}[ \t]*:[_*]{0,2}[ \t]*(.*?)[ \t]*$',
    re.IGNORECASE
)

_SECTION_SPLIT_RE = re.compile(r'\n{2,}')


def parse_participant_names(value: str) -> list[str]:
    """Split a comma list into names, dropping blanks and case-insensitive repeats."""
    names: list[str] = []
    seen: set[str] = set()
    for raw in value.split(','):
        name = raw.strip()
        if not name:
            continue
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        names.append(name)
    return names


def format_participants(names: Iterable[str]) -> str:
    return f"Participants: {', '.join(names)}"


def pop_trailing_participants(text: str) -> tuple[str, list[str]]:
    """Split a trailing Participants line off a block of text.

    Args:
        text: One paragraph or section

    Returns:
        (body without the line, parsed names); names is empty when the last
        non-blank line is not a Participants line
    """
    lines = text.rstrip().split('\n')
    if not lines:
        return text, []

    match = PARTICIPANTS_LINE_RE.match(lines[-1])
    if not match:
        return text, []

    names = parse_participant_names(match.group(1))
    if not names:
        return text, []
    return '\n'.join(lines[:-1]).rstrip(), names


def format_participant_list(names: list[str], max_names: int = 6) -> str:
    """Compact list: "a, b, c +2" once more than max_names are present."""
    if not names:
        return ''
    if len(names) <= max_names:
        return ', '.join(names)
    return f"{', '.join(names[:max_names])} +{len(names) - max_names}"


def collapse_duplicate_participants(summary: str) -> str:
    """Keep only the first Participants line inside each blank-line section."""
    if not summary or not isinstance(summary, str):
        return ''

    changed = False
    sections = _SECTION_SPLIT_RE.split(summary)
    for i, section in enumerate(sections):
        kept: list[str] = []
        seen_participants = False
        for line in section.split('\n'):
            if PARTICIPANTS_LINE_RE.match(line):
                if seen_participants:
                    changed = True
                    continue
                seen_participants = True
            kept.append(line)
        sections[i] = '\n'.join(kept)

    if not changed:
        return summary
    return '\n\n'.join(s for s in sections if s.strip())


# =============================================================================
# FALLBACK ATTRIBUTION
# =============================================================================

def _signature_words(text: str) -> list[str]:
    """First six distinctive words of a message, for locating its topic."""
    if not text:
        return []
    words = re.sub(r'[^a-z0-9\s]', ' ', text.lower()).split()
    return [w for w in words if len(w) > 3][:6]


def _lists_any(section: str, names: list[str]) -> bool:
    for line in section.split('\n'):
        match = PARTICIPANTS_LINE_RE.match(line)
        if match:
            listed = match.group(1).lower()
            return any(name.lower() in listed for name in names)
    return False


def inject_missing_participants(
    summary: str,
    clusters: list['TopicCluster'],
    max_per_topic: int = 6
) -> str:
    """Append Participants lines for clusters the summary does not attribute.

    Each missing line goes to the first section that mentions one of the
    cluster's signature words, otherwise to the last section.

    Args:
        summary: Digest text, sections separated by blank lines
        clusters: Topic clusters the summary was generated from
        max_per_topic: Cap on names shown before "+N"

    Returns:
        The summary, unchanged when nothing was added
    """
    if not summary or not clusters:
        return summary

    sections = [s.strip() for s in _SECTION_SPLIT_RE.split(summary)]
    changed = False

    for cluster in clusters:
        if not cluster.participants:
            continue
        if any(_lists_any(sec, cluster.participants) for sec in sections):
            continue

        first_content = cluster.messages[0].content if cluster.messages else ''
        words = _signature_words(first_content)
        line = f"Participants: {format_participant_list(cluster.participants, max_per_topic)}"

        target = None
        if words:
            for i, sec in enumerate(sections):
                lowered = sec.lower()
                if sec and any(w in lowered for w in words):
                    target = i
                    break
        if target is None:
            for i in range(len(sections) - 1, -1, -1):
                if sections[i]:
                    target = i
                    break
        if target is None:
            continue

        sections[target] = f"{sections[target]}\n{line}"
        changed = True

    if not changed:
        return summary
    return '\n\n'.join(sections)
