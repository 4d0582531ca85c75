"""Sanitiser - strips summariser artifacts before rendering.

Removes the meta-commentary models like to open with ("Okay, I understand...",
"Here is the summary:"), leaked topic-id tokens and legacy "---" separators,
while never touching text that already looks like digest content.
"""

import re

# =============================================================================
# PREAMBLE PATTERNS - acknowledgements the summariser emits before content
# =============================================================================

PREAMBLE_PATTERNS = [
    re.compile(r'^\s*okay\b[.,!]?', re.IGNORECASE),
    re.compile(r'^\s*i\s+(?:understand|will|will summarize|will wait|will now)\b', re.IGNORECASE),
    re.compile(r'^\s*sure\b[.,!]?', re.IGNORECASE),
    re.compile(r'^\s*since the input', re.IGNORECASE),
    re.compile(r'i will wait for the full input', re.IGNORECASE),
    re.compile(r'i will summarize', re.IGNORECASE),
    re.compile(r"^\s*here'?s the summary", re.IGNORECASE),
    re.compile(r'^\s*please provide', re.IGNORECASE),
    re.compile(r'^\s*here (?:is|are)(?: the)?\b', re.IGNORECASE),
]

# First line shapes that mean "this is already content"
_CONTENT_START_PATTERNS = [
    re.compile(r'^\['),                                        # [Discord #x] source label
    re.compile(r'^\*{1,2}Community\s+Digest', re.IGNORECASE),  # bold digest title
    re.compile(r'^[A-Z][\w \-/&]{0,60}:'),                     # "Label:" line
]

# How much of the opening paragraph is inspected for a preamble
PREAMBLE_SCAN_CHARS = 800


# =============================================================================
# CLEANUP RULES - applied in order once the preamble is gone
# =============================================================================

CLEANUP_RULES = [
    {
        'name': 'separator_before_heading',
        'pattern': re.compile(r'(?:(?<=\S)[ \t]+|[ \t]*\n[ \t]*)---[ \t]*\n?[ \t]*##[ \t]+'),
        'replacement': '\n\n## ',
        'description': 'Inline "--- ##" becomes a clean heading boundary'
    },
    {
        'name': 'inline_separator',
        'pattern': re.compile(r'(?<=\S)[ \t]+---[ \t]+(?=\S)'),
        'replacement': '\n\n',
        'description': 'Mid-line "---" becomes a paragraph break'
    },
    {
        'name': 'trailing_separator',
        'pattern': re.compile(r'(?<=\S)[ \t]+---[ \t]*$', re.MULTILINE),
        'replacement': '',
        'description': '"---" dangling at the end of a line'
    },
    {
        'name': 'leading_separator',
        'pattern': re.compile(r'^---[ \t]+(?=\S)', re.MULTILINE),
        'replacement': '',
        'description': '"---" glued to the start of a line'
    },
    {
        'name': 'repeated_spaces',
        'pattern': re.compile(r'(?<=\S)[ \t]{2,}'),
        'replacement': ' ',
        'description': 'Runs of spaces and tabs inside a line'
    },
    {
        'name': 'dangling_separator_lines',
        'pattern': re.compile(r'\A(?:[ \t]*---[ \t]*\n)+|(?:\n[ \t]*---[ \t]*)+\Z'),
        'replacement': '',
        'description': '"---" lines with no group on one side'
    },
    {
        'name': 'excess_newlines',
        'pattern': re.compile(r'\n{3,}'),
        'replacement': '\n\n',
        'description': 'Three or more newlines'
    },
]


# A topic id right after a source label ("[Forum topic:x] disc-topic-5") is kept
# for the link injector; any other occurrence is leakage
_TOPIC_ID_RE = re.compile(r'(\][ \t]*)?[ \t]*\bdisc-topic-\d+\b')


def _drop_orphan_topic_ids(text: str) -> str:
    return _TOPIC_ID_RE.sub(lambda m: m.group(0) if m.group(1) is not None else '', text)


def _is_preamble(text: str) -> bool:
    return any(p.search(text) for p in PREAMBLE_PATTERNS)


def _looks_like_content(line: str) -> bool:
    if _is_preamble(line):
        return False
    return any(p.match(line) for p in _CONTENT_START_PATTERNS)


def strip_preamble(text: str) -> str:
    """Drop a leading acknowledgement paragraph or acknowledgement lines."""
    lines = text.split('\n')

    idx = 0
    while idx < len(lines) and not lines[idx].strip():
        idx += 1
    if idx == len(lines):
        return ''

    if _looks_like_content(lines[idx].strip()):
        return text.strip()

    para_start = idx
    while idx < len(lines) and lines[idx].strip():
        idx += 1
    para_text = ' '.join(lines[para_start:idx])[:PREAMBLE_SCAN_CHARS]

    if _is_preamble(para_text):
        return '\n'.join(lines[idx:]).strip()

    # Single acknowledgement lines ahead of real content
    i = 0
    while i < len(lines):
        line = lines[i].strip()
        if not line or _is_preamble(line):
            i += 1
            continue
        break
    return '\n'.join(lines[i:]).strip()


def sanitize_llm_output(text) -> str:
    """Remove summariser preambles and textual artifacts.

    Args:
        text: Raw summariser output (anything that is not a string yields '')

    Returns:
        Cleaned text, trimmed
    """
    if not text or not isinstance(text, str):
        return ''

    result = strip_preamble(text.replace('\r\n', '\n'))
    result = _drop_orphan_topic_ids(result)
    # A "---" line on its own survives; the segmenter treats it as a group delimiter
    for rule in CLEANUP_RULES:
        result = rule['pattern'].sub(rule['replacement'], result)

    return result.strip()
