"""Message filters applied before summarisation."""

import re

from digest.types import NormalizedMessage

_COMMAND_RE = re.compile(r'^[!/]')

LINK_ONLY_PATTERNS = [
    re.compile(r'^https?://\S+$'),                          # bare URL
    re.compile(r'^\[([^\]]+)\]\((https?://[^\s)]+)\)$'),    # markdown link
    re.compile(r'^<https?://\S+>$'),                        # angle-bracket URL
]


def is_command(msg: NormalizedMessage) -> bool:
    """Bot commands such as "!help" or "/digest"."""
    return bool(_COMMAND_RE.match(msg.content.strip()))


def is_link_only(msg: NormalizedMessage) -> bool:
    content = msg.content.strip()
    return any(p.match(content) for p in LINK_ONLY_PATTERNS)


def apply_message_filters(
    messages: list[NormalizedMessage],
    min_length: int = 10,
    exclude_commands: bool = True,
    exclude_link_only: bool = True
) -> list[NormalizedMessage]:
    """Drop short messages, bot commands and link-only posts.

    Args:
        messages: Messages for one conversation group
        min_length: Minimum stripped content length to keep
        exclude_commands: Drop "!" and "/" commands
        exclude_link_only: Drop messages that are nothing but a URL

    Returns:
        Messages that survive, original order preserved
    """
    kept = []
    for msg in messages:
        if len(msg.content.strip()) < min_length:
            continue
        if exclude_commands and is_command(msg):
            continue
        if exclude_link_only and is_link_only(msg):
            continue
        kept.append(msg)
    return kept
