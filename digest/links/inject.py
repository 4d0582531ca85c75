"""Source link injection - turns bracketed source labels into Slack links.

The summariser is prompted to echo labels such as ``[Discord #general]`` or
``[Forum topic:Release notes] disc-topic-42``. Labels that resolve through the
link registry become ``[Discord <url|#general>]``; anything unresolved is left
exactly as written.

Channel and category names are cleaned of decorative glyphs before display.
Topic titles are user content and are shown verbatim.
"""

import re
import unicodedata
from typing import Optional

from digest.links.registry import (
    LinkRegistry,
    category_url,
    channel_url,
    get_link_registry,
    topic_url,
)

DISCORD_LABEL_RE = re.compile(r'\[Discord\s+#([^\]]+)\](?:\s+([0-9]{8,30}))?')
FORUM_TOPIC_LABEL_RE = re.compile(r'\[Forum\s+topic:([^\]]+)\](?:\s+(disc-topic-(\d+)))?')
FORUM_CATEGORY_LABEL_RE = re.compile(r'\[Forum\s+category:([^\]]+)\](?:\s+(disc-topic-(\d+)))?')


def sanitize_visible(text: Optional[str]) -> str:
    """Keep letters, numbers, whitespace, '-', '_' and ':'; collapse whitespace."""
    if not text:
        return ''
    normalized = unicodedata.normalize('NFKD', str(text))
    kept = ''.join(
        ch for ch in normalized
        if ch.isspace() or ch in '-_:' or unicodedata.category(ch)[0] in ('L', 'N')
    )
    return ' '.join(kept.split())


def _topic_link(registry: LinkRegistry, topic_id: Optional[str]) -> Optional[str]:
    if not topic_id:
        return None
    meta = registry.get_topic(topic_id)
    url = topic_url(meta) if meta else None
    if not url:
        return None
    return f"[Forum <{url}|topic: {meta.title or f'topic-{topic_id}'}>]"


def inject_source_links(text, registry: Optional[LinkRegistry] = None):
    """Rewrite resolvable source labels into Slack links.

    Args:
        text: Digest text; anything that is not a string is returned unchanged
        registry: Registry to resolve against (defaults to the process-wide one)

    Returns:
        Text with resolved labels linked and unresolved labels untouched
    """
    if not text or not isinstance(text, str):
        return text

    registry = registry or get_link_registry()

    def _discord(match: re.Match) -> str:
        label, channel_id = match.group(1), match.group(2)
        meta = registry.get_channel(channel_id) if channel_id else None
        url = channel_url(meta) if meta else None
        if not url:
            meta = registry.find_channel(label)
            url = channel_url(meta) if meta else None
        if not url:
            return match.group(0)
        visible = sanitize_visible(meta.name) or label.strip()
        return f"[Discord <{url}|#{visible}>]"

    def _forum_topic(match: re.Match) -> str:
        title = match.group(1)
        linked = _topic_link(registry, match.group(3))
        if linked:
            return linked
        meta = registry.find_topic(title)
        url = topic_url(meta) if meta else None
        if not url:
            return match.group(0)
        return f"[Forum <{url}|topic: {meta.title or title.strip()}>]"

    def _forum_category(match: re.Match) -> str:
        label = match.group(1).strip()
        linked = _topic_link(registry, match.group(3))
        if linked:
            return linked
        meta = registry.get_category(label) if label.isdigit() else None
        if meta is None:
            meta = registry.find_category(label)
        url = category_url(meta) if meta else None
        if not url:
            return match.group(0)
        visible = sanitize_visible(meta.name) or label
        return f"[Forum <{url}|category: {visible}>]"

    text = DISCORD_LABEL_RE.sub(_discord, text)
    text = FORUM_TOPIC_LABEL_RE.sub(_forum_topic, text)
    text = FORUM_CATEGORY_LABEL_RE.sub(_forum_category, text)
    return text
