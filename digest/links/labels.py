"""Source labels the summariser is asked to echo back verbatim."""

from typing import Optional, Union


def format_source_label(
    source: str,
    channel_id: Optional[str] = None,
    forum: Optional[str] = None,
    category_id: Optional[Union[int, str]] = None
) -> str:
    """Build the bracketed label for one message's origin.

    Args:
        source: 'discord', 'discourse' or any other source name
        channel_id: Discord channel id or name (a disc-topic-<n> group id is shortened to #<n>)
        forum: Forum hostname, used when no category is known
        category_id: Discourse category id

    Returns:
        e.g. "[Discord #general]", "[Forum category:12]", "[Source rss]"
    """
    if source == 'discord':
        channel = (channel_id or 'unknown-channel').lstrip('#')
        if channel.startswith('disc-topic-'):
            channel = channel[len('disc-topic-'):]
        return f"[Discord #{channel}]"

    if source == 'discourse':
        if category_id is not None and category_id != '':
            return f"[Forum category:{category_id}]"
        if forum:
            return f"[Forum {forum}]"
        return "[Forum]"

    return f"[Source {source}]"
