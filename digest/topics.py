"""Topic clustering - groups messages into conversation windows.

Messages are walked in time order; a new cluster starts whenever the channel
changes or the gap since the previous message exceeds ``gap_minutes``.
Clusters feed participant back-fill when the summariser omits attribution.
"""

from dataclasses import dataclass, field
from typing import Optional

from digest.render.participants import format_participant_list
from digest.types import NormalizedMessage

UNKNOWN_AUTHOR = 'unknown'


@dataclass
class TopicCluster:
    """A run of messages in one channel without a long pause."""
    id: int
    channel_id: Optional[str]
    start: str
    end: str
    messages: list[NormalizedMessage] = field(default_factory=list)
    participants: list[str] = field(default_factory=list)


def extract_participants(messages: list[NormalizedMessage]) -> list[str]:
    """Unique author names in first-seen order."""
    seen: set[str] = set()
    names = []
    for msg in messages:
        name = msg.author or UNKNOWN_AUTHOR
        if name not in seen:
            seen.add(name)
            names.append(name)
    return names


def cluster_messages(messages: list[NormalizedMessage], gap_minutes: int = 20) -> list[TopicCluster]:
    """Cluster messages by channel and time gap.

    Args:
        messages: Messages in any order
        gap_minutes: Silence that closes a cluster

    Returns:
        Clusters in chronological order, ids starting at 1
    """
    if not messages:
        return []

    ordered = sorted(messages, key=lambda m: m.timestamp)
    gap_seconds = gap_minutes * 60

    clusters: list[TopicCluster] = []
    current: Optional[TopicCluster] = None

    for msg in ordered:
        if current is not None:
            last = current.messages[-1]
            channel_changed = msg.channel_id != current.channel_id
            gap_exceeded = (msg.timestamp - last.timestamp).total_seconds() > gap_seconds
            if not channel_changed and not gap_exceeded:
                current.messages.append(msg)
                current.end = msg.created_at
                continue
            current.participants = extract_participants(current.messages)
            clusters.append(current)

        current = TopicCluster(
            id=len(clusters) + 1,
            channel_id=msg.channel_id,
            start=msg.created_at,
            end=msg.created_at,
            messages=[msg],
        )

    current.participants = extract_participants(current.messages)
    clusters.append(current)
    return clusters


def describe_cluster(cluster: TopicCluster, max_participants: int = 6) -> str:
    """One-line description used in debug logging."""
    names = format_participant_list(cluster.participants, max_participants)
    return (f"#{cluster.id} {cluster.channel_id or '?'} {cluster.start}..{cluster.end} "
            f"({len(cluster.messages)} msgs: {names})")
