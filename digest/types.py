"""Shared data types for the Community Digest."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class NormalizedMessage:
    """One chat or forum message, flattened across sources."""
    id: str
    source: str                      # 'discord' | 'discourse'
    author: Optional[str]
    content: str
    created_at: str                  # ISO 8601, UTC
    url: Optional[str] = None
    channel_id: Optional[str] = None
    channel_name: Optional[str] = None
    topic_id: Optional[str] = None
    topic_title: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    forum: Optional[str] = None

    @property
    def timestamp(self) -> datetime:
        return datetime.fromisoformat(self.created_at.replace('Z', '+00:00'))


@dataclass
class DigestItem:
    """Structured summariser output for one conversation group."""
    headline: str
    url: str = ''
    summary: str = ''

    def to_markdown(self) -> str:
        """Render as the markdown the pipeline expects."""
        headline = self.headline.strip()
        heading = f"[{headline}]({self.url})" if self.url else headline
        return f"## {heading}\n\n{self.summary.strip()}"


@dataclass
class DigestContext:
    """Date title and UTC window for one digest."""
    start: str
    end: str
    date_title: str
