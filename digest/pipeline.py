"""Digest pipeline - fetch, filter, summarise, render, send.

Sources, the summariser and destinations are pluggable. A failing source or
summary is logged and skipped so one bad channel never costs the whole
digest.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional, Union

import config
from digest.filters import apply_message_filters
from digest.links.registry import LinkRegistry
from digest.render.paginator import MessagePage
from digest.render.participants import inject_missing_participants
from digest.render.pipeline import normalize_digest_input, render
from digest.timewindow import get_utc_daily_window
from digest.topics import cluster_messages
from digest.types import DigestContext, DigestItem, NormalizedMessage
from logger import logger


# =============================================================================
# COLLABORATOR INTERFACES
# =============================================================================

class Source(ABC):
    """Fetches normalised messages from one platform."""
    name: str = 'source'

    def is_enabled(self) -> bool:
        return True

    @abstractmethod
    async def fetch_messages(self, window_hours: int) -> list[NormalizedMessage]:
        ...


class Processor(ABC):
    """Summarises one conversation group."""
    name: str = 'processor'

    @abstractmethod
    async def process(self, messages: list[NormalizedMessage]) -> Union[str, DigestItem]:
        ...


class Destination(ABC):
    """Delivers rendered pages."""
    name: str = 'destination'

    def is_enabled(self) -> bool:
        return True

    @abstractmethod
    async def send_digest(self, pages: list[MessagePage], context: DigestContext) -> None:
        ...


def group_key(msg: NormalizedMessage) -> str:
    """Conversation group: Discord channel, else Discourse topic."""
    if msg.channel_id:
        return msg.channel_id
    if msg.topic_id:
        return f"disc-topic-{msg.topic_id}"
    return 'unknown'


def group_messages(messages: Iterable[NormalizedMessage]) -> dict[str, list[NormalizedMessage]]:
    groups: dict[str, list[NormalizedMessage]] = {}
    for msg in messages:
        groups.setdefault(group_key(msg), []).append(msg)
    return groups


class DigestPipeline:
    """Runs one digest cycle over the registered sources and destinations."""

    def __init__(
        self,
        processor: Processor,
        sources: Iterable[Source] = (),
        destinations: Iterable[Destination] = (),
        registry: Optional[LinkRegistry] = None
    ):
        self.processor = processor
        self.sources: list[Source] = list(sources)
        self.destinations: list[Destination] = list(destinations)
        self.registry = registry

    def add_source(self, source: Source) -> None:
        self.sources.append(source)

    def add_destination(self, destination: Destination) -> None:
        self.destinations.append(destination)

    async def _fetch_all(self) -> list[NormalizedMessage]:
        messages: list[NormalizedMessage] = []
        for source in self.sources:
            if not source.is_enabled():
                logger.info(f"Source {source.name} is disabled")
                continue
            try:
                fetched = await source.fetch_messages(config.DIGEST_WINDOW_HOURS)
            except Exception as e:
                logger.error(f"Failed to fetch from {source.name}: {e}")
                continue
            logger.info(f"Fetched {len(fetched)} messages from {source.name}")
            messages.extend(fetched)
        return messages

    async def _summarise(self, key: str, messages: list[NormalizedMessage]) -> str:
        filtered = apply_message_filters(
            messages,
            min_length=config.MIN_MESSAGE_LENGTH,
            exclude_commands=config.EXCLUDE_COMMANDS,
            exclude_link_only=config.EXCLUDE_LINK_ONLY,
        )
        if not filtered:
            logger.debug(f"No messages left after filtering for group {key}")
            return ''

        try:
            result = await self.processor.process(filtered)
        except Exception as e:
            logger.error(f"Failed to summarise group {key}: {e}")
            return ''

        summary = normalize_digest_input(result)
        if summary.strip() and config.ATTRIBUTION_FALLBACK_ENABLED:
            clusters = cluster_messages(filtered, config.TOPIC_GAP_MINUTES)
            summary = inject_missing_participants(summary, clusters, config.MAX_TOPIC_PARTICIPANTS)
        return summary.strip()

    async def run(self, now: Optional[datetime] = None) -> list[MessagePage]:
        """Run one cycle.

        Args:
            now: Reference time for the UTC daily window (defaults to now)

        Returns:
            Pages sent, or [] when nothing was fetched or summarised
        """
        logger.info("Starting digest pipeline")
        start, end, date_title = get_utc_daily_window(now)
        context = DigestContext(
            start=start.strftime('%Y-%m-%d %H:%M'),
            end=end.strftime('%Y-%m-%d %H:%M'),
            date_title=date_title,
        )

        messages = await self._fetch_all()
        if not messages:
            logger.info("No messages fetched from any source")
            return []

        groups = group_messages(messages)
        logger.info(f"Summarising {len(groups)} conversation groups")

        summaries = []
        for key, group in groups.items():
            summary = await self._summarise(key, group)
            if summary:
                summaries.append(summary)

        if not summaries:
            logger.info("No summaries generated")
            return []

        pages = render('\n\n'.join(summaries), date_title, start, end, registry=self.registry)

        for destination in self.destinations:
            if not destination.is_enabled():
                logger.info(f"Destination {destination.name} is disabled")
                continue
            logger.info(f"Sending {len(pages)} message(s) to {destination.name}")
            try:
                await destination.send_digest(pages, context)
            except Exception as e:
                logger.error(f"Failed to send digest to {destination.name}: {e}")

        logger.info("Digest pipeline run complete")
        return pages
