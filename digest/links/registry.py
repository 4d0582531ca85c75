"""Link registry - process-wide index of channels, categories and topics.

Sources register what they discover during ingestion; the link injector reads
it back to turn "[Discord #general]" style labels into Slack links. Names are
indexed three ways (lowercase, sanitized, simple) so labels still resolve when
the summariser drops decorative glyphs like "💬┊".

Registering an id again replaces the record and every name key it owned.
"""

import re
import threading
import unicodedata
from dataclasses import dataclass
from typing import Optional, Union

from logger import logger

Identifier = Union[int, str]

DISCORD_CHANNEL_URL = "https://discord.com/channels/{guild_id}/{channel_id}"


@dataclass
class ChannelMeta:
    """A Discord channel."""
    id: str
    name: str
    guild_id: Optional[str] = None
    url: Optional[str] = None
    platform: str = 'discord'


@dataclass
class CategoryMeta:
    """A Discourse category."""
    id: Identifier
    name: str
    slug: Optional[str] = None
    url: Optional[str] = None
    base_url: Optional[str] = None
    platform: str = 'discourse'


@dataclass
class TopicMeta:
    """A Discourse topic."""
    id: Identifier
    title: str
    url: Optional[str] = None
    category_id: Optional[Identifier] = None
    base_url: Optional[str] = None
    platform: str = 'discourse'


Meta = Union[ChannelMeta, CategoryMeta, TopicMeta]

_INDEX_NAMES = ('exact', 'sanitized', 'simple')


# =============================================================================
# NAME VARIANTS
# =============================================================================

def sanitize_name_for_lookup(name: Optional[str]) -> str:
    """NFKD-normalise, keep letters, numbers, whitespace, '-' and '_', lowercase."""
    if not name:
        return ''
    normalized = unicodedata.normalize('NFKD', str(name))
    kept = ''.join(
        ch for ch in normalized
        if ch.isspace() or ch in '-_' or unicodedata.category(ch)[0] in ('L', 'N')
    )
    return ' '.join(kept.split()).lower()


def simple_name(name: Optional[str]) -> str:
    """Lowercase name with leading non-alphanumerics stripped ("┊zingo" -> "zingo")."""
    if not name:
        return ''
    return re.sub(r'^[\W_]+', '', str(name).lower()).strip()


def name_variants(name: Optional[str]) -> dict[str, str]:
    """Index key per variant, skipping empties and repeats of an earlier variant."""
    if not name:
        return {}
    exact = str(name).strip().lower()
    variants: dict[str, str] = {}
    for index, key in zip(_INDEX_NAMES, (exact, sanitize_name_for_lookup(name), simple_name(name))):
        if key and key not in variants.values():
            variants[index] = key
    return variants


def _id_key(value: Optional[Identifier]) -> Optional[str]:
    if value is None:
        return None
    key = str(value).strip()
    return key or None


# =============================================================================
# REGISTRY
# =============================================================================

class LinkRegistry:
    """In-memory id and name index for link metadata.

    All operations run under one lock, so producers may register from
    several threads while a digest is rendered.
    """

    KINDS = ('channel', 'category', 'topic')

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, dict[str, Meta]] = {}
        self._indexes: dict[str, dict[str, dict[str, Meta]]] = {}
        self._owned: dict[str, dict[str, dict[str, str]]] = {}
        self._clear()

    def _clear(self) -> None:
        self._by_id = {kind: {} for kind in self.KINDS}
        self._indexes = {kind: {index: {} for index in _INDEX_NAMES} for kind in self.KINDS}
        # kind -> id -> {index name: key} the record put into the indexes
        self._owned = {kind: {} for kind in self.KINDS}

    def _register(self, kind: str, meta: Meta, name: Optional[str]) -> bool:
        key = _id_key(getattr(meta, 'id', None))
        if key is None:
            logger.debug(f"Ignoring {kind} registration without an id")
            return False

        with self._lock:
            indexes = self._indexes[kind]
            for index, old_key in self._owned[kind].pop(key, {}).items():
                held = indexes[index].get(old_key)
                if held is not None and _id_key(held.id) == key:
                    del indexes[index][old_key]

            self._by_id[kind][key] = meta
            variants = name_variants(name)
            for index, name_key in variants.items():
                indexes[index][name_key] = meta
            self._owned[kind][key] = variants
        return True

    def _get(self, kind: str, identifier: Optional[Identifier]) -> Optional[Meta]:
        key = _id_key(identifier)
        if key is None:
            return None
        with self._lock:
            return self._by_id[kind].get(key)

    def _get_exact(self, kind: str, name: Optional[str]) -> Optional[Meta]:
        if not name:
            return None
        with self._lock:
            return self._indexes[kind]['exact'].get(name.strip().lower())

    def _find(self, kind: str, label: Optional[str]) -> Optional[Meta]:
        if not label or not label.strip():
            return None
        candidates = [k for k in (label.strip().lower(), sanitize_name_for_lookup(label), simple_name(label)) if k]
        with self._lock:
            indexes = self._indexes[kind]
            for candidate in candidates:
                for index in _INDEX_NAMES:
                    meta = indexes[index].get(candidate)
                    if meta is not None:
                        return meta
        return None

    # Channels

    def register_channel(self, meta: ChannelMeta) -> bool:
        return self._register('channel', meta, meta.name)

    def get_channel(self, channel_id: Optional[Identifier]) -> Optional[ChannelMeta]:
        return self._get('channel', channel_id)

    def get_channel_by_name(self, name: Optional[str]) -> Optional[ChannelMeta]:
        return self._get_exact('channel', name)

    def find_channel(self, label: Optional[str]) -> Optional[ChannelMeta]:
        """Permissive lookup for labels like "#general" or "general"."""
        if not label:
            return None
        return self._find('channel', label.strip().lstrip('#'))

    # Categories

    def register_category(self, meta: CategoryMeta) -> bool:
        return self._register('category', meta, meta.name)

    def get_category(self, category_id: Optional[Identifier]) -> Optional[CategoryMeta]:
        return self._get('category', category_id)

    def get_category_by_name(self, name: Optional[str]) -> Optional[CategoryMeta]:
        return self._get_exact('category', name)

    def find_category(self, label: Optional[str]) -> Optional[CategoryMeta]:
        return self._find('category', label)

    # Topics

    def register_topic(self, meta: TopicMeta) -> bool:
        return self._register('topic', meta, meta.title)

    def get_topic(self, topic_id: Optional[Identifier]) -> Optional[TopicMeta]:
        return self._get('topic', topic_id)

    def get_topic_by_title(self, title: Optional[str]) -> Optional[TopicMeta]:
        return self._get_exact('topic', title)

    def find_topic(self, label: Optional[str]) -> Optional[TopicMeta]:
        return self._find('topic', label)

    def reset(self) -> None:
        """Clear every map (for testing)."""
        with self._lock:
            self._clear()

    def stats(self) -> dict:
        with self._lock:
            return {kind: len(self._by_id[kind]) for kind in self.KINDS}


# =============================================================================
# URL SYNTHESIS
# =============================================================================

def channel_url(meta: ChannelMeta) -> Optional[str]:
    if meta.url:
        return meta.url
    if meta.guild_id:
        return DISCORD_CHANNEL_URL.format(guild_id=meta.guild_id, channel_id=meta.id)
    return None


def category_url(meta: CategoryMeta) -> Optional[str]:
    if meta.url:
        return meta.url
    if meta.base_url:
        base = meta.base_url.rstrip('/')
        return f"{base}/c/{meta.slug}/{meta.id}" if meta.slug else f"{base}/c/{meta.id}"
    return None


def topic_url(meta: TopicMeta) -> Optional[str]:
    if meta.url:
        return meta.url
    if meta.base_url:
        return f"{meta.base_url.rstrip('/')}/t/{meta.id}"
    return None


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_link_registry: Optional[LinkRegistry] = None
_link_registry_lock = threading.Lock()


def get_link_registry() -> LinkRegistry:
    """Get the process-wide registry, creating it on first call."""
    global _link_registry

    with _link_registry_lock:
        if _link_registry is None:
            _link_registry = LinkRegistry()
        return _link_registry


def reset_link_registry() -> None:
    """Clear the process-wide registry (for testing)."""
    get_link_registry().reset()
