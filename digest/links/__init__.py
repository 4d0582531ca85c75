"""Source link resolution: registry of discovered entities and label injection."""

from .inject import inject_source_links, sanitize_visible
from .labels import format_source_label
from .registry import (
    CategoryMeta,
    ChannelMeta,
    LinkRegistry,
    TopicMeta,
    get_link_registry,
    reset_link_registry,
)

__all__ = [
    'CategoryMeta',
    'ChannelMeta',
    'LinkRegistry',
    'TopicMeta',
    'format_source_label',
    'get_link_registry',
    'inject_source_links',
    'reset_link_registry',
    'sanitize_visible',
]
