"""Community digest: Discord and Discourse activity rendered for Slack."""

from .render import MessagePage, render
from .types import DigestContext, DigestItem, NormalizedMessage

__all__ = [
    'DigestContext',
    'DigestItem',
    'MessagePage',
    'NormalizedMessage',
    'render',
]
