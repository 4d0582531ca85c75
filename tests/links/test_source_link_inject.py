"""Tests for source label link injection."""

import pytest

from digest.links.inject import inject_source_links, sanitize_visible
from digest.links.registry import CategoryMeta, ChannelMeta, LinkRegistry, TopicMeta


@pytest.fixture
def registry():
    reg = LinkRegistry()
    reg.register_channel(ChannelMeta(id="123456789012", name="💬┊general", guild_id="9"))
    reg.register_category(CategoryMeta(id=12, name="📣 Announcements", slug="announcements",
                                       base_url="https://forum.x"))
    reg.register_topic(TopicMeta(id=42, title="Release notes 🎉", base_url="https://forum.x"))
    reg.register_topic(TopicMeta(id=7, title="Roadmap", url="https://forum.x/t/roadmap/7"))
    return reg


class TestDiscordLabels:
    """[Discord #channel] labels."""

    def test_by_name(self, registry):
        out = inject_source_links("[Discord #general] update", registry)
        assert out == "[Discord <https://discord.com/channels/9/123456789012|#general>] update"

    def test_by_trailing_id(self, registry):
        out = inject_source_links("[Discord #renamed] 123456789012", registry)
        assert out == "[Discord <https://discord.com/channels/9/123456789012|#general>]"

    def test_channel_without_url_is_unresolved(self):
        reg = LinkRegistry()
        reg.register_channel(ChannelMeta(id="1", name="general"))
        assert inject_source_links("[Discord #general]", reg) == "[Discord #general]"


class TestForumLabels:
    """[Forum topic:...] and [Forum category:...] labels."""

    def test_topic_by_id_keeps_title_verbatim(self, registry):
        out = inject_source_links("[Forum topic:Release notes] disc-topic-42", registry)
        assert out == "[Forum <https://forum.x/t/42|topic: Release notes 🎉>]"

    def test_topic_by_title(self, registry):
        out = inject_source_links("[Forum topic:Roadmap]", registry)
        assert out == "[Forum <https://forum.x/t/roadmap/7|topic: Roadmap>]"

    def test_numeric_category(self, registry):
        out = inject_source_links("[Forum category:12]", registry)
        assert out == "[Forum <https://forum.x/c/announcements/12|category: Announcements>]"

    def test_category_by_name(self, registry):
        out = inject_source_links("[Forum category:Announcements]", registry)
        assert out == "[Forum <https://forum.x/c/announcements/12|category: Announcements>]"

    def test_category_label_with_topic_id(self, registry):
        out = inject_source_links("[Forum category:12] disc-topic-42", registry)
        assert out == "[Forum <https://forum.x/t/42|topic: Release notes 🎉>]"


class TestUnresolved:
    """Anything unresolved is left exactly as written."""

    def test_byte_exact(self, registry):
        text = "See [Discord #ghost]  123456789 and [Forum topic:Nope] disc-topic-9 or [Forum category:99]"
        assert inject_source_links(text, registry) == text

    def test_empty_registry(self):
        text = "[Discord #general] hello"
        assert inject_source_links(text, LinkRegistry()) == text

    @pytest.mark.parametrize("value", [None, "", 42])
    def test_non_text_returned_unchanged(self, value):
        assert inject_source_links(value) == value


class TestSanitizeVisible:
    """Display name cleanup."""

    def test_drops_glyphs(self):
        assert sanitize_visible("💬┊general") == "general"

    def test_keeps_colon_and_dash(self):
        assert sanitize_visible("dev-talk: v2") == "dev-talk: v2"

    def test_empty(self):
        assert sanitize_visible(None) == ""
