"""Tests for source label formatting."""

import pytest

from digest.links.labels import format_source_label


class TestFormatSourceLabel:
    """Labels the summariser echoes back."""

    @pytest.mark.parametrize("channel_id,expected", [
        ("123", "[Discord #123]"),
        ("#general", "[Discord #general]"),
        ("disc-topic-5", "[Discord #5]"),
        (None, "[Discord #unknown-channel]"),
    ])
    def test_discord(self, channel_id, expected):
        assert format_source_label("discord", channel_id=channel_id) == expected

    def test_discourse_category(self):
        assert format_source_label("discourse", category_id=12, forum="forum.x") == "[Forum category:12]"

    def test_discourse_category_zero(self):
        assert format_source_label("discourse", category_id=0) == "[Forum category:0]"

    def test_discourse_forum_only(self):
        assert format_source_label("discourse", forum="forum.x") == "[Forum forum.x]"

    def test_discourse_bare(self):
        assert format_source_label("discourse") == "[Forum]"

    def test_other_source(self):
        assert format_source_label("rss") == "[Source rss]"
