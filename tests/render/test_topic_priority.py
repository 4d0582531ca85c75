"""Tests for emoji-priority topic reordering."""

from digest.render.priority import (
    ParsedTopic,
    parse_topics_from_summary,
    reconstruct_summary,
    sort_and_reconstruct_summary,
    sort_topics_by_priority,
)


class TestParseTopics:
    """Header-delimited topic parsing."""

    def test_emoji_prefixes(self):
        summary = "*🔴 Security Alert*\nCritical vulnerability found\n\n*💰 Funding Update*\nNew grant awarded"
        topics = parse_topics_from_summary(summary)
        assert len(topics) == 2
        assert topics[0].header == "🔴 Security Alert"
        assert topics[0].emoji == "🔴"
        assert topics[0].priority == 1
        assert topics[1].header == "💰 Funding Update"
        assert topics[1].priority == 2

    def test_without_emoji(self):
        topics = parse_topics_from_summary("*Regular Topic*\nSome content\n\n*Another Topic*\nMore")
        assert [t.emoji for t in topics] == [None, None]
        assert [t.priority for t in topics] == [99, 99]

    def test_mixed(self):
        summary = "*🏛️ Governance*\nProposal\n\n*Regular Topic*\nNo emoji\n\n*🚀 Growth*\nExpansion"
        assert [t.priority for t in parse_topics_from_summary(summary)] == [3, 99, 6]

    def test_governance_without_variation_selector(self):
        """🏛 and 🏛️ are the same bucket."""
        topics = parse_topics_from_summary("*\U0001F3DB Governance*\nVote\n\n*Other*\nx")
        assert topics[0].emoji == "🏛️"
        assert topics[0].priority == 3

    def test_unknown_emoji(self):
        topics = parse_topics_from_summary("*🎉 Celebration*\nUnknown emoji")
        assert len(topics) == 1
        assert topics[0].emoji is None
        assert topics[0].priority == 99

    def test_empty(self):
        assert parse_topics_from_summary("") == []

    def test_no_headers_single_topic(self):
        topics = parse_topics_from_summary("Just some plain text without headers")
        assert len(topics) == 1
        assert topics[0].header == "Summary"
        assert topics[0].priority == 99
        assert topics[0].content == "Just some plain text without headers"

    def test_content_spans_to_next_header(self):
        summary = "*A*\nline 1\n\nline 2\n\n*B*\nline 3"
        topics = parse_topics_from_summary(summary)
        assert topics[0].content == "*A*\nline 1\n\nline 2"
        assert topics[1].content == "*B*\nline 3"

    def test_label_lines_are_not_headers(self):
        """'*Key Topics:*' is a label, not a topic."""
        topics = parse_topics_from_summary("*Topic*\n*Key points:*\n- a")
        assert len(topics) == 1
        assert topics[0].content == "*Topic*\n*Key points:*\n- a"


class TestSortTopics:
    """Stable ascending sort."""

    def test_sorts_by_priority(self):
        topics = [
            ParsedTopic(header="🚀 Growth", content="g", emoji="🚀", priority=6),
            ParsedTopic(header="🔴 Security", content="s", emoji="🔴", priority=1),
            ParsedTopic(header="💰 Funding", content="f", emoji="💰", priority=2),
        ]
        assert [t.priority for t in sort_topics_by_priority(topics)] == [1, 2, 6]

    def test_stable_for_ties(self):
        """Three equal-priority topics keep their order."""
        topics = [ParsedTopic(header=h, content=h, emoji=None, priority=99) for h in ("first", "second", "third")]
        assert [t.header for t in sort_topics_by_priority(topics)] == ["first", "second", "third"]

    def test_does_not_mutate_input(self):
        topics = [
            ParsedTopic(header="b", content="b", emoji="🚀", priority=6),
            ParsedTopic(header="a", content="a", emoji="🔴", priority=1),
        ]
        sort_topics_by_priority(topics)
        assert [t.header for t in topics] == ["b", "a"]


class TestReconstruct:
    """Joining and the one-call helper."""

    def test_joined_with_blank_line(self):
        topics = [ParsedTopic(header="a", content="*A*\nx", emoji=None, priority=99),
                  ParsedTopic(header="b", content="*B*\ny", emoji=None, priority=99)]
        assert reconstruct_summary(topics) == "*A*\nx\n\n*B*\ny"

    def test_scrambled_order_is_fixed(self):
        summary = "*🚀 Growth*\nExpansion\n\n*🔴 Security*\nPatch\n\n*💰 Funding*\nGrant"
        out = sort_and_reconstruct_summary(summary)
        assert out == "*🔴 Security*\nPatch\n\n*💰 Funding*\nGrant\n\n*🚀 Growth*\nExpansion"

    def test_no_headers_unchanged(self):
        text = "  plain text\nwith lines  "
        assert sort_and_reconstruct_summary(text) == text

    def test_empty(self):
        assert sort_and_reconstruct_summary("") == ""

    def test_preamble_stays_first(self):
        summary = "Intro line\n\n*🚀 Growth*\ng\n\n*🔴 Security*\ns"
        assert sort_and_reconstruct_summary(summary) == "Intro line\n\n*🔴 Security*\ns\n\n*🚀 Growth*\ng"


class TestGroupDelimiters:
    """Group delimiter lines stay between topics after sorting."""

    def test_delimiter_not_carried_with_topic(self):
        summary = "*🚀 Growth*\nNew members\n\n---\n\n*🔴 Security*\nPatch shipped"
        assert sort_and_reconstruct_summary(summary) == (
            "*🔴 Security*\nPatch shipped\n\n---\n\n*🚀 Growth*\nNew members"
        )

    def test_preamble_keeps_its_delimiter(self):
        summary = "Intro\n\n---\n\n*🚀 Growth*\ng\n\n---\n\n*🔴 Security*\ns"
        assert sort_and_reconstruct_summary(summary) == (
            "Intro\n\n---\n\n*🔴 Security*\ns\n\n---\n\n*🚀 Growth*\ng"
        )

    def test_sorting_twice_is_stable(self):
        summary = "*🚀 Growth*\ng\n\n---\n\n*💰 Funding*\nf\n\n---\n\n*🔴 Security*\ns"
        once = sort_and_reconstruct_summary(summary)
        assert sort_and_reconstruct_summary(once) == once
