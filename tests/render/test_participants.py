"""Tests for Participants line handling."""

import pytest

from digest.render.participants import (
    collapse_duplicate_participants,
    format_participant_list,
    inject_missing_participants,
    parse_participant_names,
    pop_trailing_participants,
)
from digest.topics import TopicCluster


class TestParseAndPop:
    """Finding and splitting off Participants lines."""

    def test_parse_dedupes_case_insensitively(self):
        assert parse_participant_names("alice, Bob, ALICE, , carol") == ["alice", "Bob", "carol"]

    def test_pop_trailing_line(self):
        body, names = pop_trailing_participants("*Topic*\n- detail\nParticipants: alice, bob")
        assert body == "*Topic*\n- detail"
        assert names == ["alice", "bob"]

    @pytest.mark.parametrize("line", [
        "Participants: alice, bob",
        "*Participants:* alice, bob",
        "**Participants**: alice, bob",
        "- Participants: alice, bob",
        "participants:alice,bob",
    ])
    def test_bold_and_bullet_variants(self, line):
        _, names = pop_trailing_participants(f"Body\n{line}")
        assert names == ["alice", "bob"]

    def test_no_participants_line(self):
        text = "Body\n- bullet"
        assert pop_trailing_participants(text) == (text, [])

    def test_participants_not_last_line_stays(self):
        text = "Participants: a\nMore body"
        assert pop_trailing_participants(text) == (text, [])

    def test_participants_only_pops_to_empty_body(self):
        assert pop_trailing_participants("Participants: a, b") == ("", ["a", "b"])


class TestCompactList:
    """'a, b +N' formatting."""

    def test_under_cap(self):
        assert format_participant_list(["a", "b"], 6) == "a, b"

    def test_over_cap(self):
        assert format_participant_list(["a", "b", "c", "d"], 2) == "a, b +2"

    def test_empty(self):
        assert format_participant_list([]) == ""


class TestCollapseDuplicates:
    """One Participants line per section."""

    def test_keeps_first_line_per_section(self):
        summary = "Topic A\nParticipants: a\nParticipants: b\n\nTopic B\nParticipants: c"
        assert collapse_duplicate_participants(summary) == "Topic A\nParticipants: a\n\nTopic B\nParticipants: c"

    def test_unchanged_when_no_duplicates(self):
        summary = "Topic\n  - indented\nParticipants: a\n\n\nNext"
        assert collapse_duplicate_participants(summary) == summary

    def test_empty(self):
        assert collapse_duplicate_participants("") == ""


def _cluster(cid, participants, first_content, make_message):
    msg = make_message(content=first_content)
    return TopicCluster(id=cid, channel_id="c1", start=msg.created_at, end=msg.created_at,
                        messages=[msg], participants=participants)


class TestInjectMissing:
    """Back-fill of forgotten attribution."""

    def test_appends_to_matching_section(self, make_message):
        summary = "*Wallet sync*\n- Sync delays reported\n\n*Grants*\n- New round opened"
        clusters = [_cluster(1, ["dave", "erin"], "The grants committee opened applications", make_message)]
        out = inject_missing_participants(summary, clusters)
        assert out == ("*Wallet sync*\n- Sync delays reported\n\n"
                       "*Grants*\n- New round opened\nParticipants: dave, erin")

    def test_falls_back_to_last_section(self, make_message):
        summary = "*One*\n- x\n\n*Two*\n- y"
        clusters = [_cluster(1, ["zed"], "zzzz qqqq", make_message)]
        assert inject_missing_participants(summary, clusters).endswith("*Two*\n- y\nParticipants: zed")

    def test_skips_already_listed(self, make_message):
        summary = "*Grants*\n- New round\nParticipants: dave"
        clusters = [_cluster(1, ["dave"], "grants update", make_message)]
        assert inject_missing_participants(summary, clusters) == summary

    def test_caps_names(self, make_message):
        clusters = [_cluster(1, ["a", "b", "c", "d"], "topic words here", make_message)]
        out = inject_missing_participants("*Topic words*\n- here", clusters, max_per_topic=2)
        assert out.endswith("Participants: a, b +2")

    def test_no_clusters(self):
        assert inject_missing_participants("text", []) == "text"
