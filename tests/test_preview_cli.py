"""Tests for the digest preview script."""

import json

from scripts.preview_digest import main


class TestPreviewCli:
    """Command-line rendering."""

    def test_overview(self, tmp_path, capsys):
        summary = tmp_path / "summary.md"
        summary.write_text("## Release\n- v2 shipped\n\nParticipants: alice", encoding="utf-8")

        assert main([str(summary), "--date", "2025-09-29"]) == 0

        out = capsys.readouterr().out
        assert "--- Message 1/1" in out
        assert "[header ] Community Digest — 2025-09-29 (UTC)" in out

    def test_json_with_links(self, tmp_path, capsys):
        summary = tmp_path / "summary.md"
        summary.write_text("[Discord #general] Release went out", encoding="utf-8")
        links = tmp_path / "links.json"
        links.write_text(json.dumps({"channels": [{"id": "2", "name": "general", "guild_id": "1"}]}),
                         encoding="utf-8")

        assert main([str(summary), "--date", "2025-09-29", "--links", str(links), "--json"]) == 0

        captured = capsys.readouterr()
        payloads = json.loads(captured.out)
        assert len(payloads) == 1
        assert payloads[0]["blocks"][3]["text"]["text"] == (
            "*Summary*\n[Discord <https://discord.com/channels/1/2|#general>] Release went out"
        )
        assert "Registered 1 link targets" in captured.err
