"""Click commands run in-process through CliRunner."""

from __future__ import annotations

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in ("DATABASE_URL", "NEWSDESK_CONFIG_PATH", "NEWSDESK_DEBUG", "NEWSDESK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_help_lists_commands():
    from newsdesk.cli.app import cli

    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("discover", "publish", "validate", "clear-leads"):
        assert command in result.output


class TestValidateCommand:
    def test_compliant_draft_passes(self, tmp_path, build_newsletter):
        from newsdesk.cli.app import cli

        path = tmp_path / "draft.md"
        path.write_text(build_newsletter(), encoding="utf-8")

        result = CliRunner().invoke(cli, ["validate", str(path)])

        assert result.exit_code == 0
        assert "violation:" not in result.output
        assert result.output.strip().endswith("OK")

    def test_bare_url_fails(self, tmp_path, build_newsletter):
        from newsdesk.cli.app import cli

        path = tmp_path / "draft.md"
        path.write_text(
            build_newsletter().replace("## Sources\n", "## Sources\n\nhttps://raw.example.com/x\n"),
            encoding="utf-8",
        )

        result = CliRunner().invoke(cli, ["validate", str(path)])

        assert result.exit_code == 1
        assert "violation:" in result.output
        assert "OK" not in result.output

    def test_missing_file_is_usage_error(self, tmp_path):
        from newsdesk.cli.app import cli

        result = CliRunner().invoke(cli, ["validate", str(tmp_path / "absent.md")])

        assert result.exit_code == 2


def test_clear_leads_uses_in_memory_store_without_database():
    from newsdesk.cli.app import cli

    result = CliRunner().invoke(cli, ["clear-leads", "--yes"])

    assert result.exit_code == 0
    assert "Deleted 0 leads" in result.output
