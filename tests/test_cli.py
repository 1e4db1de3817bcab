"""Tests for the docsync command line interface."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from docsync.main import cli

_CALLOUT_PAGE = """---
title: Widgets
---
[block:callout]
{
  "type": "info",
  "title": "Note",
  "body": "Read this."
}
[/block]
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("categories:\n  - guides\n", encoding="utf-8")
    return path


class TestValidateCommand:
    def test_reports_broken_cross_reference(self, runner, docs_dir):
        result = runner.invoke(
            cli, ["validate", "guides", "-d", str(docs_dir), "--validations", "xref,mailto"]
        )
        assert result.exit_code == 1
        assert "guides/a.md:1 Cross reference [doc:c] seems broken: target [c] not found" in result.output
        assert "doc:b]" not in result.output

    def test_single_valid_file_passes(self, runner, docs_dir):
        result = runner.invoke(
            cli, ["validate", "-d", str(docs_dir), "-f", "guides/b.md", "--validations", "xref,mailto"]
        )
        assert result.exit_code == 0
        assert "seems broken" not in result.output

    def test_categories_come_from_config_file(self, runner, docs_dir, config_file):
        result = runner.invoke(
            cli, ["-c", str(config_file), "validate", "-d", str(docs_dir), "--validations", "xref"]
        )
        assert result.exit_code == 1
        assert "[doc:c]" in result.output

    def test_url_validation_uses_prober(self, runner, docs_dir):
        prober = AsyncMock(return_value=None)
        with patch("docsync.commands.validate.UrlProber") as prober_cls:
            prober_cls.return_value.__aenter__.return_value = prober
            result = runner.invoke(cli, ["validate", "reference", "-d", str(docs_dir)])
        assert result.exit_code == 0
        prober.assert_awaited_once_with("https://example.com/api")

    def test_unknown_validation_is_rejected(self, runner, docs_dir):
        result = runner.invoke(cli, ["validate", "guides", "-d", str(docs_dir), "--validations", "spelling"])
        assert result.exit_code == 2
        assert "spelling" in result.output

    def test_missing_config_file_is_a_clean_error(self, runner, docs_dir, tmp_path):
        result = runner.invoke(
            cli, ["-c", str(tmp_path / "absent.yml"), "validate", "-d", str(docs_dir)]
        )
        assert result.exit_code == 1
        assert "Cannot read config file" in result.output

    def test_no_matching_pages(self, runner, docs_dir):
        result = runner.invoke(cli, ["validate", "changelog", "-d", str(docs_dir)])
        assert result.exit_code == 0
        assert "No files found to validate." in result.output


class TestMarkdownizeCommand:
    def test_rewrites_changed_pages(self, runner, docs_dir):
        page_file = docs_dir / "guides" / "widgets.md"
        page_file.write_text(_CALLOUT_PAGE, encoding="utf-8")

        result = runner.invoke(cli, ["markdownize", "guides", "-d", str(docs_dir)])

        assert result.exit_code == 0
        assert "Writing updated Markdown" in result.output
        assert page_file.read_text(encoding="utf-8") == "---\ntitle: Widgets\n---\n> 📘 Note\n>\n> Read this.\n"

    def test_dry_run_does_not_write(self, runner, docs_dir):
        page_file = docs_dir / "guides" / "widgets.md"
        page_file.write_text(_CALLOUT_PAGE, encoding="utf-8")

        result = runner.invoke(cli, ["markdownize", "guides", "-d", str(docs_dir), "--dry-run"])

        assert result.exit_code == 0
        assert "DRY RUN" in result.output
        assert page_file.read_text(encoding="utf-8") == _CALLOUT_PAGE

    def test_disabled_widget_is_not_converted(self, runner, docs_dir):
        page_file = docs_dir / "guides" / "widgets.md"
        page_file.write_text(_CALLOUT_PAGE, encoding="utf-8")

        result = runner.invoke(cli, ["markdownize", "guides", "-d", str(docs_dir), "-w", "code,image"])

        assert result.exit_code == 0
        assert page_file.read_text(encoding="utf-8") == _CALLOUT_PAGE

    def test_unknown_widget_is_rejected(self, runner, docs_dir):
        result = runner.invoke(cli, ["markdownize", "guides", "-d", str(docs_dir), "-w", "video"])
        assert result.exit_code == 2


class TestPushCommand:
    def test_requires_api_key(self, runner, docs_dir, monkeypatch):
        monkeypatch.delenv("APIKEY", raising=False)
        result = runner.invoke(cli, ["-v", "1.0", "push", "guides", "-d", str(docs_dir)])
        assert result.exit_code == 1
        assert "apikey" in result.output

    def test_pushes_selected_pages(self, runner, docs_dir):
        push = AsyncMock(side_effect=["pushed", "unchanged", "pushed"])
        with patch("docsync.commands.push.ReadmeClient", MagicMock()), patch(
            "docsync.commands.push.push_page", push
        ):
            result = runner.invoke(
                cli, ["-k", "key", "-v", "1.0", "push", "guides", "-d", str(docs_dir), "--dry-run"]
            )

        assert result.exit_code == 0
        assert [call.args[1].slug for call in push.await_args_list] == ["a", "b", "b-child"]
        assert all(call.kwargs["dry_run"] for call in push.await_args_list)
        assert "Pushed contents of [guides/a] to readme.io" in result.output
        assert "Contents of page [b] was not pushed because contents are the same." in result.output

    def test_failed_push_sets_exit_code(self, runner, docs_dir):
        with patch("docsync.commands.push.ReadmeClient", MagicMock()), patch(
            "docsync.commands.push.push_page", AsyncMock(return_value="conflict")
        ):
            result = runner.invoke(
                cli, ["-k", "key", "-v", "1.0", "push", "-d", str(docs_dir), "-f", "guides/a.md"]
            )
        assert result.exit_code == 1
        assert "changed on readme.io" in result.output


class TestFetchCommand:
    def test_aborts_when_staged_files_would_be_overwritten(self, runner, docs_dir):
        fetch = AsyncMock(return_value=[])
        staged = {(docs_dir / "guides" / "a.md").resolve()}
        with patch("docsync.commands.fetch.staged_files", return_value=staged), patch(
            "docsync.commands.fetch.fetch_categories", fetch
        ), patch("docsync.commands.fetch.ReadmeClient", MagicMock()):
            result = runner.invoke(
                cli, ["-k", "key", "-v", "1.0", "fetch", "guides", "-d", str(docs_dir)], input="n\n"
            )
        assert result.exit_code == 0
        assert "a.md" in result.output
        fetch.assert_not_awaited()

    def test_fetches_requested_categories(self, runner, docs_dir):
        fetch = AsyncMock(return_value=[docs_dir / "guides" / "a.md"])
        with patch("docsync.commands.fetch.fetch_categories", fetch), patch(
            "docsync.commands.fetch.ReadmeClient", MagicMock()
        ):
            result = runner.invoke(
                cli, ["-k", "key", "-v", "1.0", "fetch", "guides,reference", "-d", str(docs_dir), "--yes"]
            )
        assert result.exit_code == 0
        assert fetch.await_args.args[1] == ["guides", "reference"]
        assert "Fetched 1 docs" in result.output
