"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from ai_form_assist import __version__, cli

FORM = """
<html><head><title>Apply</title></head><body>
<form>
  <input type="email" id="email" name="email">
  <input type="checkbox" id="terms">
</form>
</body></html>
"""


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    return CliRunner()


@pytest.fixture
def form_file(tmp_path):
    path = tmp_path / "form.html"
    path.write_text(FORM, encoding="utf-8")
    return path


class TestCli:
    """Test cases for the CLI commands."""

    def test_targets_lists_inferred_fields(self, runner, form_file):
        result = runner.invoke(cli.app, ["targets", str(form_file)])

        assert result.exit_code == 0
        assert "email" in result.output
        assert "checkbox" in result.output

    def test_fill_html_writes_filled_document(self, runner, form_file, tmp_path):
        """Test an offline fill from a fixed generation result."""
        data_file = tmp_path / "data.json"
        data_file.write_text(json.dumps({"email": "a@b.com", "terms": "yes"}), encoding="utf-8")
        output = tmp_path / "filled.html"

        result = runner.invoke(
            cli.app,
            ["fill-html", str(form_file), "--data", str(data_file), "--output", str(output)],
        )

        assert result.exit_code == 0
        filled = output.read_text(encoding="utf-8")
        assert 'value="a@b.com"' in filled
        assert "checked" in filled
        assert "ai-indicator" not in filled

    def test_fill_html_rejects_invalid_config(self, runner, form_file, tmp_path):
        data_file = tmp_path / "data.json"
        data_file.write_text("{}", encoding="utf-8")
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"targets": [{"name": "email"}]}), encoding="utf-8")

        result = runner.invoke(
            cli.app,
            ["fill-html", str(form_file), "--data", str(data_file), "--config", str(config_file)],
        )

        assert result.exit_code != 0

    def test_version(self, runner):
        result = runner.invoke(cli.app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_log_level_option_is_forwarded(self, monkeypatch, form_file, tmp_path):
        levels = []
        monkeypatch.setattr(cli, "configure_logging", levels.append)
        data_file = tmp_path / "data.json"
        data_file.write_text("{}", encoding="utf-8")

        result = CliRunner().invoke(
            cli.app,
            ["fill-html", str(form_file), "--data", str(data_file), "--log-level", "debug"],
        )

        assert result.exit_code == 0
        assert levels == ["debug"]

    def test_unknown_log_level_rejected(self, form_file, tmp_path):
        data_file = tmp_path / "data.json"
        data_file.write_text("{}", encoding="utf-8")

        result = CliRunner().invoke(
            cli.app,
            ["fill-html", str(form_file), "--data", str(data_file), "--log-level", "chatty"],
        )

        assert result.exit_code != 0
