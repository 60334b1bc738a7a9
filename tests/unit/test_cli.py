"""Unit tests for CLI commands.

Test command parameters, output formatting and the interactive command handler.
"""
import json
import os
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from newswave.cli.browse_command import handle_command
from newswave.cli.main import app
from newswave.models.view_state import Category, RenderMode
from newswave.services.news_api_service import NewsApiError
from newswave.services.view_controller import ViewStateController


@pytest.fixture
def runner(monkeypatch):
    """Create CLI test runner with a clean NEWSWAVE_ environment."""
    for key in list(os.environ):
        if key.startswith("NEWSWAVE_"):
            monkeypatch.delenv(key)
    return CliRunner()


class TestCLIMain:
    """Test main CLI application."""

    def test_main_app_help(self, runner: CliRunner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "headlines" in result.output
        assert "browse" in result.output
        assert "serve" in result.output
        assert "config" in result.output

    def test_global_options_log_level(self, runner: CliRunner):
        result = runner.invoke(app, ["--log-level", "DEBUG", "headlines", "--help"])
        assert result.exit_code == 0


class TestHeadlinesCommand:
    """Test headlines command functionality."""

    def test_renders_list(self, runner, static_service_factory, sample_articles):
        service = static_service_factory(articles=sample_articles)
        with patch("newswave.cli.headlines_command.create_news_service", return_value=service):
            result = runner.invoke(app, ["headlines", "--category", "Technology"])

        assert result.exit_code == 0
        assert "[Technology]" in result.output
        assert "1. Market Rally" in result.output
        assert service.calls == ["technology"]

    def test_search_option(self, runner, static_service_factory, sample_articles):
        service = static_service_factory(articles=sample_articles)
        with patch("newswave.cli.headlines_command.create_news_service", return_value=service):
            result = runner.invoke(app, ["headlines", "--search", "phone"])

        assert result.exit_code == 0
        assert "Market Rally" not in result.output
        assert "New Phone Launch" in result.output

    def test_json_output(self, runner, static_service_factory, sample_articles):
        service = static_service_factory(articles=sample_articles)
        with patch("newswave.cli.headlines_command.create_news_service", return_value=service):
            result = runner.invoke(app, ["headlines", "--output", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["category"] == "general"
        assert len(data["filtered_articles"]) == 3

    def test_fetch_error_exits_nonzero(self, runner, static_service_factory):
        service = static_service_factory(error=NewsApiError("API key is not set.", NewsApiError.HTTP_ERROR))
        with patch("newswave.cli.headlines_command.create_news_service", return_value=service):
            result = runner.invoke(app, ["headlines"])

        assert result.exit_code == 1
        assert "Error: API key is not set." in result.output

    def test_unknown_category(self, runner):
        result = runner.invoke(app, ["headlines", "--category", "weather"])
        assert result.exit_code == 1
        assert "Unknown category 'weather'" in result.output

    def test_direct_mode_without_key(self, runner):
        """Test direct mode reports the missing key without any request."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            result = runner.invoke(app, ["headlines", "--direct"])

        assert result.exit_code == 1
        assert "API key is missing" in result.output
        mock_get.assert_not_called()


class TestConfigCommand:
    """Test config command functionality."""

    def test_show_masks_secrets(self, runner, monkeypatch):
        monkeypatch.setenv("NEWSWAVE_API_KEY", "super-secret")
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "news.api_key = ***" in result.output
        assert "super-secret" not in result.output
        assert "[PROXY]" in result.output

    def test_show_single_key(self, runner):
        result = runner.invoke(app, ["config", "show", "news.country"])
        assert result.exit_code == 0
        assert "news.country = us" in result.output

    def test_show_unknown_key(self, runner):
        result = runner.invoke(app, ["config", "show", "nope"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_global_config_file(self, runner, tmp_path):
        config_file = tmp_path / "newswave.json"
        config_file.write_text(json.dumps({"news.country": "gb"}), encoding="utf-8")

        result = runner.invoke(app, ["--config-file", str(config_file), "config", "show", "news.country"])

        assert result.exit_code == 0
        assert "news.country = gb" in result.output


class TestServeCommand:
    """Test serve command wiring."""

    def test_uses_configured_bind_address(self, runner):
        with patch("newswave.cli.serve_command.run_server") as mock_run:
            result = runner.invoke(app, ["serve", "--port", "9001"])

        assert result.exit_code == 0
        assert "API key is not set" in result.output
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9001


class TestBrowseCommands:
    """Test the interactive command handler."""

    @pytest.fixture
    async def controller(self, static_service_factory, sample_articles):
        controller = ViewStateController(static_service_factory(articles=sample_articles))
        await controller.select_category("general")
        return controller

    async def test_open_and_back(self, controller, sample_articles):
        assert await handle_command(controller, "2") is True
        assert controller.state.selected_article == sample_articles[1]

        assert await handle_command(controller, "b") is True
        assert controller.render_mode is RenderMode.LIST

    async def test_search_and_clear(self, controller):
        await handle_command(controller, "/phone")
        assert controller.state.search_term == "phone"
        assert len(controller.filtered_articles) == 2

        await handle_command(controller, "/")
        assert controller.state.search_term == ""

    async def test_switch_category(self, controller):
        await handle_command(controller, "/phone")
        await handle_command(controller, "c sports")

        assert controller.state.category is Category.SPORTS
        assert controller.state.search_term == ""

    async def test_invalid_input_keeps_state(self, controller, capsys):
        await handle_command(controller, "99")
        await handle_command(controller, "c weather")
        await handle_command(controller, "dance")

        output = capsys.readouterr().out
        assert "No article #99" in output
        assert "Unknown category 'weather'" in output
        assert "Unknown command: dance" in output
        assert controller.state.category is Category.GENERAL

    async def test_quit(self, controller):
        assert await handle_command(controller, "q") is False
