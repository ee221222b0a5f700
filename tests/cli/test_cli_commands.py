"""Tests for the framework-eval CLI."""

import json
from unittest.mock import patch

import pytest

from framework_eval.cli import cli
from framework_eval.core.errors import ProviderUnavailableError


def _envelope(result):
    for line in result.output.splitlines():
        if line.startswith('{"success"'):
            return json.loads(line)
    raise AssertionError(f"no envelope in output: {result.output!r}")


def _events(result):
    return [json.loads(line) for line in result.output.splitlines() if line.startswith('{"type"')]


@pytest.fixture
def patched_provider(stub_provider_cls):
    provider = stub_provider_cls(
        {"functional": {"elements": {"saves_time": {"score": 0.9, "evidence": "fast"}}}}
    )
    with patch("framework_eval.cli.commands.analyze.build_provider", return_value=provider):
        yield provider


class TestFrameworksCommands:
    def test_list(self, cli_runner, isolated_env):
        result = cli_runner.invoke(cli, ["--log-level", "ERROR", "frameworks", "list"])

        assert result.exit_code == 0
        frameworks = _envelope(result)["data"]["frameworks"]
        assert [f["key"] for f in frameworks] == [
            "b2b-elements",
            "b2c-elements",
            "clifton-strengths",
            "brand-archetypes",
        ]
        assert frameworks[0]["elements"] == 42

    def test_show(self, cli_runner, isolated_env):
        result = cli_runner.invoke(cli, ["--log-level", "ERROR", "frameworks", "show", "brand-archetypes"])

        assert result.exit_code == 0
        data = _envelope(result)["data"]
        assert data["elementCount"] == 12
        assert len(data["categories"]) == 4
        assert data["scoringInstructions"]

    def test_show_unknown(self, cli_runner, isolated_env):
        result = cli_runner.invoke(cli, ["--log-level", "ERROR", "frameworks", "show", "nope"])

        assert result.exit_code == 1
        envelope = _envelope(result)
        assert envelope["success"] is False
        assert envelope["data"]["error_code"] == "FRAMEWORK_INVALID"


class TestAnalyzeCommand:
    def test_buffered_report(self, cli_runner, isolated_env, content_file, patched_provider):
        result = cli_runner.invoke(
            cli,
            [
                "--log-level",
                "ERROR",
                "analyze",
                "--framework",
                "b2c-elements",
                "--content",
                str(content_file),
                "--analysis-id",
                "cli-run",
            ],
        )

        assert result.exit_code == 0, result.output
        report = _envelope(result)["data"]
        assert report["analysisId"] == "cli-run"
        assert report["framework"] == "B2C Elements of Value"
        assert report["url"] == "https://example.com"
        assert report["totalElements"] == 30
        assert report["categories"]["functional"]["elements"]["saves_time"]["score"] == 0.9
        assert len(patched_provider.calls) == 4

    def test_stream_writes_ndjson(self, cli_runner, isolated_env, content_file, patched_provider):
        result = cli_runner.invoke(
            cli,
            [
                "--log-level",
                "ERROR",
                "analyze",
                "-f",
                "b2c-elements",
                "-c",
                str(content_file),
                "--stream",
            ],
        )

        assert result.exit_code == 0, result.output
        events = _events(result)
        assert len(events) == 4 * 2 + 1
        assert events[-1]["type"] == "result"
        assert events[-1]["percent"] == 100
        assert [e["percent"] for e in events] == sorted(e["percent"] for e in events)

    def test_content_from_stdin(self, cli_runner, isolated_env, patched_provider):
        result = cli_runner.invoke(
            cli,
            [
                "--log-level",
                "ERROR",
                "analyze",
                "-f",
                "brand-archetypes",
                "-c",
                "-",
                "--url",
                "https://stdin.example",
            ],
            input="Plain body text from a pipe.",
        )

        assert result.exit_code == 0, result.output
        assert _envelope(result)["data"]["url"] == "https://stdin.example"
        assert "Plain body text" in patched_provider.prompts[0].content

    def test_store_dir_persists_report(self, cli_runner, isolated_env, content_file, patched_provider):
        store_dir = isolated_env / "reports"

        result = cli_runner.invoke(
            cli,
            [
                "--log-level",
                "ERROR",
                "analyze",
                "-f",
                "b2c-elements",
                "-c",
                str(content_file),
                "--analysis-id",
                "stored",
                "--store-dir",
                str(store_dir),
            ],
        )

        assert result.exit_code == 0, result.output
        saved = json.loads((store_dir / "stored-b2c-elements-of-value.json").read_text())
        assert saved == _envelope(result)["data"]

    def test_progress_bar_keeps_stdout_clean(
        self, cli_runner, isolated_env, content_file, patched_provider
    ):
        result = cli_runner.invoke(
            cli,
            [
                "--log-level",
                "ERROR",
                "analyze",
                "-f",
                "b2c-elements",
                "-c",
                str(content_file),
                "--progress",
            ],
        )

        assert result.exit_code == 0, result.output
        assert _envelope(result)["success"] is True

    def test_unknown_framework(self, cli_runner, isolated_env, content_file, patched_provider):
        result = cli_runner.invoke(
            cli,
            ["--log-level", "ERROR", "analyze", "-f", "nope", "-c", str(content_file)],
        )

        assert result.exit_code == 1
        assert _envelope(result)["data"]["error_code"] == "FRAMEWORK_INVALID"
        assert patched_provider.calls == []

    def test_missing_content_file(self, cli_runner, isolated_env):
        result = cli_runner.invoke(
            cli,
            ["--log-level", "ERROR", "analyze", "-f", "b2c-elements", "-c", "missing.json"],
        )

        assert result.exit_code == 1
        assert _envelope(result)["data"]["error_code"] == "VALIDATION_ERROR"

    def test_no_provider_configured(self, cli_runner, isolated_env, content_file):
        result = cli_runner.invoke(
            cli,
            ["--log-level", "ERROR", "analyze", "-f", "b2c-elements", "-c", str(content_file)],
        )

        assert result.exit_code == 1
        envelope = _envelope(result)
        assert envelope["data"]["error_code"] == "UNAVAILABLE"
        assert "GEMINI_API_KEY" in envelope["error"]

    def test_provider_error_is_redacted(self, cli_runner, isolated_env, content_file):
        leaked = "AIza" + "z" * 35
        with patch(
            "framework_eval.cli.commands.analyze.build_provider",
            side_effect=ProviderUnavailableError(f"bad key {leaked}"),
        ):
            result = cli_runner.invoke(
                cli,
                ["--log-level", "ERROR", "analyze", "-f", "b2c-elements", "-c", str(content_file)],
            )

        assert result.exit_code == 1
        assert leaked not in result.output


class TestGroupOptions:
    def test_version(self, cli_runner, isolated_env):
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "framework-eval" in result.output

    def test_config_option_is_applied(self, cli_runner, isolated_env):
        from framework_eval.config import get_config

        config_path = isolated_env / "cli.toml"
        config_path.write_text("[pipeline]\ncontent_excerpt_chars = 321\n")

        result = cli_runner.invoke(
            cli, ["--config", str(config_path), "--log-level", "ERROR", "frameworks", "list"]
        )

        assert result.exit_code == 0
        assert get_config().pipeline.content_excerpt_chars == 321
