"""Shared fixtures for CLI tests."""

import json

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """No credentials and no config files from the developer machine."""
    for name in (
        "FRAMEWORK_EVAL_CONFIG_FILE",
        "FRAMEWORK_EVAL_STORAGE_DIR",
        "FRAMEWORK_EVAL_PROVIDER",
        "FRAMEWORK_EVAL_FALLBACK_PROVIDERS",
        "GEMINI_API_KEY",
        "ANTHROPIC_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def content_file(tmp_path):
    path = tmp_path / "page.json"
    path.write_text(
        json.dumps(
            {
                "url": "https://example.com",
                "title": "Example",
                "cleanText": "We save teams hours every week.",
                "seo": {"metaDescription": "Save time", "extractedKeywords": ["time"]},
            }
        )
    )
    return path
