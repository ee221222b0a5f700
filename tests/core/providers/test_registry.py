"""Tests for provider construction from configuration."""

import pytest

from framework_eval.config import EvalConfig
from framework_eval.core.errors import ProviderUnavailableError
from framework_eval.core.providers import (
    ClaudeProvider,
    FailoverProvider,
    GeminiProvider,
    RateLimitedProvider,
    build_provider,
    create_rate_limited,
)


@pytest.fixture
def no_env_keys(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


class TestBuildProvider:
    def test_no_keys_raises(self, no_env_keys):
        with pytest.raises(ProviderUnavailableError, match="No evaluation provider configured"):
            build_provider(EvalConfig())

    def test_single_configured_provider(self, no_env_keys):
        config = EvalConfig()
        config.providers.gemini.api_key = "gemini-key"

        provider = build_provider(config)

        assert isinstance(provider, RateLimitedProvider)
        assert isinstance(provider.inner, GeminiProvider)
        assert provider.limiter.max_calls == 5

    def test_failover_chain_in_configured_order(self, no_env_keys):
        config = EvalConfig()
        config.providers.primary = "claude"
        config.providers.fallbacks = ["gemini"]
        config.providers.gemini.api_key = "gemini-key"
        config.providers.claude.api_key = "claude-key"

        provider = build_provider(config.providers)

        assert isinstance(provider, FailoverProvider)
        assert provider.get_provider_name() == "claude+gemini"
        claude, gemini = provider.providers
        assert isinstance(claude.inner, ClaudeProvider)
        assert claude.limiter.max_calls == 50
        assert gemini.limiter.max_calls == 5

    def test_each_backend_gets_its_own_limiter(self, no_env_keys):
        config = EvalConfig()
        config.providers.gemini.api_key = "gemini-key"
        config.providers.claude.api_key = "claude-key"

        chain = build_provider(config)

        first, second = chain.providers
        assert first.limiter is not second.limiter

    def test_create_rate_limited_with_custom_factory(self, stub_provider_cls):
        config = EvalConfig()
        config.providers.gemini.requests_per_minute = 2
        config.providers.gemini.max_rate_limit_retries = 4

        provider = create_rate_limited(
            config.providers.gemini,
            factory=lambda settings: stub_provider_cls(name=settings.name),
        )

        assert provider.get_provider_name() == "gemini"
        assert provider.limiter.max_calls == 2
