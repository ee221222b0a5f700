"""Tests for FailoverProvider."""

import pytest

from framework_eval.core.errors import InvalidResponseError, ProviderUnavailableError
from framework_eval.core.providers import EvaluationMeta, EvaluationPrompt, FailoverProvider

PROMPT = EvaluationPrompt(system="", preamble="", content="", instructions="")
META = EvaluationMeta(analysis_id="a1", framework_name="Mini", category_key="functional")


class TestFailoverProvider:
    def test_requires_at_least_one_provider(self):
        with pytest.raises(ValueError):
            FailoverProvider([])

    def test_name_joins_chain(self, stub_provider_cls):
        chain = FailoverProvider([stub_provider_cls(name="gemini"), stub_provider_cls(name="claude")])
        assert chain.get_provider_name() == "gemini+claude"

    @pytest.mark.asyncio
    async def test_primary_success_skips_fallback(self, stub_provider_cls):
        primary = stub_provider_cls({"functional": {"categoryScore": 0.4}}, name="gemini")
        fallback = stub_provider_cls(name="claude")

        result = await FailoverProvider([primary, fallback]).evaluate(PROMPT, META)

        assert result == {"categoryScore": 0.4}
        assert fallback.calls == []

    @pytest.mark.asyncio
    async def test_falls_back_on_provider_error(self, stub_provider_cls):
        primary = stub_provider_cls({"functional": InvalidResponseError("prose")}, name="gemini")
        fallback = stub_provider_cls({"functional": {"categoryScore": 0.8}}, name="claude")

        result = await FailoverProvider([primary, fallback]).evaluate(PROMPT, META)

        assert result == {"categoryScore": 0.8}
        assert len(primary.calls) == 1
        assert len(fallback.calls) == 1

    @pytest.mark.asyncio
    async def test_last_error_raised_when_all_fail(self, stub_provider_cls):
        primary = stub_provider_cls({"functional": ProviderUnavailableError("first")})
        fallback = stub_provider_cls({"functional": ProviderUnavailableError("second")})

        with pytest.raises(ProviderUnavailableError, match="second"):
            await FailoverProvider([primary, fallback]).evaluate(PROMPT, META)

    @pytest.mark.asyncio
    async def test_non_provider_errors_propagate(self, stub_provider_cls):
        primary = stub_provider_cls({"functional": KeyError("bug")})
        fallback = stub_provider_cls()

        with pytest.raises(KeyError):
            await FailoverProvider([primary, fallback]).evaluate(PROMPT, META)

        assert fallback.calls == []
