"""End-to-end tests for the pipeline entry points."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from framework_eval.config.domains import default_gemini_settings
from framework_eval.core.errors import FrameworkInvalidError
from framework_eval.core.evaluation import (
    AnalysisReport,
    EvaluationPipeline,
    ProgressStreamer,
    run_pipeline,
)
from framework_eval.core.providers import create_rate_limited


def _gemini_response(payload):
    response = MagicMock()
    response.status_code = 200
    response.headers = {}
    response.json.return_value = {
        "candidates": [{"content": {"parts": [{"text": json.dumps(payload)}]}}]
    }
    return response


def _mock_client(post):
    mock_client = AsyncMock()
    mock_client.post = post
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    return mock_client


class TestEvaluationPipeline:
    @pytest.mark.asyncio
    async def test_timeout_on_first_category(self, value_framework, page_content):
        """First category times out, second succeeds: partial report, overall 0.3."""
        settings = default_gemini_settings()
        settings.api_key = "test-key"
        provider = create_rate_limited(settings)

        emotional = _gemini_response(
            {
                "categoryScore": 0.9,
                "elements": {
                    "reduces_anxiety": {
                        "score": 0.9,
                        "evidence": "No-risk trial",
                        "recommendation": "Add testimonials",
                    }
                },
            }
        )
        post = AsyncMock(side_effect=[httpx.ReadTimeout("timed out"), emotional])

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value = _mock_client(post)
            report = await EvaluationPipeline(provider).run(value_framework, page_content)

        assert post.await_count == 2
        assert len(report.errors) == 1
        assert report.errors[0].startswith("Functional:")
        assert "timed out" in report.errors[0]
        functional = report.categories["functional"]
        assert functional.elements["saves_time"].score == 0
        assert functional.elements["saves_time"].evidence == "Analysis failed"
        assert report.categories["emotional"].elements["reduces_anxiety"].score == 0.9
        assert report.overall_score == pytest.approx(0.3)
        assert report.chunks_completed == 1
        assert report.chunks_total == 2

    @pytest.mark.asyncio
    async def test_run_raises_for_invalid_framework(self, stub_provider_cls, page_content):
        pipeline = EvaluationPipeline(stub_provider_cls())

        with pytest.raises(FrameworkInvalidError):
            await pipeline.run({"name": "", "categories": []}, page_content)

    @pytest.mark.asyncio
    async def test_run_with_builtin_name_and_mapping_content(self, stub_provider_cls):
        provider = stub_provider_cls()
        content = {"url": "https://example.com", "seo": {"metaDescription": "Hi"}, "cleanText": "Body"}

        report = await EvaluationPipeline(provider).run("brand-archetypes", content)

        assert report.framework == "Jambojon Brand Archetypes"
        assert report.url == "https://example.com"
        assert report.total_elements == 12
        assert len(provider.calls) == 4
        assert "Meta Description: Hi" in provider.prompts[0].content

    @pytest.mark.asyncio
    async def test_analysis_id_defaults_to_ulid(self, stub_provider_cls, value_framework):
        report = await EvaluationPipeline(stub_provider_cls()).run(value_framework, "body")

        assert len(report.analysis_id) == 26

    @pytest.mark.asyncio
    async def test_url_override(self, stub_provider_cls, value_framework, page_content):
        report = await EvaluationPipeline(stub_provider_cls()).run(
            value_framework, page_content, url="https://override.example"
        )

        assert report.url == "https://override.example"


class TestRunPipeline:
    @pytest.mark.asyncio
    async def test_buffered_returns_report(self, stub_provider_cls, value_framework, page_content):
        result = await run_pipeline(
            value_framework, page_content, stub_provider_cls(), analysis_id="fixed"
        )

        assert isinstance(result, AnalysisReport)
        assert result.analysis_id == "fixed"

    @pytest.mark.asyncio
    async def test_stream_returns_unstarted_streamer(
        self, stub_provider_cls, value_framework, page_content
    ):
        provider = stub_provider_cls()

        result = await run_pipeline(value_framework, page_content, provider, stream=True)

        assert isinstance(result, ProgressStreamer)
        assert provider.calls == []
        events = [event async for event in result]
        assert events[-1].type == "result"
