"""Pipeline entry points.

``EvaluationPipeline`` binds a provider (and optionally a report store) and
hands out per-run ``ProgressStreamer`` objects. ``run`` is the buffered form:
it drains a stream and returns the final report.

Example:
    provider = build_provider(get_config())
    pipeline = EvaluationPipeline(provider)
    report = await pipeline.run("b2b-elements", {"url": url, "cleanText": text})
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from ulid import ULID

from framework_eval.core.content import ContentSummary
from framework_eval.core.evaluation.executor import ChunkExecutor
from framework_eval.core.evaluation.models import AnalysisReport
from framework_eval.core.evaluation.prompts import DEFAULT_CONTENT_EXCERPT_CHARS
from framework_eval.core.evaluation.streaming import ProgressStreamer, ReportStore
from framework_eval.core.frameworks import FrameworkInput
from framework_eval.core.providers.base import EvaluationProvider

logger = logging.getLogger(__name__)

ContentInput = Union[ContentSummary, Mapping[str, Any], str, None]


def new_analysis_id() -> str:
    """Generate a sortable analysis identifier."""
    return str(ULID())


class EvaluationPipeline:
    """Chunked evaluation bound to one provider.

    Share one pipeline (or at least one provider object) between concurrent
    runs so they share the provider's rate-limit window.
    """

    def __init__(
        self,
        provider: EvaluationProvider,
        *,
        store: Optional[ReportStore] = None,
        content_excerpt_chars: int = DEFAULT_CONTENT_EXCERPT_CHARS,
    ):
        self._provider = provider
        self._store = store
        self._executor = ChunkExecutor(provider, content_excerpt_chars=content_excerpt_chars)

    @property
    def provider(self) -> EvaluationProvider:
        return self._provider

    def stream(
        self,
        framework: FrameworkInput,
        content: ContentInput,
        *,
        analysis_id: Optional[str] = None,
        url: Optional[str] = None,
    ) -> ProgressStreamer:
        """Create a progress stream for one run.

        Nothing runs until the stream is iterated.
        """
        return ProgressStreamer(
            framework,
            content,
            self._executor,
            analysis_id=analysis_id or new_analysis_id(),
            url=url,
            store=self._store,
        )

    async def run(
        self,
        framework: FrameworkInput,
        content: ContentInput,
        *,
        analysis_id: Optional[str] = None,
        url: Optional[str] = None,
    ) -> AnalysisReport:
        """Run to completion and return the merged report.

        Raises:
            FrameworkInvalidError: If the framework fails validation
        """
        streamer = self.stream(framework, content, analysis_id=analysis_id, url=url)
        async for _ in streamer:
            pass

        if streamer.report is None:
            if streamer.error is not None:
                raise streamer.error
            raise RuntimeError(f"Analysis {streamer.analysis_id} ended without a report")
        return streamer.report


async def run_pipeline(
    framework: FrameworkInput,
    content: ContentInput,
    provider: EvaluationProvider,
    *,
    stream: bool = False,
    store: Optional[ReportStore] = None,
    analysis_id: Optional[str] = None,
    url: Optional[str] = None,
    content_excerpt_chars: int = DEFAULT_CONTENT_EXCERPT_CHARS,
) -> Union[AnalysisReport, ProgressStreamer]:
    """Evaluate *content* against *framework*.

    Args:
        framework: Definition, mapping, built-in name, or definition file path
        content: ContentSummary, mapping, or raw body text
        provider: Evaluation backend
        stream: Return a ProgressStreamer instead of the final report
        store: Optional report sink
        analysis_id: Run identifier (new ULID when omitted)
        url: Overrides the URL reported for the page
        content_excerpt_chars: Body-text excerpt length for prompts

    Returns:
        The AnalysisReport, or an un-iterated ProgressStreamer when *stream*
    """
    pipeline = EvaluationPipeline(
        provider,
        store=store,
        content_excerpt_chars=content_excerpt_chars,
    )
    if stream:
        return pipeline.stream(framework, content, analysis_id=analysis_id, url=url)
    return await pipeline.run(framework, content, analysis_id=analysis_id, url=url)
