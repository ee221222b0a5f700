"""Per-chunk execution with failure isolation.

``ChunkExecutor.execute`` never raises for ordinary failures: provider
errors, unparseable answers and unexpected exceptions all turn into a
degraded ChunkResult whose ``error`` carries the redacted message. Task
cancellation still propagates.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from framework_eval.core.content import ContentSummary
from framework_eval.core.errors import ProviderError
from framework_eval.core.evaluation.models import Chunk, ChunkResult
from framework_eval.core.evaluation.normalization import (
    degraded_chunk_result,
    normalize_chunk_result,
)
from framework_eval.core.evaluation.prompts import (
    DEFAULT_CONTENT_EXCERPT_CHARS,
    build_chunk_prompt,
    build_content_summary,
)
from framework_eval.core.observability import audit_log, redact_secrets
from framework_eval.core.providers.base import EvaluationMeta, EvaluationProvider

logger = logging.getLogger(__name__)


class ChunkExecutor:
    """Runs one chunk through prompt construction, the provider and normalization.

    Args:
        provider: Backend (usually rate-limited, possibly failover)
        content_excerpt_chars: Body-text excerpt length for prompts
        scoring_instructions: Default scoring bands override for every chunk
    """

    def __init__(
        self,
        provider: EvaluationProvider,
        *,
        content_excerpt_chars: int = DEFAULT_CONTENT_EXCERPT_CHARS,
        scoring_instructions: Optional[str] = None,
    ):
        self._provider = provider
        self._content_excerpt_chars = content_excerpt_chars
        self._scoring_instructions = scoring_instructions

    @property
    def provider(self) -> EvaluationProvider:
        return self._provider

    async def execute(
        self,
        chunk: Chunk,
        content: ContentSummary,
        framework_name: str,
        *,
        analysis_id: str = "",
        scoring_instructions: Optional[str] = None,
    ) -> ChunkResult:
        """Score one chunk.

        Args:
            chunk: Category to score
            content: Page content
            framework_name: Framework display name for the prompt
            analysis_id: Run identifier for logs
            scoring_instructions: Per-call override of the scoring bands

        Returns:
            Normalized ChunkResult, or a degraded one with ``error`` set
        """
        meta = EvaluationMeta(
            analysis_id=analysis_id,
            framework_name=framework_name,
            category_key=chunk.category_key,
        )
        summary = build_content_summary(content, self._content_excerpt_chars)
        prompt = build_chunk_prompt(
            chunk,
            framework_name,
            summary,
            scoring_instructions or self._scoring_instructions,
        )

        start = time.perf_counter()
        try:
            raw = await self._provider.evaluate(prompt, meta)
            result = normalize_chunk_result(raw, chunk.elements)
        except ProviderError as e:
            message = redact_secrets(str(e)) or type(e).__name__
            return self._degrade(chunk, meta, message, start)
        except Exception as e:
            logger.exception("Unexpected error evaluating %s", meta.label)
            message = redact_secrets(str(e)) or "Chunk analysis failed"
            return self._degrade(chunk, meta, message, start)

        duration_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "Chunk %s scored %.3f in %.0fms",
            meta.label,
            result.category_score,
            duration_ms,
        )
        audit_log(
            "chunk_completed",
            analysis_id=analysis_id,
            chunk=meta.label,
            duration_ms=round(duration_ms),
        )
        return result

    def _degrade(
        self,
        chunk: Chunk,
        meta: EvaluationMeta,
        message: str,
        start: float,
    ) -> ChunkResult:
        logger.warning("[%s] Chunk \"%s\" failed: %s", meta.framework_name, chunk.category_name, message)
        audit_log(
            "chunk_failed",
            analysis_id=meta.analysis_id,
            chunk=meta.label,
            error=message,
            duration_ms=round((time.perf_counter() - start) * 1000),
        )
        return degraded_chunk_result(chunk, message)
