"""Incremental progress stream for one evaluation run.

``ProgressStreamer`` is a single-use async iterator. It resolves the
framework, plans chunks, runs them one at a time through the executor and
yields a ``started`` and a ``completed``/``failed`` event per chunk, then
merges, persists and yields exactly one terminal ``result`` event. A
framework that fails validation yields one terminal ``error`` event instead.

Percentages count the merge step as one extra unit of work, so only the
terminal result event ever reports 100.

Consumers stop a run with ``aclose()`` or ``cancel()``; both are observed at
chunk boundaries. After cancellation no further provider call is issued and
no terminal event is emitted.

Example:
    streamer = pipeline.stream("b2b-elements", content)
    async for event in streamer:
        sys.stdout.write(encode_event(event))
"""

from __future__ import annotations

import asyncio
import json
import logging
from enum import Enum
from typing import Any, AsyncGenerator, List, Mapping, Optional, Protocol, Tuple, Union

from framework_eval.core.content import ContentSummary
from framework_eval.core.errors import FrameworkInvalidError
from framework_eval.core.evaluation.executor import ChunkExecutor
from framework_eval.core.evaluation.merger import merge_results
from framework_eval.core.evaluation.models import (
    AnalysisReport,
    Chunk,
    ChunkResult,
    ChunkStatus,
    ErrorEvent,
    ProgressEvent,
    ProgressUpdate,
    ResultEvent,
)
from framework_eval.core.evaluation.planner import plan_chunks
from framework_eval.core.frameworks import FrameworkInput, resolve_framework
from framework_eval.core.observability import audit_log, redact_secrets

logger = logging.getLogger(__name__)

STREAM_MEDIA_TYPE = "application/x-ndjson"


class ReportStore(Protocol):
    """Anything that can persist a finished report."""

    def store(self, analysis_id: str, framework_name: str, report: AnalysisReport) -> Any: ...


class StreamState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


def compute_percent(done: int, total: int) -> int:
    """Percent complete after *done* of *total* chunks (merge is the last unit)."""
    return 100 * done // (total + 1)


def encode_event(event: ProgressEvent) -> str:
    """Render one event as an NDJSON line."""
    return json.dumps(event.to_dict()) + "\n"


class ProgressStreamer:
    """Single-use async iterator over one run's progress events."""

    def __init__(
        self,
        framework: FrameworkInput,
        content: Union[ContentSummary, Mapping[str, Any], str, None],
        executor: ChunkExecutor,
        *,
        analysis_id: str,
        url: Optional[str] = None,
        store: Optional[ReportStore] = None,
    ):
        self._framework_input = framework
        self._content = ContentSummary.coerce(content)
        self._executor = executor
        self._analysis_id = analysis_id
        self._url = url if url is not None else self._content.url
        self._store = store

        self._state = StreamState.IDLE
        self._iterator: Optional[AsyncGenerator[ProgressEvent, None]] = None
        self._used = False
        self._cancel_requested = False
        self._stepping = False
        self._report: Optional[AnalysisReport] = None
        self._error: Optional[Exception] = None

    # ------------------------------------------------------------------
    # Public state
    # ------------------------------------------------------------------

    @property
    def analysis_id(self) -> str:
        return self._analysis_id

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def report(self) -> Optional[AnalysisReport]:
        """Final report once the stream has completed."""
        return self._report

    @property
    def error(self) -> Optional[Exception]:
        """The exception behind a terminal error event, if any."""
        return self._error

    def cancel(self) -> None:
        """Request a stop at the next chunk boundary."""
        self._cancel_requested = True

    # ------------------------------------------------------------------
    # Async iterator protocol
    # ------------------------------------------------------------------

    def __aiter__(self) -> "ProgressStreamer":
        if self._used:
            raise RuntimeError("ProgressStreamer can only be iterated once")
        self._used = True
        self._iterator = self._run()
        return self

    async def __anext__(self) -> ProgressEvent:
        if self._iterator is None:
            if self._used:
                raise StopAsyncIteration
            self.__aiter__()
        assert self._iterator is not None
        self._stepping = True
        try:
            return await self._iterator.__anext__()
        finally:
            self._stepping = False

    async def aclose(self) -> None:
        """Stop the run; no further provider calls or terminal event.

        While another task is mid-step only the cancel flag is set; that
        task's iteration ends at the next chunk boundary.
        """
        self.cancel()
        if self._iterator is not None:
            if not self._stepping:
                await self._iterator.aclose()
            return
        if not self._used:
            self._used = True
            self._state = StreamState.CANCELLED

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def _run(self) -> AsyncGenerator[ProgressEvent, None]:
        self._state = StreamState.RUNNING
        try:
            try:
                framework = resolve_framework(self._framework_input)
            except FrameworkInvalidError as e:
                logger.warning("Framework rejected for analysis %s: %s", self._analysis_id, e)
                self._error = e
                self._state = StreamState.FAILED
                yield ErrorEvent(error=redact_secrets(str(e)))
                return

            chunks = plan_chunks(framework)
            total = len(chunks)
            results: List[Tuple[Chunk, ChunkResult]] = []
            errors: List[str] = []

            audit_log(
                "analysis_started",
                analysis_id=self._analysis_id,
                framework=framework.name,
                chunks=total,
            )

            for index, chunk in enumerate(chunks):
                if self._cancel_requested:
                    return
                yield ProgressUpdate(
                    percent=compute_percent(index, total),
                    category_name=chunk.category_name,
                    category_key=chunk.category_key,
                    status=ChunkStatus.STARTED,
                    chunks_completed=index,
                    chunks_total=total,
                )
                if self._cancel_requested:
                    return

                result = await self._executor.execute(
                    chunk,
                    self._content,
                    framework.name,
                    analysis_id=self._analysis_id,
                    scoring_instructions=framework.scoring_instructions,
                )
                if self._cancel_requested:
                    return
                results.append((chunk, result))
                if result.failed:
                    errors.append(f"{chunk.category_name}: {result.error}")

                yield ProgressUpdate(
                    percent=compute_percent(index + 1, total),
                    category_name=chunk.category_name,
                    category_key=chunk.category_key,
                    status=ChunkStatus.FAILED if result.failed else ChunkStatus.COMPLETED,
                    chunks_completed=index + 1,
                    chunks_total=total,
                )

            if self._cancel_requested:
                return

            report = merge_results(
                results,
                errors,
                framework_name=framework.name,
                url=self._url,
                analysis_id=self._analysis_id,
            )
            await self._persist(report, framework.name)
            self._report = report
            self._state = StreamState.COMPLETED

            audit_log(
                "analysis_completed",
                analysis_id=self._analysis_id,
                framework=framework.name,
                overall_score=round(report.overall_score, 3),
                chunks_completed=report.chunks_completed,
                chunks_total=report.chunks_total,
            )
            yield ResultEvent(report=report)
        except Exception as e:
            logger.exception("Analysis %s failed", self._analysis_id)
            self._error = e
            self._state = StreamState.FAILED
            yield ErrorEvent(error=redact_secrets(str(e)) or "Analysis failed")
        finally:
            if self._state == StreamState.RUNNING:
                self._state = StreamState.CANCELLED
                logger.info("Analysis %s cancelled by consumer", self._analysis_id)
                audit_log("analysis_cancelled", analysis_id=self._analysis_id)

    async def _persist(self, report: AnalysisReport, framework_name: str) -> None:
        if self._store is None:
            return
        try:
            await asyncio.to_thread(self._store.store, self._analysis_id, framework_name, report)
        except Exception as e:
            logger.warning("Failed to persist analysis %s: %s", self._analysis_id, e)
            audit_log(
                "storage_failed",
                analysis_id=self._analysis_id,
                error=str(e),
            )
