"""Chunked, rate-limited, multi-category content evaluation.

Flow: plan_chunks -> ChunkExecutor.execute (per chunk, sequential) ->
merge_results, surfaced either buffered (EvaluationPipeline.run) or as a
progress stream (EvaluationPipeline.stream / ProgressStreamer).
"""

from framework_eval.core.evaluation.executor import ChunkExecutor
from framework_eval.core.evaluation.merger import merge_results
from framework_eval.core.evaluation.models import (
    AnalysisReport,
    CategoryBreakdown,
    Chunk,
    ChunkResult,
    ChunkStatus,
    ElementResult,
    ErrorEvent,
    Gap,
    ProgressEvent,
    ProgressUpdate,
    ResultEvent,
    Strength,
)
from framework_eval.core.evaluation.normalization import (
    coerce_score,
    degraded_chunk_result,
    normalize_chunk_result,
)
from framework_eval.core.evaluation.pipeline import (
    EvaluationPipeline,
    new_analysis_id,
    run_pipeline,
)
from framework_eval.core.evaluation.planner import plan_chunks
from framework_eval.core.evaluation.prompts import build_chunk_prompt, build_content_summary
from framework_eval.core.evaluation.streaming import (
    STREAM_MEDIA_TYPE,
    ProgressStreamer,
    ReportStore,
    StreamState,
    compute_percent,
    encode_event,
)

__all__ = [
    "AnalysisReport",
    "CategoryBreakdown",
    "Chunk",
    "ChunkExecutor",
    "ChunkResult",
    "ChunkStatus",
    "ElementResult",
    "ErrorEvent",
    "EvaluationPipeline",
    "Gap",
    "ProgressEvent",
    "ProgressStreamer",
    "ProgressUpdate",
    "ReportStore",
    "ResultEvent",
    "STREAM_MEDIA_TYPE",
    "Strength",
    "StreamState",
    "build_chunk_prompt",
    "build_content_summary",
    "coerce_score",
    "compute_percent",
    "degraded_chunk_result",
    "encode_event",
    "merge_results",
    "new_analysis_id",
    "normalize_chunk_result",
    "plan_chunks",
    "run_pipeline",
]
