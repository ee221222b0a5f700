"""Core evaluation operations for framework-eval."""

from framework_eval.core.content import ContentSummary
from framework_eval.core.evaluation import (
    AnalysisReport,
    EvaluationPipeline,
    ProgressStreamer,
    encode_event,
    run_pipeline,
)
from framework_eval.core.frameworks import (
    FrameworkDefinition,
    get_framework,
    list_frameworks,
    resolve_framework,
)
from framework_eval.core.providers import build_provider
from framework_eval.core.storage import JsonFileReportStore

__all__ = [
    "AnalysisReport",
    "ContentSummary",
    "EvaluationPipeline",
    "FrameworkDefinition",
    "JsonFileReportStore",
    "ProgressStreamer",
    "build_provider",
    "encode_event",
    "get_framework",
    "list_frameworks",
    "resolve_framework",
    "run_pipeline",
]
