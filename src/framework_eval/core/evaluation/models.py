"""Data models for chunked evaluation.

Report and event types are plain dataclasses; ``to_dict()`` produces the
camelCase wire shape consumed by clients and written to storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

NOT_EVALUATED_EVIDENCE = "Not evaluated"
NO_RECOMMENDATION = "No recommendation"
FAILED_EVIDENCE = "Analysis failed"
ANALYSIS_METHOD = "chunked"


# ---------------------------------------------------------------------------
# Chunk-level models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Chunk:
    """One category's worth of elements, scored in a single backend call."""

    category_name: str
    category_key: str
    elements: Tuple[str, ...]


@dataclass(frozen=True)
class ElementResult:
    """Score, evidence and recommendation for one element.

    ``score`` is always a finite float in ``[0, 1]``.
    """

    score: float = 0.0
    evidence: str = NOT_EVALUATED_EVIDENCE
    recommendation: str = NO_RECOMMENDATION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "evidence": self.evidence,
            "recommendation": self.recommendation,
        }


@dataclass
class ChunkResult:
    """Normalized outcome of one chunk.

    Attributes:
        category_score: Backend-reported category score or the element mean
        elements: Element name -> result; keys equal the chunk's element set
        error: Failure message for degraded results, else None
    """

    category_score: float
    elements: Dict[str, ElementResult]
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Strength:
    element: str
    category: str
    score: float
    evidence: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element": self.element,
            "category": self.category,
            "score": self.score,
            "evidence": self.evidence,
        }


@dataclass(frozen=True)
class Gap:
    element: str
    category: str
    score: float
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element": self.element,
            "category": self.category,
            "score": self.score,
            "recommendation": self.recommendation,
        }


@dataclass
class CategoryBreakdown:
    category_name: str
    category_score: float
    element_count: int
    elements: Dict[str, ElementResult]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categoryName": self.category_name,
            "categoryScore": self.category_score,
            "elementCount": self.element_count,
            "elements": {name: result.to_dict() for name, result in self.elements.items()},
        }


@dataclass
class AnalysisReport:
    """Merged result of a chunked evaluation run."""

    analysis_id: str
    framework: str
    url: str
    overall_score: float
    total_elements: int
    categories: Dict[str, CategoryBreakdown]
    top_strengths: List[Strength]
    critical_gaps: List[Gap]
    errors: List[str]
    chunks_completed: int
    chunks_total: int
    analysis_method: str = ANALYSIS_METHOD

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape; ``errors`` is omitted when empty."""
        data: Dict[str, Any] = {
            "analysisId": self.analysis_id,
            "framework": self.framework,
            "url": self.url,
            "overallScore": self.overall_score,
            "totalElements": self.total_elements,
            "categories": {key: c.to_dict() for key, c in self.categories.items()},
            "topStrengths": [s.to_dict() for s in self.top_strengths],
            "criticalGaps": [g.to_dict() for g in self.critical_gaps],
        }
        if self.errors:
            data["errors"] = list(self.errors)
        data["analysisMethod"] = self.analysis_method
        data["chunksCompleted"] = self.chunks_completed
        data["chunksTotal"] = self.chunks_total
        return data


# ---------------------------------------------------------------------------
# Progress events
# ---------------------------------------------------------------------------


class ChunkStatus(str, Enum):
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ProgressUpdate:
    """Per-chunk status change."""

    percent: int
    category_name: str
    category_key: str
    status: ChunkStatus
    chunks_completed: int
    chunks_total: int

    type: str = field(default="progress", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "percent": self.percent,
            "categoryName": self.category_name,
            "categoryKey": self.category_key,
            "status": self.status.value,
            "chunksCompleted": self.chunks_completed,
            "chunksTotal": self.chunks_total,
        }


@dataclass(frozen=True)
class ResultEvent:
    """Terminal success event carrying the final report."""

    report: AnalysisReport
    percent: int = 100

    type: str = field(default="result", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "percent": self.percent, "data": self.report.to_dict()}


@dataclass(frozen=True)
class ErrorEvent:
    """Terminal failure event."""

    error: str

    type: str = field(default="error", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "error": self.error}


ProgressEvent = Union[ProgressUpdate, ResultEvent, ErrorEvent]
