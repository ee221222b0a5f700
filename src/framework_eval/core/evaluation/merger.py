"""Merging of per-chunk results into the final report.

Pure and deterministic: the same inputs always give an identical report.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from framework_eval.core.evaluation.models import (
    AnalysisReport,
    CategoryBreakdown,
    Chunk,
    ChunkResult,
    ElementResult,
    Gap,
    Strength,
)

STRENGTH_THRESHOLD = 0.7
GAP_THRESHOLD = 0.4
MAX_HIGHLIGHTS = 5


def merge_results(
    results: Sequence[Tuple[Chunk, ChunkResult]],
    errors: Sequence[str],
    *,
    framework_name: str = "",
    url: str = "",
    analysis_id: str = "",
) -> AnalysisReport:
    """Merge chunk results into an AnalysisReport.

    The overall score is the unweighted mean of every element score, so
    larger categories weigh more. Strengths are the five highest scores
    ``>= 0.7``; gaps the five lowest ``< 0.4``. Ties keep category order
    then element order.

    Args:
        results: ``(chunk, result)`` pairs in plan order
        errors: ``"<Category Name>: <message>"`` entries for failed chunks
        framework_name: Framework display name
        url: Evaluated page URL
        analysis_id: Run identifier

    Returns:
        The merged report
    """
    categories: Dict[str, CategoryBreakdown] = {}
    flattened: List[Tuple[str, str, ElementResult]] = []

    for chunk, result in results:
        categories[chunk.category_key] = CategoryBreakdown(
            category_name=chunk.category_name,
            category_score=result.category_score,
            element_count=len(chunk.elements),
            elements=dict(result.elements),
        )
        for element in chunk.elements:
            flattened.append((element, chunk.category_key, result.elements[element]))

    scores = [entry.score for _, _, entry in flattened]
    overall_score = sum(scores) / len(scores) if scores else 0.0

    # sorted() is stable, so equal scores keep first-occurrence order
    strengths = [
        Strength(element=name, category=category, score=entry.score, evidence=entry.evidence)
        for name, category, entry in sorted(
            (item for item in flattened if item[2].score >= STRENGTH_THRESHOLD),
            key=lambda item: -item[2].score,
        )[:MAX_HIGHLIGHTS]
    ]
    gaps = [
        Gap(
            element=name,
            category=category,
            score=entry.score,
            recommendation=entry.recommendation,
        )
        for name, category, entry in sorted(
            (item for item in flattened if item[2].score < GAP_THRESHOLD),
            key=lambda item: item[2].score,
        )[:MAX_HIGHLIGHTS]
    ]

    chunks_total = len(results)
    return AnalysisReport(
        analysis_id=analysis_id,
        framework=framework_name,
        url=url,
        overall_score=overall_score,
        total_elements=len(scores),
        categories=categories,
        top_strengths=strengths,
        critical_gaps=gaps,
        errors=list(errors),
        chunks_completed=chunks_total - len(errors),
        chunks_total=chunks_total,
    )
