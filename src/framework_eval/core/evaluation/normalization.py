"""Normalization of raw backend answers into chunk results.

Backends answer in loosely typed JSON: scores arrive as numbers, numeric
strings, words ("high") or not at all; elements go missing or extra ones
appear. Normalization keeps well-typed fields, coerces scores into
``[0, 1]``, fills defaults, and always returns exactly the requested
element set.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Sequence

from framework_eval.core.evaluation.models import (
    FAILED_EVIDENCE,
    NO_RECOMMENDATION,
    NOT_EVALUATED_EVIDENCE,
    Chunk,
    ChunkResult,
    ElementResult,
)

logger = logging.getLogger(__name__)


def coerce_score(value: Any) -> float:
    """Coerce a raw score to a finite float clamped to ``[0, 1]``.

    Booleans and non-numeric values become 0; numeric strings are parsed;
    NaN and infinities become 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0

    if not math.isfinite(number):
        return 0.0
    return max(0.0, min(1.0, number))


def _has_numeric_score(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(float(value))
    return False


def _normalize_element(found: Any) -> ElementResult:
    if not isinstance(found, Mapping):
        return ElementResult()
    evidence = found.get("evidence")
    recommendation = found.get("recommendation")
    return ElementResult(
        score=coerce_score(found.get("score")),
        evidence=evidence if isinstance(evidence, str) else NOT_EVALUATED_EVIDENCE,
        recommendation=recommendation if isinstance(recommendation, str) else NO_RECOMMENDATION,
    )


def normalize_chunk_result(raw: Mapping[str, Any], elements: Sequence[str]) -> ChunkResult:
    """Normalize a backend answer for one chunk.

    Reads ``raw["elements"]`` when it is a mapping, else treats ``raw``
    itself as the element mapping. Keys not in *elements* are ignored.

    Args:
        raw: Decoded JSON object from the provider
        elements: Requested element names

    Returns:
        ChunkResult whose element keys equal *elements*
    """
    raw_elements = raw.get("elements") if isinstance(raw, Mapping) else None
    if not isinstance(raw_elements, Mapping):
        raw_elements = raw if isinstance(raw, Mapping) else {}

    normalized: Dict[str, ElementResult] = {
        element: _normalize_element(raw_elements.get(element)) for element in elements
    }

    missing = [el for el in elements if not isinstance(raw_elements.get(el), Mapping)]
    if missing:
        logger.debug("Backend omitted %d of %d elements: %s", len(missing), len(elements), missing)

    reported = raw.get("categoryScore") if isinstance(raw, Mapping) else None
    if _has_numeric_score(reported):
        category_score = coerce_score(reported)
    else:
        scores = [r.score for r in normalized.values()]
        category_score = sum(scores) / len(scores) if scores else 0.0

    return ChunkResult(category_score=category_score, elements=normalized)


def degraded_chunk_result(chunk: Chunk, message: str) -> ChunkResult:
    """Placeholder result for a chunk whose backend call failed."""
    return ChunkResult(
        category_score=0.0,
        elements={
            element: ElementResult(score=0.0, evidence=FAILED_EVIDENCE, recommendation=message)
            for element in chunk.elements
        },
        error=message,
    )
