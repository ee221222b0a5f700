"""Chunk planning: one chunk per framework category."""

from typing import List

from framework_eval.core.evaluation.models import Chunk
from framework_eval.core.frameworks import FrameworkDefinition


def plan_chunks(framework: FrameworkDefinition) -> List[Chunk]:
    """Split *framework* into chunks in declared category order.

    Pure and deterministic; element lists are copied verbatim so progress
    percentages and report ordering are stable across runs.
    """
    return [
        Chunk(
            category_name=category.name,
            category_key=category.key,
            elements=tuple(category.elements),
        )
        for category in framework.categories
    ]
