"""Chunk prompt construction.

Each chunk prompt frames the framework and category, includes a compact
page summary, lists every element to score, states the scoring bands and
spells out the exact JSON shape expected back, with one key per element.
"""

from __future__ import annotations

import json
from typing import Optional

from framework_eval.core.content import ContentSummary
from framework_eval.core.evaluation.models import Chunk
from framework_eval.core.providers.base import EvaluationPrompt

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CONTENT_EXCERPT_CHARS = 1500
MAX_PROMPT_KEYWORDS = 10

SYSTEM_PROMPT = """\
You are an expert brand and marketing analyst. You evaluate website content
against structured frameworks and score every element you are given.

You MUST respond with ONLY a valid JSON object, no extra text."""

DEFAULT_SCORING_INSTRUCTIONS = """Score each element 0.0-1.0 (flat fractional scoring):
- 0.8-1.0: Excellent - clearly present with strong evidence
- 0.6-0.79: Good - present but could be strengthened
- 0.4-0.59: Needs Work - weak or implicit
- 0.0-0.39: Poor - absent or barely detectable"""


# ---------------------------------------------------------------------------
# Prompt construction
# ---------------------------------------------------------------------------


def build_content_summary(
    content: ContentSummary,
    excerpt_chars: int = DEFAULT_CONTENT_EXCERPT_CHARS,
) -> str:
    """Render the page summary shared by every chunk of a run.

    Args:
        content: Extracted page content
        excerpt_chars: Body-text excerpt length

    Returns:
        Multi-line summary: URL, title, meta description, keywords, excerpt
    """
    excerpt = content.body_text[: max(0, excerpt_chars)]
    keywords = ", ".join(content.keywords[:MAX_PROMPT_KEYWORDS])
    return "\n".join(
        [
            f"URL: {content.url}",
            f"Title: {content.title or 'Untitled'}",
            f"Meta Description: {content.meta_description or 'None'}",
            f"Keywords: {keywords or 'None'}",
            f"Content (first {excerpt_chars} chars):\n{excerpt}",
        ]
    )


def _response_template(chunk: Chunk) -> str:
    elements = ",\n".join(
        f'    {json.dumps(el)}: {{ "score": 0.0, "evidence": "...", "recommendation": "..." }}'
        for el in chunk.elements
    )
    return f'{{\n  "categoryScore": 0.0,\n  "elements": {{\n{elements}\n  }}\n}}'


def build_chunk_prompt(
    chunk: Chunk,
    framework_name: str,
    content_summary: str,
    scoring_instructions: Optional[str] = None,
) -> EvaluationPrompt:
    """Build the prompt for one chunk.

    Args:
        chunk: Category to score
        framework_name: Framework display name
        content_summary: Output of :func:`build_content_summary`
        scoring_instructions: Framework-specific bands; defaults apply when None

    Returns:
        EvaluationPrompt with the summary isolated in ``content``
    """
    count = len(chunk.elements)
    element_lines = "\n".join(f"{i}. {el}" for i, el in enumerate(chunk.elements, 1))
    scoring = scoring_instructions or DEFAULT_SCORING_INSTRUCTIONS

    preamble = (
        f"You are analyzing website content using the {framework_name} framework.\n"
        f'This is the "{chunk.category_name}" category. '
        "Evaluate EVERY element listed below - do not skip any."
    )

    instructions = f"""CATEGORY: {chunk.category_name}
ELEMENTS TO EVALUATE ({count}):
{element_lines}

SCORING:
{scoring}

For EACH element, provide:
- score: number 0.0-1.0
- evidence: specific quote or observation from the content (or "Not found" if absent)
- recommendation: one actionable improvement

Return ONLY valid JSON in this exact format:
{_response_template(chunk)}

CRITICAL: Evaluate ALL {count} elements. Do not skip any. Return ONLY JSON."""

    return EvaluationPrompt(
        system=SYSTEM_PROMPT,
        preamble=preamble,
        content=content_summary,
        instructions=instructions,
    )
