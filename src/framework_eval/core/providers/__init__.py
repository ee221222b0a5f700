"""Evaluation providers for framework-eval.

Provides the EvaluationProvider interface, the Gemini and Claude adapters,
the sliding-window rate limiter and provider failover.

Example usage:
    from framework_eval.core.providers import build_provider

    provider = build_provider(get_config())
    raw = await provider.evaluate(prompt, meta)
"""

from framework_eval.core.providers.base import (
    EvaluationMeta,
    EvaluationPrompt,
    EvaluationProvider,
)
from framework_eval.core.providers.claude import ClaudeProvider
from framework_eval.core.providers.failover import FailoverProvider
from framework_eval.core.providers.gemini import GeminiProvider
from framework_eval.core.providers.http import HttpEvaluationProvider
from framework_eval.core.providers.rate_limit import (
    RateLimitedProvider,
    SlidingWindowRateLimiter,
)
from framework_eval.core.providers.registry import build_provider, create_rate_limited
from framework_eval.core.providers.shared import (
    TRUNCATION_MARKER,
    extract_json,
    fit_prompt,
    parse_structured_output,
)

__all__ = [
    "ClaudeProvider",
    "EvaluationMeta",
    "EvaluationPrompt",
    "EvaluationProvider",
    "FailoverProvider",
    "GeminiProvider",
    "HttpEvaluationProvider",
    "RateLimitedProvider",
    "SlidingWindowRateLimiter",
    "TRUNCATION_MARKER",
    "build_provider",
    "create_rate_limited",
    "extract_json",
    "fit_prompt",
    "parse_structured_output",
]
