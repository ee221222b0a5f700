"""Provider construction from configuration.

``build_provider`` turns the ``[providers]`` configuration into the single
provider object the pipeline talks to: each configured backend wrapped in
its own rate limiter, chained by ``FailoverProvider`` when there is more
than one.
"""

import logging
from typing import Callable, Dict, List, Optional, Union

from framework_eval.config import EvalConfig, ProviderSettings, ProvidersConfig
from framework_eval.core.errors import ProviderUnavailableError
from framework_eval.core.providers.base import EvaluationProvider
from framework_eval.core.providers.claude import ClaudeProvider
from framework_eval.core.providers.failover import FailoverProvider
from framework_eval.core.providers.gemini import GeminiProvider
from framework_eval.core.providers.http import HttpEvaluationProvider
from framework_eval.core.providers.rate_limit import (
    RateLimitedProvider,
    SlidingWindowRateLimiter,
)

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ProviderSettings], HttpEvaluationProvider]

PROVIDER_FACTORIES: Dict[str, ProviderFactory] = {
    "gemini": GeminiProvider,
    "claude": ClaudeProvider,
}


def create_rate_limited(
    settings: ProviderSettings,
    factory: Optional[ProviderFactory] = None,
) -> RateLimitedProvider:
    """Construct one backend and wrap it in its own limiter.

    Raises:
        ProviderUnavailableError: If the backend has no credential
    """
    factory = factory or PROVIDER_FACTORIES[settings.name]
    inner = factory(settings)
    limiter = SlidingWindowRateLimiter(
        settings.requests_per_minute,
        name=settings.name,
    )
    return RateLimitedProvider(
        inner,
        limiter,
        max_rate_limit_retries=settings.max_rate_limit_retries,
    )


def build_provider(config: Union[EvalConfig, ProvidersConfig]) -> EvaluationProvider:
    """Build the configured provider chain.

    Unconfigured backends (no API key) are skipped with a debug log.

    Args:
        config: Full config or just its ``providers`` section

    Returns:
        A single rate-limited provider, or a FailoverProvider over several

    Raises:
        ProviderUnavailableError: If no backend is configured
    """
    providers_config = config.providers if isinstance(config, EvalConfig) else config

    chain: List[EvaluationProvider] = []
    skipped: List[str] = []
    for settings in providers_config.ordered():
        try:
            chain.append(create_rate_limited(settings))
        except ProviderUnavailableError as e:
            logger.debug("Skipping provider %s: %s", settings.name, e)
            skipped.append(settings.name)

    if not chain:
        raise ProviderUnavailableError(
            "No evaluation provider configured. Set GEMINI_API_KEY or ANTHROPIC_API_KEY."
            + (f" (checked: {', '.join(skipped)})" if skipped else "")
        )

    logger.info(
        "Evaluation providers: %s",
        " -> ".join(p.get_provider_name() for p in chain),
    )
    if len(chain) == 1:
        return chain[0]
    return FailoverProvider(chain)
