"""Ordered failover across evaluation providers."""

import logging
from typing import Any, Optional, Sequence

from framework_eval.core.errors import ProviderError
from framework_eval.core.observability import audit_log
from framework_eval.core.providers.base import (
    EvaluationMeta,
    EvaluationPrompt,
    EvaluationProvider,
)

logger = logging.getLogger(__name__)


class FailoverProvider(EvaluationProvider):
    """Try each provider in order until one answers.

    Any ``ProviderError`` moves on to the next provider; the last error is
    raised when every provider fails. Other exceptions propagate unchanged.
    """

    def __init__(self, providers: Sequence[EvaluationProvider]):
        if not providers:
            raise ValueError("FailoverProvider requires at least one provider")
        self._providers = list(providers)

    @property
    def providers(self) -> list[EvaluationProvider]:
        return list(self._providers)

    def get_provider_name(self) -> str:
        return "+".join(p.get_provider_name() for p in self._providers)

    async def health_check(self) -> bool:
        for provider in self._providers:
            if await provider.health_check():
                return True
        return False

    async def evaluate(
        self,
        prompt: EvaluationPrompt,
        meta: EvaluationMeta,
    ) -> dict[str, Any]:
        last_error: Optional[ProviderError] = None
        for index, provider in enumerate(self._providers):
            try:
                return await provider.evaluate(prompt, meta)
            except ProviderError as e:
                last_error = e
                remaining = self._providers[index + 1 :]
                if remaining:
                    audit_log(
                        "provider_failover",
                        failed=provider.get_provider_name(),
                        next=remaining[0].get_provider_name(),
                        chunk=meta.label,
                        error=str(e),
                    )
                    logger.warning(
                        "%s failed for %s, falling back to %s: %s",
                        provider.get_provider_name(),
                        meta.label,
                        remaining[0].get_provider_name(),
                        e,
                    )

        assert last_error is not None
        raise last_error
