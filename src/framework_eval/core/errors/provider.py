"""Provider error classes.

Raised by evaluation providers and the rate-limit gate in front of them.
"""

from typing import Optional


class ProviderError(RuntimeError):
    """Base exception for evaluation provider errors."""

    def __init__(self, message: str, *, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)


class ProviderUnavailableError(ProviderError):
    """Raised when a provider cannot serve a request.

    Covers missing credentials, transport failures, HTTP 5xx/4xx responses
    and per-call timeouts. A chunk that hits this error is degraded, never
    aborted.
    """


class InvalidResponseError(ProviderError):
    """Raised when a provider answers with text that is not a JSON object.

    Attributes:
        excerpt: Leading slice of the offending text (bounded, for logs).
    """

    MAX_EXCERPT_CHARS = 200

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        excerpt: str = "",
    ):
        super().__init__(message, provider=provider)
        self.excerpt = excerpt[: self.MAX_EXCERPT_CHARS]


class RateLimitExceededError(ProviderError):
    """Provider rejected the call with a rate-limit response (HTTP 429).

    Absorbed by :class:`~framework_eval.core.providers.rate_limit.RateLimitedProvider`;
    pipeline callers never see it.

    Attributes:
        retry_after: Seconds the provider asked us to wait, if given.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        provider: Optional[str] = None,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, provider=provider)
        self.retry_after = retry_after
