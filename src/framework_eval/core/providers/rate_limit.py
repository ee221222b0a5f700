"""Sliding-window rate limiting for evaluation providers.

``SlidingWindowRateLimiter`` admits at most ``max_calls`` provider calls in
any trailing ``window_seconds`` window. It keeps the instants of admitted
calls in an ordered deque; when the window is full the caller sleeps until
the oldest instant ages out (plus a small buffer) and re-checks.

``RateLimitedProvider`` puts a limiter in front of a provider and absorbs
HTTP 429 answers: the limiter is deferred by the backend's Retry-After hint
and the call retried. When retries run out the failure surfaces as
``ProviderUnavailableError``, so callers never see ``RateLimitExceededError``.

The limiter is per-process. Share one provider object between concurrent
runs so they share its window.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Optional

from framework_eval.core.errors import ProviderUnavailableError, RateLimitExceededError
from framework_eval.core.observability import audit_log
from framework_eval.core.providers.base import (
    EvaluationMeta,
    EvaluationPrompt,
    EvaluationProvider,
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 60.0
DEFAULT_BUFFER_SECONDS = 0.5
DEFAULT_RETRY_AFTER_SECONDS = 5.0


class SlidingWindowRateLimiter:
    """Admit at most ``max_calls`` calls per trailing window.

    Attributes:
        max_calls: Calls admitted per window; ``<= 0`` disables the window
        window_seconds: Window length
        buffer_seconds: Extra sleep added to each computed wait
    """

    def __init__(
        self,
        max_calls: int,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        buffer_seconds: float = DEFAULT_BUFFER_SECONDS,
        *,
        name: str = "",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self.buffer_seconds = buffer_seconds
        self.name = name
        self._clock = clock
        self._sleep = sleep
        self._calls: Deque[float] = deque()
        self._blocked_until: float = 0.0
        self._async_lock: Optional[asyncio.Lock] = None

    def _get_async_lock(self) -> asyncio.Lock:
        """Get or lazily create the async lock.

        Must be called from within a running event loop.
        """
        if self._async_lock is None:
            self._async_lock = asyncio.Lock()
        return self._async_lock

    @property
    def enabled(self) -> bool:
        return self.max_calls > 0

    def _prune(self, now: float) -> None:
        while self._calls and now - self._calls[0] >= self.window_seconds:
            self._calls.popleft()

    def _wait_needed(self, now: float) -> float:
        if self._blocked_until > now:
            return self._blocked_until - now
        if not self.enabled:
            return 0.0
        self._prune(now)
        if len(self._calls) >= self.max_calls:
            return self.window_seconds - (now - self._calls[0]) + self.buffer_seconds
        return 0.0

    def snapshot(self) -> list[float]:
        """Admitted call instants currently inside the window (oldest first)."""
        return list(self._calls)

    async def acquire(self) -> float:
        """Wait for a free slot, record the call, and return its instant.

        Never raises; it always eventually admits the caller.
        """
        async with self._get_async_lock():
            while True:
                now = self._clock()
                wait_needed = self._wait_needed(now)
                if wait_needed <= 0:
                    break
                audit_log(
                    "rate_limit_wait",
                    limiter=self.name,
                    wait_seconds=round(wait_needed, 3),
                    calls_in_window=len(self._calls),
                    max_calls=self.max_calls,
                )
                logger.info(
                    "Rate limit reached for %s, waiting %.1fs",
                    self.name or "provider",
                    wait_needed,
                )
                await self._sleep(wait_needed)

            if self.enabled:
                self._calls.append(now)
            return now

    async def defer(self, seconds: float) -> None:
        """Block every acquisition until ``seconds`` from now.

        Used when a backend answers HTTP 429 with a Retry-After hint. A
        shorter deferral never shortens an existing one.
        """
        if seconds <= 0:
            return
        async with self._get_async_lock():
            until = self._clock() + seconds
            if until > self._blocked_until:
                self._blocked_until = until


class RateLimitedProvider(EvaluationProvider):
    """Provider wrapper that gates every call through a rate limiter."""

    def __init__(
        self,
        inner: EvaluationProvider,
        limiter: SlidingWindowRateLimiter,
        max_rate_limit_retries: int = 2,
    ):
        self._inner = inner
        self._limiter = limiter
        self._max_rate_limit_retries = max(0, max_rate_limit_retries)

    @property
    def inner(self) -> EvaluationProvider:
        return self._inner

    @property
    def limiter(self) -> SlidingWindowRateLimiter:
        return self._limiter

    def get_provider_name(self) -> str:
        return self._inner.get_provider_name()

    async def health_check(self) -> bool:
        return await self._inner.health_check()

    async def evaluate(
        self,
        prompt: EvaluationPrompt,
        meta: EvaluationMeta,
    ) -> dict[str, Any]:
        attempt = 0
        while True:
            await self._limiter.acquire()
            try:
                return await self._inner.evaluate(prompt, meta)
            except RateLimitExceededError as e:
                if attempt >= self._max_rate_limit_retries:
                    raise ProviderUnavailableError(
                        f"Rate limit persisted after {attempt + 1} attempts",
                        provider=self.get_provider_name(),
                    ) from e
                attempt += 1
                wait = e.retry_after if e.retry_after is not None else DEFAULT_RETRY_AFTER_SECONDS
                audit_log(
                    "rate_limit_retry",
                    provider=self.get_provider_name(),
                    attempt=attempt,
                    retry_after=wait,
                    chunk=meta.label,
                )
                await self._limiter.defer(wait)
