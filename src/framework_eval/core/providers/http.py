"""Shared httpx base for HTTP-backed evaluation providers.

``HttpEvaluationProvider`` owns everything the Gemini and Claude adapters
have in common: credential resolution, prompt budgeting, the single POST,
HTTP status mapping and JSON extraction from the model's text. Subclasses
only describe their request and where the text sits in the response.

Error Handling:
    - Timeouts / transport errors: ProviderUnavailableError
    - 401 / 403: ProviderUnavailableError (credential problem)
    - 429: RateLimitExceededError with the Retry-After hint
    - other >= 400: ProviderUnavailableError
    - unparseable body or model text: InvalidResponseError
"""

import logging
import os
from abc import abstractmethod
from typing import Any, Optional

import httpx

from framework_eval.config.domains import ProviderSettings
from framework_eval.core.errors import (
    InvalidResponseError,
    ProviderUnavailableError,
    RateLimitExceededError,
)
from framework_eval.core.observability import redact_secrets
from framework_eval.core.providers.base import (
    EvaluationMeta,
    EvaluationPrompt,
    EvaluationProvider,
)
from framework_eval.core.providers.shared import (
    extract_error_message,
    fit_prompt,
    parse_retry_after,
    parse_structured_output,
)

logger = logging.getLogger(__name__)


class HttpEvaluationProvider(EvaluationProvider):
    """Base class for providers that answer one chunk per HTTPS POST.

    Class attributes:
        provider_name: Identifier returned by get_provider_name()
        api_key_env_var: Environment variable consulted when no key is given
    """

    provider_name: str = ""
    api_key_env_var: str = ""

    def __init__(
        self,
        settings: ProviderSettings,
        *,
        api_key: Optional[str] = None,
    ):
        """Initialize the provider.

        Args:
            settings: Model, endpoint, timeout and budget settings
            api_key: Explicit credential; falls back to ``settings.api_key``
                then to the provider's environment variable

        Raises:
            ProviderUnavailableError: If no API key can be resolved
        """
        self._api_key = (
            api_key
            or settings.api_key
            or (os.environ.get(self.api_key_env_var) if self.api_key_env_var else None)
        )
        if not self._api_key:
            raise ProviderUnavailableError(
                f"{self.provider_name} API key required. Provide it in config "
                f"or via the {self.api_key_env_var} environment variable.",
                provider=self.provider_name,
            )

        self._settings = settings
        self._base_url = settings.base_url.rstrip("/")
        self._timeout = settings.timeout

    @property
    def settings(self) -> ProviderSettings:
        return self._settings

    def get_provider_name(self) -> str:
        return self.provider_name

    async def health_check(self) -> bool:
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _build_request(self, prompt: EvaluationPrompt) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return ``(url, headers, json_payload)`` for one call."""
        ...

    @abstractmethod
    def _extract_text(self, data: dict[str, Any]) -> str:
        """Return the model's text answer from a decoded response body.

        Raises:
            InvalidResponseError: If the body has no text answer
        """
        ...

    def _format_error(self, data: dict[str, Any]) -> str:
        return ""

    # ------------------------------------------------------------------
    # Call
    # ------------------------------------------------------------------

    async def evaluate(
        self,
        prompt: EvaluationPrompt,
        meta: EvaluationMeta,
    ) -> dict[str, Any]:
        fitted = fit_prompt(prompt, self._settings.max_prompt_chars)
        url, headers, payload = self._build_request(fitted)

        logger.debug(
            "Calling %s for %s (analysis %s, %d prompt chars)",
            self.provider_name,
            meta.label,
            meta.analysis_id,
            len(fitted),
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise ProviderUnavailableError(
                f"Request timed out after {self._timeout:g}s",
                provider=self.provider_name,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderUnavailableError(
                redact_secrets(f"Request failed: {e}"),
                provider=self.provider_name,
            ) from e

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseError(
                "Provider returned a non-JSON body",
                provider=self.provider_name,
                excerpt=redact_secrets(response.text or ""),
            ) from e
        if not isinstance(data, dict):
            raise InvalidResponseError(
                "Provider returned an unexpected body",
                provider=self.provider_name,
                excerpt=redact_secrets(response.text or ""),
            )

        text = self._extract_text(data)
        return parse_structured_output(text, provider=self.provider_name)

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code in (401, 403):
            raise ProviderUnavailableError(
                "Invalid API key",
                provider=self.provider_name,
            )

        if response.status_code == 429:
            raise RateLimitExceededError(
                provider=self.provider_name,
                retry_after=parse_retry_after(response),
            )

        if response.status_code >= 400:
            error_msg = extract_error_message(response, provider_format=self._format_error)
            raise ProviderUnavailableError(
                f"API error {response.status_code}: {error_msg}",
                provider=self.provider_name,
            )
