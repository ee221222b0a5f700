"""Anthropic Claude provider.

Calls the Messages API and reads the concatenated text blocks of the reply.

API documentation: https://docs.anthropic.com/en/api/messages
"""

import logging
from typing import Any, Optional

from framework_eval.config.domains import ProviderSettings, default_claude_settings
from framework_eval.core.errors import InvalidResponseError
from framework_eval.core.observability import redact_secrets
from framework_eval.core.providers.base import EvaluationPrompt
from framework_eval.core.providers.http import HttpEvaluationProvider

logger = logging.getLogger(__name__)

ANTHROPIC_API_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"


class ClaudeProvider(HttpEvaluationProvider):
    """Evaluation provider backed by Claude models."""

    provider_name = "claude"
    api_key_env_var = "ANTHROPIC_API_KEY"

    def __init__(
        self,
        settings: Optional[ProviderSettings] = None,
        *,
        api_key: Optional[str] = None,
    ):
        if settings is None:
            settings = default_claude_settings()
        super().__init__(settings, api_key=api_key)
        self._base_url = self._base_url or ANTHROPIC_API_BASE_URL

    def _build_request(self, prompt: EvaluationPrompt) -> tuple[str, dict[str, str], dict[str, Any]]:
        url = f"{self._base_url}/messages"
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "model": self._settings.model,
            "max_tokens": self._settings.max_output_tokens,
            "temperature": self._settings.temperature,
            "messages": [{"role": "user", "content": prompt.render()}],
        }
        if prompt.system:
            payload["system"] = prompt.system
        return url, headers, payload

    def _extract_text(self, data: dict[str, Any]) -> str:
        blocks = data.get("content")
        if not isinstance(blocks, list):
            blocks = []
        text = "".join(
            block["text"]
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
        )
        if not text:
            raise InvalidResponseError(
                f"Claude answer contained no text (stop_reason={data.get('stop_reason')})",
                provider=self.provider_name,
                excerpt=redact_secrets(str(data)),
            )
        return text
