"""Google Gemini provider.

Calls the Generative Language API ``generateContent`` endpoint with a JSON
response MIME type so the model answers with a bare object.

API documentation: https://ai.google.dev/api/generate-content

Example usage:
    provider = GeminiProvider(settings)
    raw = await provider.evaluate(prompt, meta)
"""

import logging
from typing import Any, Optional

from framework_eval.config.domains import ProviderSettings, default_gemini_settings
from framework_eval.core.errors import InvalidResponseError
from framework_eval.core.observability import redact_secrets
from framework_eval.core.providers.base import EvaluationPrompt
from framework_eval.core.providers.http import HttpEvaluationProvider

logger = logging.getLogger(__name__)

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider(HttpEvaluationProvider):
    """Evaluation provider backed by Gemini models."""

    provider_name = "gemini"
    api_key_env_var = "GEMINI_API_KEY"

    def __init__(
        self,
        settings: Optional[ProviderSettings] = None,
        *,
        api_key: Optional[str] = None,
    ):
        if settings is None:
            settings = default_gemini_settings()
        super().__init__(settings, api_key=api_key)
        self._base_url = self._base_url or GEMINI_API_BASE_URL

    def _build_request(self, prompt: EvaluationPrompt) -> tuple[str, dict[str, str], dict[str, Any]]:
        url = f"{self._base_url}/models/{self._settings.model}:generateContent"
        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt.render()}]}],
            "generationConfig": {
                "temperature": self._settings.temperature,
                "maxOutputTokens": self._settings.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }
        if prompt.system:
            payload["systemInstruction"] = {"parts": [{"text": prompt.system}]}
        return url, headers, payload

    def _extract_text(self, data: dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            feedback = data.get("promptFeedback")
            reason = "no candidates returned"
            if isinstance(feedback, dict):
                reason = feedback.get("blockReason", reason)
            raise InvalidResponseError(
                f"Gemini returned no answer: {reason}",
                provider=self.provider_name,
                excerpt=redact_secrets(str(data)),
            )

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        text = "".join(
            part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        if not text:
            raise InvalidResponseError(
                "Gemini answer contained no text",
                provider=self.provider_name,
                excerpt=redact_secrets(str(candidate)),
            )
        return text
