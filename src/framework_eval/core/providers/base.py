"""Abstract base class for evaluation providers.

This module defines the EvaluationProvider interface that every LLM backend
adapter implements. The pipeline only ever talks to this interface, so a
secondary backend (or a test double) can be substituted without touching the
chunk executor.

Example usage:
    class EchoProvider(EvaluationProvider):
        def get_provider_name(self) -> str:
            return "echo"

        async def evaluate(
            self,
            prompt: EvaluationPrompt,
            meta: EvaluationMeta,
        ) -> dict[str, Any]:
            return {"elements": {}}
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EvaluationPrompt:
    """One chunk prompt, split so content can be truncated in isolation.

    Attributes:
        system: Role/system instruction
        preamble: Framework and category framing placed before the content
        content: Page summary; the only part truncation may shorten
        instructions: Element list, scoring bands and output format
    """

    system: str
    preamble: str
    content: str
    instructions: str

    def render(self) -> str:
        """Join the user-facing parts into one prompt body."""
        return f"{self.preamble}\n\nWEBSITE CONTENT:\n{self.content}\n\n{self.instructions}"

    def __len__(self) -> int:
        return len(self.system) + len(self.render())


@dataclass(frozen=True)
class EvaluationMeta:
    """Identifies the analysis and chunk behind a call; used for logging only."""

    analysis_id: str = ""
    framework_name: str = ""
    category_key: str = ""

    @property
    def label(self) -> str:
        return f"{self.framework_name}-{self.category_key}"


class EvaluationProvider(ABC):
    """Abstract base class for evaluation backends.

    Subclasses should:
    - Implement get_provider_name() to return a unique identifier
    - Implement evaluate() to issue exactly one backend call and return the
      decoded JSON object
    - Raise only :class:`~framework_eval.core.errors.ProviderError`
      subclasses for backend failures
    """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the unique identifier for this provider.

        Returns:
            Provider name (e.g., "gemini", "claude")
        """
        ...

    @abstractmethod
    async def evaluate(
        self,
        prompt: EvaluationPrompt,
        meta: EvaluationMeta,
    ) -> dict[str, Any]:
        """Score one chunk prompt.

        Args:
            prompt: The chunk prompt
            meta: Analysis/chunk identifiers for logging

        Returns:
            Decoded JSON object from the backend's answer

        Raises:
            ProviderUnavailableError: Transport, HTTP or timeout failure
            InvalidResponseError: The answer held no JSON object
            RateLimitExceededError: The backend answered HTTP 429
        """
        ...

    async def health_check(self) -> bool:
        """Check if the provider is available and properly configured.

        Default implementation returns True.

        Returns:
            True if provider is healthy, False otherwise
        """
        return True
