"""Domain-specific configuration dataclasses.

Contains small, focused configuration classes for the evaluation backends,
the chunked pipeline and report storage.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from framework_eval.config.parsing import _parse_bool, _parse_provider_list

DEFAULT_TIMEOUT = 30.0


@dataclass
class ProviderSettings:
    """Settings for one LLM evaluation backend.

    Attributes:
        name: Provider identifier (``gemini`` or ``claude``)
        api_key: Credential; usually supplied via environment only
        model: Model identifier sent to the backend
        base_url: API root URL
        timeout: Per-call timeout in seconds
        requests_per_minute: Sliding-window admission limit (0 disables)
        max_prompt_chars: Prompt size budget; content is truncated to fit
        max_rate_limit_retries: Retries after an HTTP 429 before giving up
        temperature: Sampling temperature
        max_output_tokens: Upper bound on response length
    """

    name: str
    api_key: Optional[str] = None
    model: str = ""
    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT
    requests_per_minute: int = 0
    max_prompt_chars: int = 8000
    max_rate_limit_retries: int = 2
    temperature: float = 0.2
    max_output_tokens: int = 3500

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def update_from_toml_dict(self, data: Dict[str, Any]) -> None:
        """Apply a ``[providers.<name>]`` TOML section in place.

        Args:
            data: Dict from TOML parsing
        """
        if "api_key" in data:
            self.api_key = str(data["api_key"]) or None
        if "model" in data:
            self.model = str(data["model"])
        if "base_url" in data:
            self.base_url = str(data["base_url"]).rstrip("/")
        if "timeout" in data:
            self.timeout = float(data["timeout"])
        if "requests_per_minute" in data:
            self.requests_per_minute = int(data["requests_per_minute"])
        if "max_prompt_chars" in data:
            self.max_prompt_chars = int(data["max_prompt_chars"])
        if "max_rate_limit_retries" in data:
            self.max_rate_limit_retries = int(data["max_rate_limit_retries"])
        if "temperature" in data:
            self.temperature = float(data["temperature"])
        if "max_output_tokens" in data:
            self.max_output_tokens = int(data["max_output_tokens"])


def default_gemini_settings() -> ProviderSettings:
    return ProviderSettings(
        name="gemini",
        model="gemini-2.0-flash",
        base_url="https://generativelanguage.googleapis.com/v1beta",
        requests_per_minute=5,
        max_prompt_chars=8000,
    )


def default_claude_settings() -> ProviderSettings:
    return ProviderSettings(
        name="claude",
        model="claude-3-5-haiku-latest",
        base_url="https://api.anthropic.com/v1",
        requests_per_minute=50,
        max_prompt_chars=12000,
    )


@dataclass
class ProvidersConfig:
    """Provider selection and per-provider settings.

    Attributes:
        primary: Provider tried first
        fallbacks: Providers tried in order when the primary fails
        gemini: Gemini backend settings
        claude: Claude backend settings
    """

    primary: str = "gemini"
    fallbacks: List[str] = field(default_factory=lambda: ["claude"])
    gemini: ProviderSettings = field(default_factory=default_gemini_settings)
    claude: ProviderSettings = field(default_factory=default_claude_settings)

    def get(self, name: str) -> Optional[ProviderSettings]:
        """Return settings for *name*, or None for an unknown provider."""
        return {"gemini": self.gemini, "claude": self.claude}.get(name)

    def ordered(self) -> List[ProviderSettings]:
        """Primary followed by fallbacks, without duplicates."""
        names: List[str] = []
        for name in [self.primary, *self.fallbacks]:
            if name not in names:
                names.append(name)
        return [s for s in (self.get(n) for n in names) if s is not None]

    def update_from_toml_dict(self, data: Dict[str, Any]) -> None:
        """Apply a ``[providers]`` TOML section (with sub-tables) in place."""
        if "primary" in data:
            primary = _parse_provider_list(str(data["primary"]))
            if primary:
                self.primary = primary[0]
        if "fallbacks" in data:
            self.fallbacks = _parse_provider_list(data["fallbacks"])
        if isinstance(data.get("gemini"), dict):
            self.gemini.update_from_toml_dict(data["gemini"])
        if isinstance(data.get("claude"), dict):
            self.claude.update_from_toml_dict(data["claude"])


@dataclass
class PipelineConfig:
    """Configuration for the chunked evaluation pipeline.

    Attributes:
        content_excerpt_chars: Body-text excerpt length included in each
            chunk prompt
    """

    content_excerpt_chars: int = 1500

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """Create config from TOML dict (typically [pipeline] section).

        Args:
            data: Dict from TOML parsing

        Returns:
            PipelineConfig instance
        """
        return cls(
            content_excerpt_chars=int(data.get("content_excerpt_chars", 1500)),
        )


@dataclass
class StorageConfig:
    """Configuration for finished-report persistence.

    Attributes:
        enabled: Whether reports are written after each run
        directory: Report directory (default: ~/.framework-eval/reports)
    """

    enabled: bool = False
    directory: str = ""  # Empty string means use default

    def get_directory(self) -> Path:
        """Get the resolved report directory."""
        if self.directory:
            return Path(self.directory).expanduser()
        return Path.home() / ".framework-eval" / "reports"

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "StorageConfig":
        """Create config from TOML dict (typically [storage] section).

        Args:
            data: Dict from TOML parsing

        Returns:
            StorageConfig instance
        """
        return cls(
            enabled=_parse_bool(data.get("enabled", False)),
            directory=str(data.get("directory", "")),
        )
