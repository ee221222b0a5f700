"""EvalConfig loading logic.

Provides ``_EvalConfigLoader``, a mixin class whose methods are inherited by
``EvalConfig`` (defined in ``settings.py``). Splitting loading logic into its
own module keeps ``settings.py`` focused on field definitions.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, cast

if TYPE_CHECKING:
    from framework_eval.config.settings import EvalConfig

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from framework_eval.config.domains import (
    PipelineConfig,
    ProvidersConfig,
    StorageConfig,
)
from framework_eval.config.parsing import _parse_bool, _parse_provider_list

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "FRAMEWORK_EVAL_CONFIG_FILE"
PROJECT_CONFIG_NAME = "framework-eval.toml"


class _EvalConfigLoader:
    """Mixin providing config-loading methods for ``EvalConfig``.

    At runtime ``self`` is always an ``EvalConfig`` instance.
    """

    if TYPE_CHECKING:

        def __init_subclass__(cls, **kwargs: Any) -> None: ...

        log_level: str
        structured_logging: bool
        providers: ProvidersConfig
        pipeline: PipelineConfig
        storage: StorageConfig

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "EvalConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. Project TOML config (./framework-eval.toml)
        3. User TOML config (~/.config/framework-eval/config.toml)
        4. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
            user_config = Path(xdg_config_home) / "framework-eval" / "config.toml"
            if user_config.exists():
                config._load_toml(user_config)
                logger.debug(f"Loaded user config from {user_config}")

            project_config = Path(PROJECT_CONFIG_NAME)
            if project_config.exists():
                config._load_toml(project_config)
                logger.debug(f"Loaded project config from {project_config}")

        config._load_env()

        return cast("EvalConfig", config)

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)

            # Logging settings
            if "logging" in data:
                log = data["logging"]
                if "level" in log:
                    self.log_level = str(log["level"]).upper()
                if "structured" in log:
                    self.structured_logging = _parse_bool(log["structured"])

            # Provider selection and per-provider settings
            if "providers" in data:
                self.providers.update_from_toml_dict(data["providers"])

            # Pipeline settings
            if "pipeline" in data:
                self.pipeline = PipelineConfig.from_toml_dict(data["pipeline"])

            # Storage settings
            if "storage" in data:
                self.storage = StorageConfig.from_toml_dict(data["storage"])

        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading config file {path}: {e}")

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        # Logging
        if level := os.environ.get("FRAMEWORK_EVAL_LOG_LEVEL"):
            self.log_level = level.upper()
        if structured := os.environ.get("FRAMEWORK_EVAL_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

        # Provider selection
        if primary := os.environ.get("FRAMEWORK_EVAL_PROVIDER"):
            parsed = _parse_provider_list(primary)
            if parsed:
                self.providers.primary = parsed[0]
        fallbacks = os.environ.get("FRAMEWORK_EVAL_FALLBACK_PROVIDERS")
        if fallbacks is not None:
            self.providers.fallbacks = _parse_provider_list(fallbacks)

        # Credentials
        if gemini_key := os.environ.get("GEMINI_API_KEY"):
            self.providers.gemini.api_key = gemini_key
        if claude_key := os.environ.get("ANTHROPIC_API_KEY"):
            self.providers.claude.api_key = claude_key

        # Model overrides
        if gemini_model := os.environ.get("FRAMEWORK_EVAL_GEMINI_MODEL"):
            self.providers.gemini.model = gemini_model
        if claude_model := os.environ.get("FRAMEWORK_EVAL_CLAUDE_MODEL"):
            self.providers.claude.model = claude_model

        # Storage
        if storage_dir := os.environ.get("FRAMEWORK_EVAL_STORAGE_DIR"):
            self.storage.directory = storage_dir
            self.storage.enabled = True
