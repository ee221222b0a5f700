"""EvalConfig dataclass and global configuration state.

This module defines the ``EvalConfig`` class (field declarations and simple
accessor methods) and the global ``get_config`` / ``set_config`` helpers.
Loading logic lives in the ``_EvalConfigLoader`` mixin (``loader.py``) which
``EvalConfig`` inherits from.
"""

import logging
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_package_version
from typing import Optional

from framework_eval.config.domains import (
    PipelineConfig,
    ProvidersConfig,
    StorageConfig,
)
from framework_eval.config.loader import _EvalConfigLoader


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("framework-eval")
    except PackageNotFoundError:
        return "0.1.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


@dataclass
class EvalConfig(_EvalConfigLoader):
    """Evaluation configuration with support for env vars and TOML overrides."""

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = False

    # LLM backends
    providers: ProvidersConfig = field(default_factory=ProvidersConfig)

    # Chunked pipeline
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)

    # Report persistence
    storage: StorageConfig = field(default_factory=StorageConfig)

    version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            # JSON-style structured logging
            formatter = logging.Formatter(
                '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)

        root_logger = logging.getLogger("framework_eval")
        root_logger.setLevel(level)
        # Replace a handler installed by an earlier call
        for existing in list(root_logger.handlers):
            if getattr(existing, "_framework_eval_handler", False):
                root_logger.removeHandler(existing)
        handler._framework_eval_handler = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)


# Global configuration instance
_config: Optional[EvalConfig] = None


def get_config() -> EvalConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = EvalConfig.from_env()
    return _config


def set_config(config: Optional[EvalConfig]) -> None:
    """Set (or with None, reset) the global configuration instance."""
    global _config
    _config = config
