"""Configuration package for framework-eval.

Sub-modules:
    parsing   – Boolean and provider-list parsing helpers
    domains   – ProviderSettings, ProvidersConfig, PipelineConfig, StorageConfig
    loader    – EvalConfig loading mixin (_EvalConfigLoader)
    settings  – EvalConfig dataclass, get_config/set_config globals
"""

from framework_eval.config.domains import (  # noqa: F401
    DEFAULT_TIMEOUT,
    PipelineConfig,
    ProviderSettings,
    ProvidersConfig,
    StorageConfig,
)
from framework_eval.config.settings import (  # noqa: F401
    EvalConfig,
    get_config,
    set_config,
)
