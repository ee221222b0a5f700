"""Unified error hierarchy for framework-eval.

All custom exception classes are defined in domain-specific modules within
this package. This __init__.py re-exports everything for convenient access.
"""

from framework_eval.core.errors.base import ERROR_MAPPINGS, error_to_response
from framework_eval.core.errors.framework import FrameworkInvalidError
from framework_eval.core.errors.provider import (
    InvalidResponseError,
    ProviderError,
    ProviderUnavailableError,
    RateLimitExceededError,
)
from framework_eval.core.errors.storage import StorageError

__all__ = [
    "ERROR_MAPPINGS",
    "error_to_response",
    "FrameworkInvalidError",
    "InvalidResponseError",
    "ProviderError",
    "ProviderUnavailableError",
    "RateLimitExceededError",
    "StorageError",
]
