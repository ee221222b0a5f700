"""Error-to-code mapping registry.

Provides a centralized mapping from exception types to ``(error_code,
error_type)`` pairs so the CLI and any request-handling shell render
failures consistently.

Usage:
    from framework_eval.core.errors.base import error_to_response

    try:
        report = await pipeline.run(framework, content)
    except Exception as e:
        result = error_to_response(e)
        if result is not None:
            return result
        raise  # Unknown error, re-raise
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Type

from framework_eval.core.errors.framework import FrameworkInvalidError
from framework_eval.core.errors.provider import (
    InvalidResponseError,
    ProviderError,
    ProviderUnavailableError,
    RateLimitExceededError,
)
from framework_eval.core.errors.storage import StorageError
from framework_eval.core.observability import redact_secrets

ERROR_MAPPINGS: Dict[Type[Exception], Tuple[str, str]] = {
    # --- Provider errors ---
    ProviderError: ("AI_PROVIDER_ERROR", "ai_provider"),
    ProviderUnavailableError: ("UNAVAILABLE", "unavailable"),
    InvalidResponseError: ("INVALID_RESPONSE", "ai_provider"),
    RateLimitExceededError: ("RATE_LIMIT_EXCEEDED", "rate_limit"),
    # --- Framework errors ---
    FrameworkInvalidError: ("FRAMEWORK_INVALID", "validation"),
    # --- Storage errors ---
    StorageError: ("STORAGE_ERROR", "internal"),
}


def error_to_response(exc: Exception) -> Optional[Dict[str, Any]]:
    """Convert a known exception to an error envelope, or None if unknown.

    Looks up the exception's *exact* type in ERROR_MAPPINGS.

    Args:
        exc: The exception to convert.

    Returns:
        ``{"success": False, "error": ..., "data": {"error_code", "error_type"}}``
        or None if the exception type is not registered.
    """
    mapping = ERROR_MAPPINGS.get(type(exc))
    if mapping is None:
        return None

    code, error_type = mapping
    return {
        "success": False,
        "error": redact_secrets(str(exc)),
        "data": {"error_code": code, "error_type": error_type},
    }
