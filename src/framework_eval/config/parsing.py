"""Parsing and normalization helpers for configuration values.

Provides boolean parsing and provider-list parsing used by the other
config sub-modules.
"""

import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

KNOWN_PROVIDERS = ("gemini", "claude")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _normalize_provider_name(value: str) -> Optional[str]:
    """Normalize a provider name, returning None for unknown providers.

    Accepts a few aliases seen in older configs (``google`` for Gemini,
    ``anthropic`` for Claude).
    """
    normalized = value.strip().lower()
    aliases = {"google": "gemini", "anthropic": "claude"}
    normalized = aliases.get(normalized, normalized)
    if normalized not in KNOWN_PROVIDERS:
        logger.warning(
            "Unknown provider '%s' ignored. Valid options: %s",
            value,
            ", ".join(KNOWN_PROVIDERS),
        )
        return None
    return normalized


def _parse_provider_list(value: Any) -> List[str]:
    """Parse a provider list from TOML (list) or env (comma-separated string).

    Unknown names are dropped and duplicates collapsed, preserving order.

    Args:
        value: List of names or a comma-separated string

    Returns:
        Ordered list of normalized provider names
    """
    if isinstance(value, str):
        raw_items = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw_items = [str(item) for item in value]
    else:
        return []

    result: List[str] = []
    for item in raw_items:
        if not item.strip():
            continue
        name = _normalize_provider_name(item)
        if name and name not in result:
            result.append(name)
    return result
