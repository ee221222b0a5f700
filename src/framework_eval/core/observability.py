"""Secret redaction and audit logging.

Every message that leaves the process (error envelopes, stream error events,
audit records) goes through :func:`redact_secrets` first. Audit records are
written to a dedicated ``framework_eval.audit`` logger so they can be routed
or filtered separately from diagnostic logs.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict

logger = logging.getLogger(__name__)

_audit_logger = logging.getLogger("framework_eval.audit")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Labelled secrets: ``api_key=...``, ``Bearer ...``, ``token: ...``
_SECRET_PATTERN = re.compile(
    r"(?i)"
    r"(?:"
    r"(?:api[_-]?key|token|bearer|authorization|secret|password|credential)"
    r"[\s:=]+"
    r")"
    r"['\"]?([^\s'\"]{8,})['\"]?",
)

# Bare provider keys that show up in URLs and SDK error strings
_BARE_KEY_PATTERNS = (
    re.compile(r"AIza[A-Za-z0-9_-]{30,}"),
    re.compile(r"sk-[A-Za-z0-9_-]{20,}"),
    re.compile(r"(?<=key=)[A-Za-z0-9_-]{20,}"),
)

_REDACTED = "****"


# ---------------------------------------------------------------------------
# Secret redaction
# ---------------------------------------------------------------------------


def redact_secrets(text: str) -> str:
    """Remove API keys and sensitive tokens from a text string.

    Scans for labelled secrets (``api_key=...``, ``Bearer ...``) and bare
    Google / Anthropic style keys and replaces the secret portion with
    ``"****"``.

    Args:
        text: Input text that may contain secrets.

    Returns:
        Text with secrets replaced by redacted placeholders.
    """
    if not text:
        return text

    for pattern in _BARE_KEY_PATTERNS:
        text = pattern.sub(_REDACTED, text)

    def _replace(match: re.Match[str]) -> str:
        full = match.group(0)
        secret = match.group(1)
        return full.replace(secret, _REDACTED)

    return _SECRET_PATTERN.sub(_replace, text)


def _redact_details(details: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in details.items():
        if isinstance(value, str):
            result[key] = redact_secrets(value)
        else:
            result[key] = value
    return result


# ---------------------------------------------------------------------------
# Audit logging
# ---------------------------------------------------------------------------


def audit_log(event_type: str, **details: Any) -> None:
    """Write a structured audit record.

    Args:
        event_type: Short event name (``"chunk_failed"``, ``"rate_limit_wait"``).
        **details: Event fields. String values are redacted.
    """
    record = {
        "event_type": event_type,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "details": _redact_details(details),
    }
    _audit_logger.info(f"AUDIT: {event_type}", extra={"audit": record})
