"""Shared provider utilities for HTTP-backed evaluation providers.

Utilities are organized by cohesion:
    Prompt budgeting:
        - fit_prompt(prompt, max_chars) -> EvaluationPrompt
    Response parsing:
        - strip_code_fences(text) -> str
        - extract_json(text) -> Optional[str]
        - parse_structured_output(text, provider=...) -> dict
    HTTP helpers:
        - parse_retry_after(response) -> Optional[float]
        - extract_error_message(response) -> str

SECURITY: error parsing redacts API keys; never expose secrets in logs,
error messages, or return values.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable, Optional

from framework_eval.core.errors import InvalidResponseError
from framework_eval.core.observability import redact_secrets
from framework_eval.core.providers.base import EvaluationPrompt

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TRUNCATION_MARKER = "\n[... content truncated ...]"

_CODE_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)```")


# ---------------------------------------------------------------------------
# Prompt budgeting
# ---------------------------------------------------------------------------


def fit_prompt(prompt: EvaluationPrompt, max_chars: int) -> EvaluationPrompt:
    """Shrink *prompt* to *max_chars* by truncating its content only.

    Instructions, preamble and system text are never cut. When the fixed
    parts alone exceed the budget the content is emptied down to the marker.

    Args:
        prompt: Prompt to fit
        max_chars: Total character budget (``len(prompt)``); <= 0 disables

    Returns:
        The same prompt when it already fits, else a truncated copy
    """
    if max_chars <= 0 or len(prompt) <= max_chars:
        return prompt

    overflow = len(prompt) - max_chars
    keep = max(0, len(prompt.content) - overflow - len(TRUNCATION_MARKER))
    truncated = prompt.content[:keep].rstrip() + TRUNCATION_MARKER
    logger.debug(
        "Truncated prompt content from %d to %d chars (budget %d)",
        len(prompt.content),
        len(truncated),
        max_chars,
    )
    return replace(prompt, content=truncated)


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def strip_code_fences(text: str) -> str:
    """Return the body of the first code fence holding an object, else *text*."""
    for match in _CODE_FENCE_PATTERN.findall(text):
        body = match.strip()
        if body.startswith("{"):
            return body
    return text.strip()


def _balanced_object_at(content: str, start: int) -> Optional[str]:
    """Return the brace-balanced object starting at *start*, if it closes."""
    depth = 0
    in_string = False
    escape = False
    for i, char in enumerate(content[start:], start):
        if escape:
            escape = False
            continue
        if char == "\\" and in_string:
            escape = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[start : i + 1]
    return None


def extract_json(content: str) -> Optional[str]:
    """Extract the first top-level JSON object from content.

    Handles JSON wrapped in markdown code blocks or mixed with explanatory
    text. Braces inside JSON strings are ignored. Brace groups in prose that
    do not decode (``for {category}: {...}``) are skipped in favour of the
    next one that does.

    Args:
        content: Raw content that may contain JSON

    Returns:
        Extracted JSON string or None if not found. When no brace group
        decodes, the first balanced one is returned so the caller can
        report the decode error.
    """
    content = strip_code_fences(content)

    first_balanced: Optional[str] = None
    brace_start = content.find("{")
    while brace_start != -1:
        candidate = _balanced_object_at(content, brace_start)
        if candidate is None:
            brace_start = content.find("{", brace_start + 1)
            continue
        try:
            json.loads(candidate)
        except json.JSONDecodeError:
            if first_balanced is None:
                first_balanced = candidate
            # Objects nested in an undecodable group are not candidates
            brace_start = content.find("{", brace_start + len(candidate))
            continue
        return candidate

    return first_balanced


def parse_structured_output(text: str, *, provider: Optional[str] = None) -> dict[str, Any]:
    """Decode the JSON object in a backend's text answer.

    Args:
        text: Raw model output
        provider: Provider name recorded on the error

    Returns:
        Decoded JSON object

    Raises:
        InvalidResponseError: If no JSON object can be located or decoded
    """
    excerpt = redact_secrets((text or "")[: InvalidResponseError.MAX_EXCERPT_CHARS])

    candidate = extract_json(text or "")
    if candidate is None:
        raise InvalidResponseError(
            "No JSON object found in provider response",
            provider=provider,
            excerpt=excerpt,
        )

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise InvalidResponseError(
            f"Provider response is not valid JSON: {exc.msg}",
            provider=provider,
            excerpt=excerpt,
        ) from exc

    if not isinstance(data, dict):
        raise InvalidResponseError(
            "Provider response JSON is not an object",
            provider=provider,
            excerpt=excerpt,
        )
    return data


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def parse_retry_after(response: "httpx.Response") -> Optional[float]:
    """Parse the ``Retry-After`` header from an HTTP response.

    Handles numeric (integer or float) values only. RFC 7231 date-based
    values return ``None``.

    Args:
        response: An httpx Response object.

    Returns:
        Seconds to wait before retrying, or ``None`` if the header is
        missing or unparseable.
    """
    retry_after = response.headers.get("Retry-After")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            pass
    return None


def extract_error_message(
    response: "httpx.Response",
    *,
    provider_format: Optional[Callable[[dict[str, Any]], str]] = None,
) -> str:
    """Extract and redact an error message from an HTTP error response.

    Tries to parse JSON from the response body. If *provider_format* is
    given it is called first with the parsed JSON dict; if it returns a
    non-empty string that value is used. Otherwise the standard
    ``{"error": ...}`` / ``{"message": ...}`` patterns are tried.

    Args:
        response: An httpx Response object.
        provider_format: Optional callable ``(json_data) -> str`` for
            provider-specific JSON shapes.

    Returns:
        A human-readable, secret-redacted error message.
    """
    try:
        data = response.json()
    except ValueError:
        text = response.text[:200] if response.text else "Unknown error"
        return redact_secrets(text)

    if not isinstance(data, dict):
        return redact_secrets(response.text[:200])

    if provider_format is not None:
        result = provider_format(data)
        if result:
            return redact_secrets(result)

    error_field = data.get("error")
    if isinstance(error_field, dict):
        msg = error_field.get("message", str(error_field))
    elif isinstance(error_field, str):
        msg = error_field
    else:
        msg = data.get("message", response.text[:200])

    return redact_secrets(str(msg))
