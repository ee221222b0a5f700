"""JSON envelope output for CLI commands.

Every command writes exactly one envelope to stdout (streaming mode aside):
``{"success": true, "data": ...}`` or ``{"success": false, "error": ...,
"data": {"error_code", "error_type", ...}}``. Envelopes are single-line JSON
so they can be piped straight into other tools.
"""

import json
import sys
from typing import Any, Dict, NoReturn, Optional

import click

from framework_eval.core.errors import error_to_response
from framework_eval.core.observability import redact_secrets


def _echo(payload: Dict[str, Any]) -> None:
    click.echo(json.dumps(payload, default=str))


def emit_success(data: Any) -> None:
    """Write a success envelope."""
    _echo({"success": True, "data": data})


def emit_error(
    message: str,
    *,
    code: str,
    error_type: str,
    details: Optional[Dict[str, Any]] = None,
) -> NoReturn:
    """Write an error envelope and exit with status 1."""
    data: Dict[str, Any] = {"error_code": code, "error_type": error_type}
    if details:
        data["details"] = details
    _echo({"success": False, "error": redact_secrets(message), "data": data})
    sys.exit(1)


def emit_exception(exc: Exception) -> NoReturn:
    """Render a known exception through ERROR_MAPPINGS, anything else as internal."""
    response = error_to_response(exc)
    if response is None:
        emit_error(
            str(exc) or type(exc).__name__,
            code="INTERNAL_ERROR",
            error_type="internal",
        )
    _echo(response)
    sys.exit(1)
