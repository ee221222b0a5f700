"""Tests for error envelopes, redaction and audit logging."""

import logging

import pytest

from framework_eval.core.errors import (
    ERROR_MAPPINGS,
    FrameworkInvalidError,
    InvalidResponseError,
    ProviderError,
    ProviderUnavailableError,
    RateLimitExceededError,
    StorageError,
    error_to_response,
)
from framework_eval.core.observability import audit_log, redact_secrets


class TestErrorToResponse:
    @pytest.mark.parametrize(
        "exc,code,error_type",
        [
            (ProviderUnavailableError("down"), "UNAVAILABLE", "unavailable"),
            (InvalidResponseError("prose"), "INVALID_RESPONSE", "ai_provider"),
            (RateLimitExceededError(), "RATE_LIMIT_EXCEEDED", "rate_limit"),
            (FrameworkInvalidError("bad"), "FRAMEWORK_INVALID", "validation"),
            (StorageError("disk"), "STORAGE_ERROR", "internal"),
            (ProviderError("generic"), "AI_PROVIDER_ERROR", "ai_provider"),
        ],
    )
    def test_known_errors(self, exc, code, error_type):
        response = error_to_response(exc)

        assert response["success"] is False
        assert response["data"] == {"error_code": code, "error_type": error_type}

    def test_unknown_error_returns_none(self):
        assert error_to_response(KeyError("x")) is None

    def test_message_is_redacted(self):
        response = error_to_response(ProviderError("failed with api_key=supersecretvalue"))

        assert "supersecretvalue" not in response["error"]

    def test_every_mapping_is_an_exception(self):
        assert all(issubclass(exc_type, Exception) for exc_type in ERROR_MAPPINGS)


class TestRedactSecrets:
    def test_bare_google_key(self):
        key = "AIza" + "A" * 35
        assert key not in redact_secrets(f"url ?key={key}&alt=json")

    def test_bare_anthropic_key(self):
        key = "sk-ant-" + "b" * 30
        assert key not in redact_secrets(f"invalid x-api-key {key}")

    def test_bearer_token(self):
        assert "abcdef123456" not in redact_secrets("Authorization: Bearer abcdef123456")

    def test_plain_text_unchanged(self):
        assert redact_secrets("Request timed out after 30s") == "Request timed out after 30s"

    def test_empty(self):
        assert redact_secrets("") == ""


class TestAuditLog:
    def test_record_is_redacted(self, caplog):
        with caplog.at_level(logging.INFO, logger="framework_eval.audit"):
            audit_log("chunk_failed", chunk="Mini-functional", error="token=abcdefghijkl")

        record = caplog.records[-1]
        assert record.audit["event_type"] == "chunk_failed"
        assert record.audit["details"]["chunk"] == "Mini-functional"
        assert "abcdefghijkl" not in record.audit["details"]["error"]
