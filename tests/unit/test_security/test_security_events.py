import json
import logging

import pytest

from homebase.security import events


@pytest.mark.unit
class TestSecurityEvents:
    """Unit tests for the security event channel."""

    def test_payload_shape(self):
        payload = events.emit_security_event(
            events.AUTH_MISSING,
            source={"ip": "10.0.0.1", "path": "/api/recipes", "method": "GET"},
        )

        assert payload["event"] == "AUTH_MISSING"
        assert payload["outcome"] == "DENY"
        assert payload["severity"] == "WARNING"
        assert payload["source"]["ip"] == "10.0.0.1"
        assert payload["ts"].endswith("Z")

    def test_secrets_are_redacted(self):
        payload = events.emit_security_event(
            events.CSRF_INVALID,
            meta={"csrf_token": "abc", "Authorization": "Bearer xyz", "note": "ok"},
        )

        assert payload["meta"]["csrf_token"] == "REDACTED"
        assert payload["meta"]["Authorization"] == "REDACTED"
        assert payload["meta"]["note"] == "ok"

    def test_emails_are_hashed(self):
        payload = events.emit_security_event(events.AUTHZ_DENY, actor={"email": "alice@example.com"})

        assert payload["actor"]["email"] == events.safe_hash("alice@example.com")
        assert "alice" not in json.dumps(payload)

    def test_newlines_stripped(self):
        payload = events.emit_security_event(events.AUTH_INVALID, meta={"reason": "bad\nINJECTED"})
        assert "\n" not in payload["meta"]["reason"]

    def test_written_to_dedicated_logger(self, caplog):
        security_logger = events.get_security_logger()
        assert security_logger.propagate is False

        # caplog only sees propagated records, so attach its handler directly
        security_logger.addHandler(caplog.handler)
        try:
            with caplog.at_level(logging.INFO, logger=events.SECURITY_LOGGER_NAME):
                events.emit_security_event(events.RATE_LIMITED, meta={"rate_limit_key": "shopping"})
        finally:
            security_logger.removeHandler(caplog.handler)

        lines = [json.loads(r.getMessage()) for r in caplog.records if r.name == events.SECURITY_LOGGER_NAME]
        assert lines[-1]["event"] == "RATE_LIMITED"
        assert lines[-1]["meta"]["rate_limit_key"] == "shopping"
