"""Tests for log event redaction."""

from presentation_order.infra.logging import redact_secrets


def test_secret_keys_are_redacted():
    event = redact_secrets(None, "info", {"event": "db_connect", "database_url": "sqlite:///x.db"})
    assert event["database_url"] == "***REDACTED***"
    assert event["event"] == "db_connect"


def test_credentials_in_urls_are_masked():
    event = redact_secrets(None, "info", {"target": "postgresql://app:hunter2@db/orders"})
    assert "hunter2" not in event["target"]


def test_nested_values_are_walked():
    event = redact_secrets(None, "info", {"params": {"q": "token=abc123"}, "ids": [1, 2]})
    assert event["params"]["q"] == "token=***"
    assert event["ids"] == [1, 2]
