"""Tests for debug-output redaction."""

from formlet_sdk._internal.dispatch.redaction import (
    REDACTED_VALUE,
    redact_headers,
    redact_payload,
)


class TestRedactPayload:
    """Tests for redact_payload function."""

    def test_redacts_submitted_secrets(self):
        """Should mask secrets a form submission may carry."""
        entry = {
            "namespace": "acme",
            "formlet": "signup",
            "password": "hunter2",
            "card_number": "4111111111111111",
            "email": "jane@example.com",
        }
        result = redact_payload(entry)
        assert result["password"] == REDACTED_VALUE
        assert result["card_number"] == REDACTED_VALUE
        assert result["email"] == "jane@example.com"
        assert result["namespace"] == "acme"

    def test_key_match_is_case_insensitive(self):
        """Should match sensitive keys regardless of case."""
        result = redact_payload({"Password": "x", "API_KEY": "y"})
        assert result == {"Password": REDACTED_VALUE, "API_KEY": REDACTED_VALUE}

    def test_redacts_nested_structures(self):
        """Should walk nested mappings and lists."""
        payload = {
            "namespaces": [
                {"name": "acme", "credentials": {"user": "u"}},
                {"name": "beta", "settings": {"token": "t", "theme": "dark"}},
            ],
        }
        result = redact_payload(payload)
        assert result["namespaces"][0]["credentials"] == REDACTED_VALUE
        assert result["namespaces"][1]["settings"] == {"token": REDACTED_VALUE, "theme": "dark"}

    def test_does_not_mutate_original(self):
        """Should return a new structure."""
        payload = {"entry": {"password": "hunter2"}}
        redact_payload(payload)
        assert payload["entry"]["password"] == "hunter2"

    def test_none_yields_empty_dict(self):
        """Should treat a missing payload as empty."""
        assert redact_payload(None) == {}


class TestRedactHeaders:
    """Tests for redact_headers function."""

    def test_masks_bearer_token(self):
        """Should keep the auth scheme and hide the key."""
        result = redact_headers({"authorization": "Bearer secret-key", "content-type": "application/json"})
        assert result["authorization"] == f"Bearer {REDACTED_VALUE}"
        assert result["content-type"] == "application/json"
