"""Redaction of sensitive values before envelopes reach debug output."""

from collections.abc import Mapping
from typing import Any

REDACT_KEYS: frozenset[str] = frozenset({
    "api_key",
    "apikey",
    "token",
    "secret",
    "password",
    "authorization",
    "access_token",
    "refresh_token",
    "private_key",
    "credentials",
    "card_number",
    "cvv",
    "ssn",
})

REDACTED_VALUE = "[REDACTED]"


def redact_payload(payload: Mapping[str, Any] | None) -> dict[str, Any]:
    """Recursively redact sensitive keys from an envelope section.

    Form entries routinely carry user-submitted secrets (passwords, card
    numbers), so anything headed for a log goes through here first. The
    original mapping is never mutated.

    Args:
        payload: The mapping to redact; None yields an empty dict.

    Returns:
        A new dictionary with sensitive values replaced by "[REDACTED]".
    """
    if payload is None:
        return {}
    return _redact(payload)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Mask credential headers, keeping only the auth scheme."""
    result = {}
    for name, value in headers.items():
        if name.lower() == "authorization":
            scheme, _, _ = value.partition(" ")
            result[name] = f"{scheme} {REDACTED_VALUE}"
        else:
            result[name] = value
    return result


def _redact(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {
            key: REDACTED_VALUE
            if isinstance(key, str) and key.lower() in REDACT_KEYS
            else _redact(value)
            for key, value in obj.items()
        }
    elif isinstance(obj, (list, tuple)):
        return [_redact(item) for item in obj]
    else:
        return obj
