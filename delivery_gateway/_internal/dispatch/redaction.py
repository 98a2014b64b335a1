"""Redaction of sensitive values before request data is logged."""

from collections.abc import Mapping
from typing import Any

REDACT_KEYS: frozenset[str] = frozenset({
    "authorization",
    "proxy-authorization",
    "x-api-key",
    "api_key",
    "app_key",
    "appkey",
    "app_secret",
    "appsecret",
    "secret",
    "token",
    "access_token",
    "password",
    "cookie",
    "set-cookie",
})

REDACTED_VALUE = "[REDACTED]"


def redact_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively redact sensitive keys from a mapping.

    Key matching is case-insensitive, so header sets and JSON bodies share
    the same rules. The original mapping is never mutated.

    Args:
        payload: Headers or a decoded JSON object.

    Returns:
        A new dictionary with sensitive values replaced by "[REDACTED]".
    """
    return _redact_recursive(payload)


def _redact_recursive(obj: Any) -> Any:
    """Recursively redact sensitive keys."""
    if isinstance(obj, Mapping):
        result = {}
        for key, value in obj.items():
            key_lower = key.lower() if isinstance(key, str) else key
            if key_lower in REDACT_KEYS:
                result[key] = REDACTED_VALUE
            else:
                result[key] = _redact_recursive(value)
        return result
    elif isinstance(obj, list):
        return [_redact_recursive(item) for item in obj]
    else:
        return obj
