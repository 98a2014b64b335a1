"""HMAC request signing for the delivery provider.

The provider authenticates each call with

    Authorization: hmac <app_key>:<timestamp_ms>:<hex_digest>

where the digest is HMAC-SHA256 over the canonical string

    <timestamp>\\r\\n<METHOD>\\r\\n<path>\\r\\n\\r\\n<body_json>
"""

import hashlib
import hmac
import time
from dataclasses import dataclass

from delivery_gateway.exceptions import GatewaySigningError


@dataclass(frozen=True)
class SignatureInput:
    """Everything that goes into one request signature."""

    timestamp: int
    method: str
    path: str
    body_json: str = ""


def current_millis() -> int:
    """Milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def canonical_string(signature_input: SignatureInput) -> str:
    return (
        f"{signature_input.timestamp}\r\n"
        f"{signature_input.method}\r\n"
        f"{signature_input.path}\r\n\r\n"
        f"{signature_input.body_json}"
    )


def sign(secret: str, method: str, path: str, body: str, timestamp: int) -> str:
    """Compute the hex signature of a request.

    Args:
        secret: Provider app secret.
        method: HTTP verb as sent on the wire.
        path: Request path without host or query.
        body: Serialized JSON body exactly as transmitted ("" when bodyless).
        timestamp: Milliseconds since the epoch, repeated in the header.

    Returns:
        Lowercase hex HMAC-SHA256 digest (64 characters).

    Raises:
        GatewaySigningError: If the secret is empty or the input cannot be
            encoded as UTF-8.
    """
    if not secret:
        raise GatewaySigningError("signing secret must not be empty")

    message = canonical_string(
        SignatureInput(timestamp=timestamp, method=method, path=path, body_json=body or "")
    )
    try:
        key_bytes = secret.encode("utf-8")
        message_bytes = message.encode("utf-8")
    except UnicodeEncodeError as e:
        raise GatewaySigningError(f"signature input is not valid UTF-8: {e}") from e

    return hmac.new(key_bytes, message_bytes, hashlib.sha256).hexdigest()


def authorization_header(app_key: str, timestamp: int, digest: str) -> str:
    return f"hmac {app_key}:{timestamp}:{digest}"
