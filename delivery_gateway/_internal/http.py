"""Shared HTTP client configuration."""

import httpx

from delivery_gateway._version import __version__

DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_MAX_CONNECTIONS = 100
DEFAULT_MAX_KEEPALIVE_CONNECTIONS = 20


def create_http_client(
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
    max_keepalive_connections: int = DEFAULT_MAX_KEEPALIVE_CONNECTIONS,
    base_url: str | None = None,
) -> httpx.Client:
    """Create configured, connection-pooled HTTP client.

    Args:
        timeout_ms: Connect/read timeout in milliseconds.
        max_connections: Upper bound on pooled connections.
        max_keepalive_connections: Idle connections kept open for reuse.
        base_url: Optional base URL for all requests.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout_ms / 1000,
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        ),
        base_url=base_url or "",
        headers={"User-Agent": f"delivery-gateway/{__version__}"},
    )
