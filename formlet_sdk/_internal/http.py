"""Shared HTTP client configuration."""

import httpx

from formlet_sdk._version import __version__

DEFAULT_TIMEOUT = 10.0


def default_headers(api_key: str) -> dict[str, str]:
    """Headers sent with every dispatch request.

    Args:
        api_key: The formlet.io API key used as a bearer token.

    Returns:
        Header mapping with lower-case names.
    """
    return {
        "content-type": "application/json",
        "connection": "keep-alive",
        "authorization": f"Bearer {api_key}",
    }


def create_http_client(*, timeout: float = DEFAULT_TIMEOUT) -> httpx.Client:
    """Create configured HTTP client.

    Args:
        timeout: Request timeout in seconds.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        headers={"User-Agent": f"formlet-sdk/{__version__}"},
    )
