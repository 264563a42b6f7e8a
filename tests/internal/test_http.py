"""Tests for shared HTTP configuration."""

import httpx

from formlet_sdk._internal.http import create_http_client, default_headers
from formlet_sdk._version import __version__


def test_default_headers():
    """Should send JSON with keep-alive and a bearer token."""
    assert default_headers("abc") == {
        "content-type": "application/json",
        "connection": "keep-alive",
        "authorization": "Bearer abc",
    }


def test_create_http_client():
    """Should identify the SDK and apply the timeout in seconds."""
    with create_http_client(timeout=2.5) as client:
        assert isinstance(client, httpx.Client)
        assert client.headers["user-agent"] == f"formlet-sdk/{__version__}"
        assert client.timeout.read == 2.5
