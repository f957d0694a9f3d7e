"""
Shared HTTP client for all upstream sources.

Module-level connection pool so catalog and population requests reuse
TCP/TLS connections instead of handshaking on each request.
"""

from typing import Optional

import httpx

from config import config


_async_client: Optional[httpx.AsyncClient] = None


def get_async_client() -> httpx.AsyncClient:
    """Get or create the shared async HTTP client with connection pooling."""
    global _async_client
    if _async_client is None or _async_client.is_closed:
        _async_client = httpx.AsyncClient(
            timeout=config.http_timeout,
            limits=httpx.Limits(
                max_keepalive_connections=10,
                max_connections=config.max_connections,
                keepalive_expiry=30.0
            )
        )
    return _async_client


async def close_async_client() -> None:
    """Close the shared client (called on app shutdown)."""
    global _async_client
    if _async_client is not None and not _async_client.is_closed:
        await _async_client.aclose()
    _async_client = None


def auth_headers(api_key: Optional[str]) -> dict:
    """Headers expected by both upstream APIs."""
    headers = {'Accept': 'application/json'}
    if api_key:
        headers['X-API-KEY'] = api_key
    return headers
