"""HTTP client utilities with retry, timeout handling, and connection pooling."""

import asyncio
import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from expose.config.loader import get_settings

logger = logging.getLogger(__name__)


def default_headers() -> dict[str, str]:
    settings = get_settings()
    return {"User-Agent": f"{settings.server_name}/{settings.server_version}"}


# =============================================================================
# Connection Pooling - Shared HTTP Client
# =============================================================================

_shared_client: httpx.AsyncClient | None = None
_client_lock = asyncio.Lock()


async def get_shared_client() -> httpx.AsyncClient:
    """Get a shared HTTP client with connection pooling, used by tool providers."""
    global _shared_client

    if _shared_client is None or _shared_client.is_closed:
        async with _client_lock:
            # Double-check after acquiring lock
            if _shared_client is None or _shared_client.is_closed:
                settings = get_settings()
                _shared_client = httpx.AsyncClient(
                    timeout=httpx.Timeout(float(settings.default_timeout)),
                    follow_redirects=True,
                    headers=default_headers(),
                    limits=httpx.Limits(
                        max_keepalive_connections=10,
                        max_connections=20,
                        keepalive_expiry=30.0,
                    ),
                )
                logger.debug("Created shared HTTP client with connection pooling")

    return _shared_client


def set_shared_client(client: httpx.AsyncClient | None) -> None:
    """Replace the shared client (tests inject one with a mock transport)."""
    global _shared_client
    _shared_client = client


async def close_shared_client() -> None:
    """Close the shared HTTP client (call on shutdown)."""
    global _shared_client
    if _shared_client is not None:
        await _shared_client.aclose()
        _shared_client = None
        logger.debug("Closed shared HTTP client")


def create_http_client(
    timeout: float | None = None,
    base_url: str | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """
    Create an async HTTP client with sensible defaults.

    Args:
        timeout: Request timeout in seconds. Uses default from settings if None.
        base_url: Optional base URL for all requests.
        headers: Extra headers sent with every request.

    Returns:
        Configured httpx.AsyncClient instance.
    """
    settings = get_settings()

    if timeout is None:
        timeout = float(settings.default_timeout)

    return httpx.AsyncClient(
        base_url=base_url or "",
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers={**default_headers(), **(headers or {})},
    )


# =============================================================================
# Retry Decorator
# =============================================================================

# Retry decorator for idempotent provider requests
http_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
    reraise=True,
)


# =============================================================================
# HTTP Helper Functions (using shared client)
# =============================================================================

@http_retry
async def fetch_json(
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Fetch JSON from a URL with retries.

    Raises:
        httpx.HTTPStatusError: On HTTP error status.
        httpx.TimeoutException: On timeout.
        ValueError: If response is not valid JSON.
    """
    client = await get_shared_client()
    response = await client.get(url, params=params, headers=headers)
    response.raise_for_status()
    return response.json()


async def send_json(
    method: str,
    url: str,
    data: dict[str, Any],
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Send a JSON body (POST/PATCH) and return the JSON reply.

    Not retried: these requests create or modify records.

    Raises:
        httpx.HTTPStatusError: On HTTP error status.
        httpx.TimeoutException: On timeout.
        ValueError: If response is not valid JSON.
    """
    client = await get_shared_client()
    response = await client.request(method, url, json=data, headers=headers)
    response.raise_for_status()
    return response.json()
