from __future__ import annotations

import asyncio
import logging
import os

import httpx


LOGGER = logging.getLogger(__name__)

TIMEOUT_ENV = "MYHTTP_TIMEOUT"
DEFAULT_TIMEOUT_SECONDS = 30

DEFAULT_HEADERS = {
    # Request pages as a regular desktop browser would.
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    # One-shot batch: no need to keep connections open.
    "Connection": "close",
}


class FetchError(Exception):
    """Transport-level failure of a single GET (DNS, connect, TLS, timeout, bad URL)."""

    def __init__(self, url: str, reason: object) -> None:
        self.url = url
        self.reason = reason
        detail = str(reason) or type(reason).__name__
        super().__init__(f'Get "{url}": {detail}')


def timeout_from_env() -> int:
    raw = os.getenv(TIMEOUT_ENV)
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        seconds = int(raw.strip())
    except ValueError:
        LOGGER.warning("ignoring %s=%r (not an integer), using %ss", TIMEOUT_ENV, raw, DEFAULT_TIMEOUT_SECONDS)
        return DEFAULT_TIMEOUT_SECONDS
    if seconds < 1:
        LOGGER.warning("ignoring %s=%r (must be >= 1), using %ss", TIMEOUT_ENV, raw, DEFAULT_TIMEOUT_SECONDS)
        return DEFAULT_TIMEOUT_SECONDS
    return seconds


def build_client(
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        headers=DEFAULT_HEADERS,
        follow_redirects=True,
        limits=httpx.Limits(max_keepalive_connections=0),
        transport=transport,
    )


async def fetch_bytes(
    client: httpx.AsyncClient,
    url: str,
    *,
    total_timeout: float | None = None,
) -> bytes:
    """GET ``url`` once and return the raw body.

    Every HTTP status counts as a successful fetch. Only transport failures
    raise, as :class:`FetchError`. ``total_timeout`` bounds the whole request
    (connect + read), on top of the client's per-phase timeouts.
    """

    try:
        if total_timeout is None:
            response = await client.get(url)
        else:
            try:
                response = await asyncio.wait_for(client.get(url), timeout=total_timeout)
            except asyncio.TimeoutError as exc:
                raise FetchError(url, f"timeout after {total_timeout:g}s") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(url, exc) from exc

    LOGGER.debug("fetched url=%s status=%s bytes=%d", url, response.status_code, len(response.content))
    return response.content
