"""The shared HTTP client.

Every HTTP call vectorauth makes goes through one :class:`httpx.AsyncClient`
created on first use. The client keeps no per-call state, so concurrent
logins share it safely. It is never closed behind a caller's back; the
command line closes it once on the way out with :func:`close_http_client`.

Tests and embedding applications can install their own client (for
example one built on :class:`httpx.MockTransport`) with
:func:`set_http_client`.
"""

from __future__ import annotations

from typing import Optional

import httpx

_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Return the process-wide client, creating it lazily."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient()
    return _client


def set_http_client(client: httpx.AsyncClient) -> None:
    """Install *client* as the process-wide client."""
    global _client
    _client = client


def reset_http_client() -> None:
    """Forget the current client without closing it."""
    global _client
    _client = None


async def close_http_client() -> None:
    """Close and forget the current client, if one was created."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
