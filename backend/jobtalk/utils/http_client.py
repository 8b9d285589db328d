"""
Shared httpx helpers for the outbound government APIs.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from jobtalk.config import settings


@asynccontextmanager
async def client_scope(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    """Use the caller's client, or open (and close) one for this call."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds, follow_redirects=True) as owned:
        yield owned


def error_body(response: httpx.Response) -> object:
    """Upstream error payload: parsed JSON when possible, else truncated text."""
    try:
        return response.json()
    except ValueError:
        return response.text[:500]
