"""Asynchronous HTTP transport using httpx."""

import asyncio
import logging
from typing import Optional, Tuple

import httpx

from ..core.model import FetchTimeoutError, RequestFailedError
from .base import DEFAULT_TIMEOUT


logger = logging.getLogger(__name__)


class HttpxTransport:
    """Issues single requests through httpx.

    A client passed in is reused and left open; without one, each request
    gets its own short-lived client, so the transport is never tied to the
    event loop of an earlier call. `timeout` bounds the whole exchange,
    body included, not just each socket read.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client

    async def _send(self, method: str, url: str, body: bytes | None, timeout: float) -> Tuple[int, bytes]:
        if self._client is not None:
            response = await self._client.request(method, url, content=body, timeout=timeout)
            return response.status_code, response.content
        async with httpx.AsyncClient(follow_redirects=True) as client:
            response = await client.request(method, url, content=body, timeout=timeout)
            return response.status_code, response.content

    async def request(self, method: str, url: str, body: bytes | None, timeout: float = DEFAULT_TIMEOUT) -> Tuple[int, bytes]:
        logger.debug("%s %s (timeout=%ss)", method, url, timeout)
        try:
            return await asyncio.wait_for(self._send(method, url, body, timeout), timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise FetchTimeoutError(f"{method} {url} timed out after {timeout}s") from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise RequestFailedError(f"{method} {url} failed: {e}") from e
