"""Synchronous HTTP transport using requests."""

import concurrent.futures
import logging
from typing import Tuple

import requests

from ..core.model import FetchTimeoutError, RequestFailedError
from .base import DEFAULT_TIMEOUT


logger = logging.getLogger(__name__)

# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


class RequestsTransport:
    """Issues single requests through the shared requests session.

    requests only bounds each connect and each socket read, so the whole
    exchange runs on a worker thread and the caller waits at most
    `timeout` seconds for status and body together.
    """

    def __init__(self, session: requests.Session | None = None):
        self._session = session or _get_session()

    def _exchange(self, method: str, url: str, body: bytes | None, timeout: float, holder: dict) -> Tuple[int, bytes]:
        response = self._session.request(method, url, data=body, timeout=timeout, stream=True)
        holder["response"] = response
        # .content reads the whole body
        return response.status_code, response.content

    def request(self, method: str, url: str, body: bytes | None, timeout: float = DEFAULT_TIMEOUT) -> Tuple[int, bytes]:
        logger.debug("%s %s (timeout=%ss)", method, url, timeout)
        holder: dict = {}
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        future = executor.submit(self._exchange, method, url, body, timeout, holder)
        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError as e:
            response = holder.get("response")
            if response is not None:
                # unblocks the worker still reading the body
                response.close()
            raise FetchTimeoutError(f"{method} {url} timed out after {timeout}s") from e
        except requests.Timeout as e:
            raise FetchTimeoutError(f"{method} {url} timed out after {timeout}s") from e
        except (requests.RequestException, ValueError) as e:
            # ValueError covers methods http.client refuses to put on the wire
            raise RequestFailedError(f"{method} {url} failed: {e}") from e
        finally:
            executor.shutdown(wait=False)
