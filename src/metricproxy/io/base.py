"""Base protocols and shared constants for the transport layer."""

from typing import Protocol, Tuple, runtime_checkable


DEFAULT_TIMEOUT = 2.0  # seconds, covers connect + read


@runtime_checkable
class Transport(Protocol):
    """Protocol for synchronous HTTP transports."""

    def request(self, method: str, url: str, body: bytes | None, timeout: float) -> Tuple[int, bytes]:
        """Issue one request and return ``(status_code, body)``.
        Timeout → raise FetchTimeoutError, other failures → RequestFailedError.
        """
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Protocol for asynchronous HTTP transports."""

    async def request(self, method: str, url: str, body: bytes | None, timeout: float) -> Tuple[int, bytes]:
        """Issue one request and return ``(status_code, body)``.
        Timeout → raise FetchTimeoutError, other failures → RequestFailedError.
        """
        ...
