"""Transport layer for metricproxy - one HTTP request per fetch."""

# Re-export these for import convenience
from .base import Transport, AsyncTransport, DEFAULT_TIMEOUT
from .http_sync import RequestsTransport
from .http_async import HttpxTransport

__all__ = [
    "Transport", "AsyncTransport", "DEFAULT_TIMEOUT",
    "RequestsTransport", "HttpxTransport",
]
