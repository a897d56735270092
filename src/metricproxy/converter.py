"""Fetch a JSON document and convert selected fields into metric values."""

from __future__ import annotations
import json
import logging
from typing import Any, Dict, Iterable, List

from .core.coerce import to_float
from .core.model import (
    CoercionError,
    ConversionResult,
    DecodeError,
    Field,
    FetchConfig,
    RequestFailedError,
    SelectorNotFoundError,
    SelectorSyntaxError,
    UnexpectedStatusError,
)
from .core.selector import PathSelector, Selector
from .io.base import DEFAULT_TIMEOUT, AsyncTransport, Transport
from .io.http_async import HttpxTransport
from .io.http_sync import RequestsTransport

logger = logging.getLogger(__name__)

HTTP_OK = 200


def decode_body(data: bytes) -> Dict[str, Any]:
    """Decode a response body that must hold a single JSON object."""
    try:
        tree = json.loads(data)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and int digit limits
        raise DecodeError(f"response body is not valid JSON: {e}") from e
    if not isinstance(tree, dict):
        raise DecodeError(f"expected a JSON object at the top level, got {type(tree).__name__}")
    return tree


def convert_field(tree: Any, field: Field, selector: Selector) -> ConversionResult:
    """Locate and coerce one field. Failures end up in the result, never raised."""
    try:
        value = to_float(selector.find(tree, field.selector))
    except (SelectorNotFoundError, SelectorSyntaxError, CoercionError) as e:
        logger.debug("field %s (%s) failed: %s", field.metric_name, field.selector, e)
        return ConversionResult(field.selector, field.metric_name, 0.0, e)
    return ConversionResult(field.selector, field.metric_name, value)


def convert_fields(tree: Any, fields: Iterable[Field], selector: Selector) -> List[ConversionResult]:
    """One result per field, in field order."""
    return [convert_field(tree, f, selector) for f in fields]


def _request_body(config: FetchConfig) -> bytes | None:
    if not config.method or not config.url:
        raise RequestFailedError(f"method and url are required (method={config.method!r}, url={config.url!r})")
    # an empty body means no body at all
    return config.body.encode("utf-8") if config.body else None


def _check_status(config: FetchConfig, status_code: int) -> None:
    if status_code != HTTP_OK:
        logger.debug("%s %s answered %d", config.method, config.url, status_code)
        raise UnexpectedStatusError(status_code)


class Converter:
    """Fetch-convert pipeline bound to a selector and a request timeout.

    Each call issues exactly one request and keeps no state afterwards, so
    a single Converter may serve any number of concurrent callers.
    """

    def __init__(
        self,
        selector: Selector | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Transport | None = None,
        async_transport: AsyncTransport | None = None,
    ):
        self.selector = selector or PathSelector()
        self.timeout = timeout
        self._transport = transport
        self._async_transport = async_transport

    def fetch_sync(self, config: FetchConfig) -> List[ConversionResult]:
        """Fetch `config.url` synchronously and convert every configured field.

        Raises a FetchError subclass when the request, the status code or
        the body decoding fails; per-field problems are reported in the
        returned results instead.
        """
        body = _request_body(config)
        transport = self._transport or RequestsTransport()
        status_code, data = transport.request(config.method, config.url, body, self.timeout)
        _check_status(config, status_code)
        return convert_fields(decode_body(data), config.fields, self.selector)

    async def fetch(self, config: FetchConfig) -> List[ConversionResult]:
        """Asynchronous counterpart of :meth:`fetch_sync`."""
        body = _request_body(config)
        transport = self._async_transport or HttpxTransport()
        status_code, data = await transport.request(config.method, config.url, body, self.timeout)
        _check_status(config, status_code)
        return convert_fields(decode_body(data), config.fields, self.selector)


def new_converter(selector: Selector | None = None, *, timeout: float = DEFAULT_TIMEOUT) -> Converter:
    """Create a Converter with the default transports."""
    return Converter(selector, timeout=timeout)
