"""metricproxy - turn fields of a JSON HTTP endpoint into float metric values."""

from .core.model import (                                              # re-export
    Field, FetchConfig, ConversionResult,
    FetchError, RequestFailedError, FetchTimeoutError, UnexpectedStatusError, DecodeError,
    SelectorNotFoundError, SelectorSyntaxError, CoercionError, ConfigError,
)
from .core.coerce import to_float
from .core.selector import Selector, PathSelector, find
from .core.config import load_targets
from .converter import Converter, new_converter, convert_fields, decode_body
from .io.base import DEFAULT_TIMEOUT


async def fetch(config: FetchConfig, *, selector: Selector | None = None,
                timeout: float = DEFAULT_TIMEOUT) -> list[ConversionResult]:
    """Fetch and convert asynchronously (httpx)."""
    return await Converter(selector, timeout=timeout).fetch(config)


def fetch_sync(config: FetchConfig, *, selector: Selector | None = None,
               timeout: float = DEFAULT_TIMEOUT) -> list[ConversionResult]:
    """Fetch and convert synchronously (requests)."""
    return Converter(selector, timeout=timeout).fetch_sync(config)


__all__ = [
    "fetch", "fetch_sync", "to_float", "find", "load_targets",
    "Converter", "new_converter", "convert_fields", "decode_body",
    "Selector", "PathSelector", "DEFAULT_TIMEOUT",
    "Field", "FetchConfig", "ConversionResult",
    "FetchError", "RequestFailedError", "FetchTimeoutError", "UnexpectedStatusError", "DecodeError",
    "SelectorNotFoundError", "SelectorSyntaxError", "CoercionError", "ConfigError",
]
