"""Data model and exceptions shared by the pipeline."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Field:
    selector: str
    metric_name: str


@dataclass(frozen=True, slots=True)
class FetchConfig:
    method: str
    url: str
    body: str = ""
    fields: Tuple[Field, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # lists are accepted but stored as a tuple
        object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(slots=True)
class ConversionResult:
    selector: str
    metric_name: str
    value: float
    error: Exception | None = None   # value is 0.0 whenever this is set

    @property
    def ok(self) -> bool:
        return self.error is None


class FetchError(RuntimeError):
    """Base class for failures that abort a whole fetch."""
    pass


class RequestFailedError(FetchError):
    """Raised when the request cannot be built or the transport fails."""
    pass


class FetchTimeoutError(FetchError, TimeoutError):
    """Raised when the endpoint does not answer within the timeout."""
    pass


class UnexpectedStatusError(FetchError):
    """Raised when the endpoint answers with anything other than 200 OK."""

    def __init__(self, status_code: int):
        super().__init__(f"unexpected status code: {status_code}")
        self.status_code = status_code


class DecodeError(FetchError):
    """Raised when the body is not a JSON object."""
    pass


class SelectorNotFoundError(LookupError):
    """Raised when a selector does not match anything in the document."""

    def __init__(self, selector: str, reason: str = ""):
        msg = f"selector {selector!r} not found"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.selector = selector


class SelectorSyntaxError(ValueError):
    """Raised when a selector string cannot be parsed."""
    pass


class CoercionError(ValueError):
    """Raised when a located value cannot be turned into a float."""
    pass


class ConfigError(ValueError):
    """Raised when a target configuration is missing or malformed."""
    pass
