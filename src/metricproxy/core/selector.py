"""JSONPath selectors for locating values inside a decoded JSON document.

The default PathSelector accepts JSONPath as implemented by ``jsonpath_ng``
and lets the ``$`` root be left out, so ``result.items[0].value``,
``.result.items[0].value`` and ``$.result.items[0].value`` all address the
same node. An empty selector addresses the whole document. When an
expression matches several nodes the first match wins.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

from jsonpath_ng import parse
from jsonpath_ng.jsonpath import JSONPath
from jsonpath_ng.exceptions import JSONPathError

from .model import SelectorNotFoundError, SelectorSyntaxError


@runtime_checkable
class Selector(Protocol):
    """Protocol for selector implementations."""

    def find(self, tree: Any, selector: str) -> Any:
        """Return the value addressed by `selector`.
        If nothing matches → raise SelectorNotFoundError.
        """
        ...


def _normalise(selector: str) -> str:
    if selector in ("", ".", "$"):
        return "$"
    if selector.startswith("."):
        return "$" + selector
    return selector


@lru_cache(maxsize=256)
def parse_selector(selector: str) -> JSONPath:
    """Compile `selector` into a JSONPath expression."""
    try:
        return parse(_normalise(selector))
    except JSONPathError as e:
        raise SelectorSyntaxError(f"malformed selector {selector!r}: {e}") from e


class PathSelector:
    """JSONPath selector returning the first match."""

    def find(self, tree: Any, selector: str) -> Any:
        expr = parse_selector(selector)
        try:
            matches = expr.find(tree)
        except (LookupError, TypeError) as e:
            # an index applied to an object
            raise SelectorNotFoundError(selector, str(e)) from e
        if not matches:
            raise SelectorNotFoundError(selector)
        return matches[0].value


# default instance used when no selector is injected
_DEFAULT = PathSelector()


def find(tree: Any, selector: str) -> Any:
    """Locate `selector` in `tree` with the default PathSelector."""
    return _DEFAULT.find(tree, selector)
