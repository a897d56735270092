from __future__ import annotations
from typing import Any, Dict, Iterable
from .model import ConversionResult, FetchConfig


def result_asdict(res: ConversionResult) -> Dict[str, Any]:
    """Return a JSON-serialisable dict for one field result."""
    return {
        "selector": res.selector,
        "metric_name": res.metric_name,
        "value": res.value,
        "success": res.ok,
        "error": None if res.error is None else str(res.error),
    }


def target_asdict(
    config: FetchConfig,
    results: Iterable[ConversionResult] | None = None,
    error: BaseException | str | None = None,
) -> Dict[str, Any]:
    """Summarise one fetched target; `error` marks a failed fetch."""
    payload: Dict[str, Any] = {"method": config.method, "url": config.url}
    if error is not None:
        payload.update({"success": False, "error": str(error), "results": []})
        return payload
    payload.update({
        "success": True,
        "error": None,
        "results": [result_asdict(r) for r in results or ()],
    })
    return payload
