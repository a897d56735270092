"""Loading of scrape target definitions from JSON."""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, List, TextIO, Union

from .model import ConfigError, Field, FetchConfig

logger = logging.getLogger(__name__)


def _parse_field(raw: Any, where: str) -> Field:
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: field must be an object, got {type(raw).__name__}")
    selector = raw.get("selector")
    metric_name = raw.get("metric_name", raw.get("metric"))
    if not isinstance(selector, str):
        raise ConfigError(f"{where}: 'selector' must be a string")
    if not isinstance(metric_name, str) or not metric_name:
        raise ConfigError(f"{where}: 'metric_name' must be a non-empty string")
    return Field(selector=selector, metric_name=metric_name)


def _parse_target(raw: Any, index: int) -> FetchConfig:
    where = f"target {index}"
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: must be an object, got {type(raw).__name__}")

    url = raw.get("url")
    if not isinstance(url, str) or not url:
        raise ConfigError(f"{where}: 'url' is required")
    method = raw.get("method", "GET")
    if not isinstance(method, str) or not method:
        raise ConfigError(f"{where}: 'method' must be a non-empty string")

    body = raw.get("body", "")
    if body is None:
        body = ""
    elif not isinstance(body, str):
        # structured bodies (e.g. JSON-RPC payloads) are sent serialised
        body = json.dumps(body)

    raw_fields = raw.get("fields", [])
    if not isinstance(raw_fields, list):
        raise ConfigError(f"{where}: 'fields' must be a list")
    fields = [_parse_field(f, f"{where} field {i}") for i, f in enumerate(raw_fields)]

    return FetchConfig(method=method.upper(), url=url, body=body, fields=fields)


def parse_targets(document: Any) -> List[FetchConfig]:
    """Build FetchConfigs from an already decoded configuration document."""
    if isinstance(document, dict):
        if "targets" not in document:
            raise ConfigError("configuration object needs a 'targets' list")
        document = document["targets"]
    if not isinstance(document, list):
        raise ConfigError("configuration must be a list of targets or an object with 'targets'")
    return [_parse_target(raw, i) for i, raw in enumerate(document)]


def load_targets(source: Union[str, Path, TextIO]) -> List[FetchConfig]:
    """Read target definitions from a JSON file path or an open text stream."""
    try:
        if hasattr(source, "read"):
            document = json.load(source)
        else:
            with open(source, "r", encoding="utf-8") as fh:
                document = json.load(fh)
    except json.JSONDecodeError as e:
        raise ConfigError(f"configuration is not valid JSON: {e}") from e
    targets = parse_targets(document)
    logger.debug("loaded %d target(s)", len(targets))
    return targets
