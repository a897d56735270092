
"""CLI implementation for metricproxy."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from .converter import Converter
from .core.config import load_targets
from .core.model import ConfigError, Field, FetchConfig, FetchError
from .core.util import target_asdict
from .io.base import DEFAULT_TIMEOUT

app = typer.Typer(add_completion=False, help="Fetch JSON endpoints and convert selected fields into metric values.")

logger = logging.getLogger(__name__)


def parse_field_option(option: str) -> Field:
    """Parse a ``SELECTOR=METRIC`` option value."""
    selector, sep, metric_name = option.rpartition("=")
    if not sep or not metric_name:
        raise typer.BadParameter(f"expected SELECTOR=METRIC, got {option!r}", param_hint="--field")
    return Field(selector=selector, metric_name=metric_name)


def collect_targets(config: Optional[str], url: Optional[str], method: str, body: str,
                    fields: List[str]) -> List[FetchConfig]:
    """Get targets from the config file (or stdin) plus the ad-hoc --url target."""
    targets: List[FetchConfig] = []
    if config == "-":
        targets.extend(load_targets(sys.stdin))
    elif config:
        targets.extend(load_targets(Path(config)))

    if url:
        targets.append(FetchConfig(
            method=method.upper(),
            url=url,
            body=body,
            fields=[parse_field_option(f) for f in fields],
        ))
    elif fields:
        raise typer.BadParameter("--field needs --url", param_hint="--field")
    return targets


async def _batch_fetch(targets: List[FetchConfig], timeout: float) -> List[Dict[str, Any]]:
    """Fetch all targets concurrently."""
    converter = Converter(timeout=timeout)
    results = await asyncio.gather(*(converter.fetch(t) for t in targets), return_exceptions=True)
    processed = []
    for target, res in zip(targets, results):
        if isinstance(res, FetchError):
            logger.warning("%s %s failed: %s", target.method, target.url, res)
            processed.append(target_asdict(target, error=res))
        elif isinstance(res, BaseException):
            raise res
        else:
            processed.append(target_asdict(target, res))
    return processed


def _sync_fetch(targets: List[FetchConfig], timeout: float) -> List[Dict[str, Any]]:
    converter = Converter(timeout=timeout)
    processed = []
    for target in targets:
        try:
            processed.append(target_asdict(target, converter.fetch_sync(target)))
        except FetchError as e:
            logger.warning("%s %s failed: %s", target.method, target.url, e)
            processed.append(target_asdict(target, error=e))
    return processed


@app.command()
def main(
    config: Optional[str] = typer.Argument(None, help="JSON file with targets, or '-' for stdin"),
    url: Optional[str] = typer.Option(None, "--url", help="Fetch a single ad-hoc URL"),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method for --url"),
    body: str = typer.Option("", "--body", "-d", help="Request body for --url, sent as-is"),
    fields: Optional[List[str]] = typer.Option(None, "--field", "-f", help="SELECTOR=METRIC for --url, repeatable"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", min=0.001, help="Request timeout in seconds"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force JSON-lines output"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    sync: bool = typer.Option(False, "--sync", help="Fetch targets one after another with blocking I/O"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """Fetch every target and print the converted field values as JSON."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        targets = collect_targets(config, url, method, body, fields or [])
    except (ConfigError, OSError) as e:
        typer.echo(f"Cannot load targets: {e}", err=True)
        raise typer.Exit(code=1)

    if not targets:
        typer.echo("No targets given.", err=True)
        raise typer.Exit(code=1)

    if sync:
        results = _sync_fetch(targets, timeout)
    else:
        results = asyncio.run(_batch_fetch(targets, timeout))

    # open output sink
    sink = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        if len(targets) == 1 and not jsonl:
            json.dump(results[0], sink, indent=2)
            sink.write("\n")
        else:
            for res in results:
                sink.write(json.dumps(res))
                sink.write("\n")
    finally:
        if output:
            sink.close()

    # per-field errors are in the output; only failed fetches change the exit code
    if any(not r["success"] for r in results):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
