"""Entry point for ``python -m metricproxy``."""

from .cli import app

app(prog_name="metricproxy")
