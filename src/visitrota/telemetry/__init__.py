"""Run telemetry (JSONL records)."""

from .jsonl import append_jsonl, read_jsonl
from .run_logger import STATUS_ERROR, STATUS_OK, STATUS_TIMEOUT, RunTelemetryLogger

__all__ = [
    "append_jsonl",
    "read_jsonl",
    "RunTelemetryLogger",
    "STATUS_OK",
    "STATUS_ERROR",
    "STATUS_TIMEOUT",
]
