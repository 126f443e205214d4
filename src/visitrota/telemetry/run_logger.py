"""Context manager recording one JSONL line per schedule generation run."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from .jsonl import append_jsonl

STATUS_OK = "ok"
STATUS_ERROR = "error"
STATUS_TIMEOUT = "timeout"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(slots=True)
class RunTelemetryLogger(AbstractContextManager["RunTelemetryLogger"]):
    """Append a ``run`` record to ``log_path`` when a generation run ends.

    Parameters
    ----------
    log_path:
        JSONL file shared by every run; parent directories are created on first write.
    mode:
        ``"uniform"`` or ``"variable"``.
    config:
        Configuration summary (deacon/household counts, horizon, cadence).
    context:
        Caller metadata such as the CLI command and config path.

    A run that leaves the block through an exception is written with status ``"timeout"`` for
    :class:`TimeoutError` and ``"error"`` otherwise; the exception is never suppressed.
    """

    log_path: Path
    mode: str
    config: Mapping[str, Any] | None = None
    context: Mapping[str, Any] | None = None
    schema_version: str = "1.0"
    run_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    _started: float | None = field(default=None, init=False)
    _started_at: str | None = field(default=None, init=False)
    _written: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    def __enter__(self) -> "RunTelemetryLogger":
        self._started = time.perf_counter()
        self._started_at = _utc_timestamp()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self._write(status=STATUS_OK)
        else:
            status = STATUS_TIMEOUT if issubclass(exc_type, TimeoutError) else STATUS_ERROR
            self._write(status=status, error=repr(exc), error_type=exc_type.__name__)
        return False

    def elapsed(self) -> float:
        if self._started is None:
            return 0.0
        return time.perf_counter() - self._started

    def finalize(
        self,
        *,
        status: str = STATUS_OK,
        metrics: Mapping[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> None:
        """Write the run record now; the context exit then writes nothing."""
        self._write(status=status, metrics=metrics, warnings=warnings)

    def _write(
        self,
        *,
        status: str,
        metrics: Mapping[str, Any] | None = None,
        warnings: list[str] | None = None,
        error: str | None = None,
        error_type: str | None = None,
    ) -> None:
        if self._written:
            return
        append_jsonl(
            self.log_path,
            {
                "record_type": "run",
                "schema_version": self.schema_version,
                "run_id": self.run_id,
                "mode": self.mode,
                "status": status,
                "metrics": dict(metrics or {}),
                "warnings": list(warnings or []),
                "config": dict(self.config or {}),
                "context": dict(self.context or {}),
                "error": error,
                "error_type": error_type,
                "started_at": self._started_at,
                "finished_at": _utc_timestamp(),
                "duration_seconds": round(self.elapsed(), 3),
            },
        )
        self._written = True


__all__ = ["STATUS_OK", "STATUS_ERROR", "STATUS_TIMEOUT", "RunTelemetryLogger"]
