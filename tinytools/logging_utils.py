"""Helpers for structured batch-run logging."""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Dict
from typing import Iterator
from typing import Optional

SUMMARY_PREFIX = "RUN_SUMMARY"


@dataclass
class _RunSummaryState:
    run: str
    logger: logging.Logger
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    start_monotonic: float = field(default_factory=time.perf_counter)
    status: str = "success"
    attributes: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, float] = field(default_factory=dict)
    error_type: Optional[str] = None
    error_note: Optional[str] = None

    def add_metric(self, name: str, value: Optional[float]) -> None:
        """Record a numeric metric if a value is provided."""
        if value is None:
            return
        if isinstance(value, bool):  # treat bools as integers
            value = int(value)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        self.metrics[name] = value

    def add_attribute(self, name: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, (str, int, float, bool)):
            self.attributes[name] = value
        else:
            self.attributes[name] = str(value)

    def record_error(self, exc: BaseException) -> None:
        self.status = "error"
        self.error_type = exc.__class__.__name__
        self.error_note = str(exc) or None

    def to_payload(self) -> Dict[str, Any]:
        finished_at = datetime.now(timezone.utc)
        duration = max(0.0, time.perf_counter() - self.start_monotonic)
        payload: Dict[str, Any] = {
            "run": self.run,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "finished_at": finished_at.isoformat(),
            "duration_seconds": round(duration, 3),
        }
        if self.attributes:
            payload["attributes"] = self.attributes
        if self.metrics:
            payload["metrics"] = self.metrics
        if self.error_type:
            payload["error_type"] = self.error_type
        if self.error_note:
            payload["error_note"] = self.error_note
        return payload

    def finalize(self) -> None:
        self.logger.info(f"{SUMMARY_PREFIX} {json.dumps(self.to_payload(), sort_keys=True)}")


@contextmanager
def run_summary(run: str, *, logger_name: Optional[str] = None) -> Iterator[_RunSummaryState]:
    """Context manager that logs a structured summary for a batch run."""

    logger = logging.getLogger(logger_name or f"run_summary.{run}")
    state = _RunSummaryState(run=run, logger=logger)
    try:
        yield state
    except Exception as exc:  # noqa: BLE001
        state.record_error(exc)
        state.finalize()
        raise
    else:
        state.finalize()
