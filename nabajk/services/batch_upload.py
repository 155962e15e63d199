"""Batch upload — submit validated rows one at a time, collecting failures.

Rows go out strictly in order with a single write in flight, so progress
counters only ever move forward and the backend sees one insert at a time.
A failing row is recorded and the batch moves on.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class UploadFailure:
    row_name: str
    message: str
    code: Optional[str] = None


@dataclass(frozen=True)
class UploadOutcome:
    success_count: int = 0
    failures: tuple[UploadFailure, ...] = field(default_factory=tuple)

    @property
    def attempted(self) -> int:
        return self.success_count + len(self.failures)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


class BatchInProgressError(RuntimeError):
    """Raised when a batch is started while another is still running."""


def _error_details(exc: Exception) -> tuple[str, Optional[str]]:
    """Message and optional code, as reported by the persistence layer."""
    message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
    code = getattr(exc, "code", None)
    return str(message), (str(code) if code is not None else None)


def _row_name(row: Any) -> str:
    name = getattr(row, "name", None)
    if name is None and isinstance(row, dict):
        name = row.get("name")
    return str(name) if name is not None else repr(row)


class BatchUploadDriver:
    """Sequential submitter with a single in-flight guard.

    ``submit(row)`` returns normally on success and raises on failure.
    """

    def __init__(self, submit: Callable[[Any], Any]) -> None:
        self._submit = submit
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def run(self, rows: Iterable[Any],
            on_progress: Optional[ProgressCallback] = None) -> UploadOutcome:
        rows = list(rows)
        if not rows:
            return UploadOutcome()

        if not self._lock.acquire(blocking=False):
            raise BatchInProgressError("An upload batch is already running")

        try:
            total = len(rows)
            success_count = 0
            failures: list[UploadFailure] = []

            for current, row in enumerate(rows, start=1):
                try:
                    self._submit(row)
                    success_count += 1
                except Exception as e:
                    message, code = _error_details(e)
                    failures.append(UploadFailure(_row_name(row), message, code))
                    logger.warning("Batch row %d/%d (%s) failed: %s (code %s)",
                                   current, total, _row_name(row), message, code or "unknown")

                if on_progress is not None:
                    on_progress(current, total)

            logger.info("Batch finished: %d ok, %d failed", success_count, len(failures))
            return UploadOutcome(success_count=success_count, failures=tuple(failures))
        finally:
            self._lock.release()
