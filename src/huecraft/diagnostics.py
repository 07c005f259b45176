# diagnostics.py

from __future__ import annotations

import logging
import threading
from collections import Counter
from typing import Protocol

log = logging.getLogger(__name__)


class DiagnosticsSink(Protocol):
    def record(self, method: str, error: BaseException) -> None: ...


class Diagnostics:
    """Counts blend failures per method; the last error of each is kept."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[str] = Counter()
        self._last: dict[str, BaseException] = {}

    def record(self, method: str, error: BaseException) -> None:
        with self._lock:
            self._counts[method] += 1
            self._last[method] = error
        log.debug("%s blend failed: %s", method, error)

    def count(self, method: str | None = None) -> int:
        with self._lock:
            if method is None:
                return sum(self._counts.values())
            return self._counts[method]

    def last_error(self, method: str) -> BaseException | None:
        with self._lock:
            return self._last.get(method)

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._last.clear()


__all__ = ["Diagnostics", "DiagnosticsSink"]
