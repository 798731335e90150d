"""Observer hooks for per-file edit outcomes.

Engines stay side-effect free; counting and reporting live behind this
interface and are injected into the batch service.
"""

from __future__ import annotations

import logging
from collections import Counter
from threading import Lock
from typing import Any, Protocol

_LOG = logging.getLogger(__name__)


class EditObserver(Protocol):
    def on_file_outcome(self, operation: str, path: str, outcome: str) -> None: ...


class NullObserver:
    def on_file_outcome(self, operation: str, path: str, outcome: str) -> None:
        return None


def outcome_status(outcome: str) -> str:
    """Leading status word of an outcome label (`SUCCESS`, `SKIPPED`, `ERROR`)."""
    return outcome.split(":", 1)[0].strip()


class StatsObserver:
    """Thread-safe counters keyed by operation and outcome status."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._counts: Counter[tuple[str, str]] = Counter()

    def on_file_outcome(self, operation: str, path: str, outcome: str) -> None:
        with self._lock:
            self._counts[(operation, outcome_status(outcome))] += 1

    def count(self, operation: str, status: str) -> int:
        with self._lock:
            return self._counts[(operation, status)]

    def snapshot(self) -> dict[str, dict[str, int]]:
        with self._lock:
            out: dict[str, dict[str, int]] = {}
            for (operation, status), value in sorted(self._counts.items()):
                out.setdefault(operation, {})[status] = value
            return out

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


class LoggingObserver:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _LOG

    def on_file_outcome(self, operation: str, path: str, outcome: str) -> None:
        level = logging.INFO if outcome_status(outcome) == "SUCCESS" else logging.WARNING
        self._logger.log(level, "%s %s -> %s", operation, path, outcome)


class CompositeObserver:
    def __init__(self, *observers: Any) -> None:
        self._observers = [item for item in observers if item is not None]

    def on_file_outcome(self, operation: str, path: str, outcome: str) -> None:
        for observer in self._observers:
            observer.on_file_outcome(operation, path, outcome)
