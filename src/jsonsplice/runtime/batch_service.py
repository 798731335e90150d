"""Apply one edit operation to many files and report every outcome."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Literal

from src.jsonsplice.core.config_loader import get_batch_config, get_insert_after_config, load_config
from src.jsonsplice.core.observers import CompositeObserver, EditObserver, LoggingObserver, NullObserver, StatsObserver
from src.jsonsplice.jsonops import (
    DuplicateKeyError,
    InvalidPayloadError,
    JsonEditError,
    TargetNotFoundError,
    insert_key_value,
    insert_object_after_all_occurrences,
    rename_key,
)
from src.jsonsplice.tools.kernel.filesystem import read_file, write_file_atomic

_LOG = logging.getLogger(__name__)

OutcomeStatus = Literal["SUCCESS", "SKIPPED", "ERROR"]
Transform = Callable[[str], tuple[str, int]]


@dataclass(slots=True)
class FileOutcome:
    """Result of one file inside a batch."""

    path: str
    status: OutcomeStatus
    reason: str | None = None
    replacement_count: int = 0
    modified_content: str | None = None

    @property
    def label(self) -> str:
        if self.status == "SUCCESS":
            return "SUCCESS"
        return f"{self.status}: {self.reason}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "ok": self.status == "SUCCESS",
            "status": self.status,
            "outcome": self.label,
            "error": self.reason,
            "replacement_count": self.replacement_count,
            "modified_content": self.modified_content,
        }


def outcome_from_error(path: str, exc: JsonEditError) -> FileOutcome:
    """Duplicate conflicts are skips; every other edit failure is an error."""
    status: OutcomeStatus = "SKIPPED" if isinstance(exc, DuplicateKeyError) else "ERROR"
    return FileOutcome(path=path, status=status, reason=str(exc))


class BatchEditService:
    """Runs read-transform-write per file on a bounded worker pool.

    Each worker owns one path end to end; the same path is never scheduled
    twice in one batch. One file failing never stops the others.
    """

    def __init__(
        self,
        *,
        config: dict[str, Any] | None = None,
        base_paths: list[str] | None = None,
        max_workers: int | None = None,
        observer: EditObserver | None = None,
        dry_run: bool = False,
    ) -> None:
        self._config = config if config is not None else load_config()
        self._base_paths = base_paths
        self._max_workers = max_workers or get_batch_config(self._config)["max_workers"]
        self._observer: EditObserver = observer or NullObserver()
        self._dry_run = dry_run

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def _run_one(self, path: str, transform: Transform) -> FileOutcome:
        read = read_file(path, config=self._config, base_paths=self._base_paths)
        if not read.get("ok"):
            return FileOutcome(path=path, status="ERROR", reason=f"failed to read file: {read.get('error')}")

        try:
            content, count = transform(read["content"])
        except JsonEditError as exc:
            return outcome_from_error(path, exc)

        written = write_file_atomic(
            path,
            content,
            dry_run=self._dry_run,
            config=self._config,
            base_paths=self._base_paths,
        )
        if not written.get("ok"):
            return FileOutcome(path=path, status="ERROR", reason=f"failed to write file: {written.get('error')}")
        return FileOutcome(path=path, status="SUCCESS", replacement_count=count, modified_content=content)

    def run(self, operation: str, file_paths: list[str], transform: Transform) -> dict[str, FileOutcome]:
        """Apply `transform` to every file and return outcomes in input order."""
        paths = list(dict.fromkeys(file_paths))
        if not paths:
            return {}

        results: dict[str, FileOutcome] = {}
        workers = min(self._max_workers, len(paths))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="jsonsplice-batch") as executor:
            futures = {executor.submit(self._run_one, path, transform): path for path in paths}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    results[path] = future.result()
                except Exception as exc:
                    _LOG.exception("unexpected failure while editing %s", path)
                    results[path] = FileOutcome(path=path, status="ERROR", reason=str(exc))

        ordered = {path: results[path] for path in paths}
        for path, outcome in ordered.items():
            _LOG.debug("%s %s -> %s", operation, path, outcome.label)
            self._observer.on_file_outcome(operation, path, outcome.label)

        statuses = [outcome.status for outcome in ordered.values()]
        _LOG.info(
            "%s finished: %d files, %d succeeded, %d skipped, %d failed",
            operation,
            len(statuses),
            statuses.count("SUCCESS"),
            statuses.count("SKIPPED"),
            statuses.count("ERROR"),
        )
        return ordered

    def add_item(self, file_paths: list[str], object_path: str, key: str, value: Any) -> dict[str, str]:
        """Insert `key: value` into the target of `object_path` in every file."""

        def _transform(text: str) -> tuple[str, int]:
            return insert_key_value(text, object_path, key, value), 1

        outcomes = self.run("add_item", file_paths, _transform)
        return {path: outcome.label for path, outcome in outcomes.items()}

    def add_after(
        self,
        file_paths: list[str],
        target_key: str,
        new_key: str,
        new_object_json: str,
        *,
        check_duplicates: bool | None = None,
    ) -> dict[str, str]:
        """Insert `new_key: <object>` after every `target_key` in every file."""
        check = get_insert_after_config(self._config)["check_duplicates"] if check_duplicates is None else check_duplicates

        def _transform(text: str) -> tuple[str, int]:
            updated = insert_object_after_all_occurrences(
                text,
                target_key,
                new_key,
                new_object_json,
                check_duplicates=check,
            )
            return updated, 1

        outcomes = self.run("add_after", file_paths, _transform)
        return {path: outcome.label for path, outcome in outcomes.items()}

    def rename_keys(self, file_paths: list[str], old_key: str, new_key: str) -> dict[str, dict[str, Any]]:
        """Rename `old_key` in every file; zero matches is an error for that file."""
        if not old_key:
            raise InvalidPayloadError("old key cannot be empty")
        if not new_key:
            raise InvalidPayloadError("new key cannot be empty")
        if old_key == new_key:
            raise InvalidPayloadError("old key and new key cannot be the same")

        def _transform(text: str) -> tuple[str, int]:
            updated, count = rename_key(text, old_key, new_key)
            if count == 0:
                raise TargetNotFoundError(f"no keys found with name '{old_key}'")
            return updated, count

        outcomes = self.run("rename_keys", file_paths, _transform)
        return {path: outcome.to_dict() for path, outcome in outcomes.items()}


_BATCH_SERVICE: BatchEditService | None = None
_BATCH_STATS = StatsObserver()


def get_batch_stats() -> StatsObserver:
    return _BATCH_STATS


def get_batch_service() -> BatchEditService:
    global _BATCH_SERVICE
    if _BATCH_SERVICE is None:
        _BATCH_SERVICE = BatchEditService(observer=CompositeObserver(_BATCH_STATS, LoggingObserver()))
    return _BATCH_SERVICE


def reset_batch_service() -> None:
    """Drop the shared service so the next call picks up fresh config."""
    global _BATCH_SERVICE
    _BATCH_SERVICE = None
    _BATCH_STATS.reset()
