"""Batch runtime facade for CLI/app integration."""

from .batch_service import (
    BatchEditService,
    FileOutcome,
    get_batch_service,
    get_batch_stats,
    outcome_from_error,
    reset_batch_service,
)

__all__ = [
    "BatchEditService",
    "FileOutcome",
    "get_batch_service",
    "get_batch_stats",
    "outcome_from_error",
    "reset_batch_service",
]
