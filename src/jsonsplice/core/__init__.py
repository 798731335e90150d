"""Core runtime utilities for jsonsplice."""

from .config_loader import (
    clear_config_cache,
    get_base_paths,
    get_batch_config,
    get_files_config,
    get_insert_after_config,
    get_logging_config,
    load_config,
    resolve_config_path,
)
from .logging_setup import get_logger, setup_logging
from .observers import CompositeObserver, EditObserver, LoggingObserver, NullObserver, StatsObserver
from .path_policy import (
    can_read,
    can_write,
    check_access,
    get_filesystem_policy,
    is_valid_base_path,
    matching_base_path,
    resolve_under_base_paths,
    valid_base_paths,
)

__all__ = [
    "CompositeObserver",
    "EditObserver",
    "LoggingObserver",
    "NullObserver",
    "StatsObserver",
    "can_read",
    "can_write",
    "check_access",
    "clear_config_cache",
    "get_base_paths",
    "get_batch_config",
    "get_files_config",
    "get_filesystem_policy",
    "get_insert_after_config",
    "get_logger",
    "get_logging_config",
    "is_valid_base_path",
    "load_config",
    "matching_base_path",
    "resolve_config_path",
    "resolve_under_base_paths",
    "setup_logging",
    "valid_base_paths",
]
