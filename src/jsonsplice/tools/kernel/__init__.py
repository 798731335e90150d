"""Kernel-level file primitives."""

from .filesystem import path_exists, read_file, stat_path, write_file_atomic

__all__ = [
    "path_exists",
    "read_file",
    "stat_path",
    "write_file_atomic",
]
