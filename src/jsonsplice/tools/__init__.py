"""File-facing tool surface for jsonsplice."""

from .kernel import path_exists, read_file, stat_path, write_file_atomic
from .data import (
    browse_folder,
    browse_folders,
    filter_files_by_base_path,
    group_files_by_base_path,
    read_json,
    unique_base_paths,
)

__all__ = [
    "browse_folder",
    "browse_folders",
    "filter_files_by_base_path",
    "group_files_by_base_path",
    "path_exists",
    "read_file",
    "read_json",
    "stat_path",
    "unique_base_paths",
    "write_file_atomic",
]
