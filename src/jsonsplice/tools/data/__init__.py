"""Data-aware tool helpers built on kernel primitives."""

from .file_browser import (
    browse_folder,
    browse_folders,
    filter_files_by_base_path,
    group_files_by_base_path,
    unique_base_paths,
)
from .json_tools import read_json

__all__ = [
    "browse_folder",
    "browse_folders",
    "filter_files_by_base_path",
    "group_files_by_base_path",
    "read_json",
    "unique_base_paths",
]
