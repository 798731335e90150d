"""Walk base paths for candidate JSON files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from src.jsonsplice.core.config_loader import get_files_config, load_config
from src.jsonsplice.core.path_policy import can_read
from src.jsonsplice.jsonops.key_search import contains_key_deep

_LOG = logging.getLogger(__name__)


def normalize_extension(extension_filter: str | None) -> str:
    """`*.JSON`, `json` and `.json` all become `.json`; blank means any file."""
    ext = (extension_filter or "").strip().replace("*", "")
    if not ext:
        return ""
    if not ext.startswith("."):
        ext = "." + ext
    return ext.lower()


def _file_matches_key(path: Path, json_key_filter: str, max_bytes: int) -> bool:
    try:
        if path.stat().st_size > max_bytes:
            return False
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False
    return contains_key_deep(content, json_key_filter)


def browse_folder(
    folder_path: str,
    extension_filter: str = "",
    json_key_filter: str = "",
    *,
    config: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """List files under `folder_path` that pass the extension and key filters.

    Raises `FileNotFoundError` / `NotADirectoryError` for a bad folder.
    """
    payload = config if config is not None else load_config()
    root = Path(folder_path).expanduser().resolve()
    if not root.exists():
        raise FileNotFoundError(f"Base path does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Base path is not a directory: {root}")

    extension = normalize_extension(extension_filter)
    max_bytes = get_files_config(payload)["max_file_size_bytes"]
    files: list[dict[str, Any]] = []
    for candidate in sorted(root.rglob("*")):
        if not candidate.is_file():
            continue
        if extension and not candidate.name.lower().endswith(extension):
            continue
        if not can_read(candidate, config=payload, base_paths=[str(root)]):
            continue
        if json_key_filter and not _file_matches_key(candidate, json_key_filter, max_bytes):
            continue
        files.append(
            {
                "name": candidate.name,
                "path": str(candidate),
                "base_path": str(root),
                "size": candidate.stat().st_size,
            }
        )
    return files


def browse_folders(
    base_paths: list[str],
    extension_filter: str = "",
    json_key_filter: str = "",
    *,
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Browse every base path; a failing base path is reported, not fatal."""
    files: list[dict[str, Any]] = []
    skipped: list[dict[str, str]] = []
    for base_path in base_paths:
        try:
            files.extend(browse_folder(base_path, extension_filter, json_key_filter, config=config))
        except OSError as exc:
            _LOG.warning("skipping base path %s: %s", base_path, exc)
            skipped.append({"base_path": base_path, "error": str(exc)})
    return {
        "ok": True,
        "files": files,
        "count": len(files),
        "skipped_base_paths": skipped,
        "error": None,
        "source": "file_browser",
    }


def group_files_by_base_path(files: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    grouped: dict[str, list[dict[str, Any]]] = {}
    for item in files:
        grouped.setdefault(item["base_path"], []).append(item)
    return grouped


def unique_base_paths(files: list[dict[str, Any]]) -> list[str]:
    return list(dict.fromkeys(item["base_path"] for item in files))


def filter_files_by_base_path(files: list[dict[str, Any]], allowed_base_paths: list[str]) -> list[dict[str, Any]]:
    allowed = set(allowed_base_paths)
    return [item for item in files if item["base_path"] in allowed]
