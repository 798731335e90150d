"""Load and query jsonsplice JSON config files."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("config/config.json")
DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
DEFAULT_BATCH_MAX_WORKERS = 4
_CONFIG_CACHE: dict[Path, tuple[int, dict[str, Any]]] = {}


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[3]


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    """Resolve config path against repo root.

    Priority:
    1. explicit function argument
    2. `JSONSPLICE_CONFIG_PATH` environment variable
    3. default `config/config.json`
    """
    raw_path: str | Path | None = config_path or os.getenv("JSONSPLICE_CONFIG_PATH")
    candidate = Path(raw_path) if raw_path else DEFAULT_CONFIG_PATH
    if not candidate.is_absolute():
        candidate = _repo_root() / candidate
    return candidate.resolve()


def load_config(config_path: str | Path | None = None, *, use_cache: bool = True) -> dict[str, Any]:
    """Load config JSON as a dictionary.

    A missing default config file yields an empty config; a missing file that
    was asked for explicitly (argument or environment) is an error.
    """
    explicit = bool(config_path or os.getenv("JSONSPLICE_CONFIG_PATH"))
    resolved = resolve_config_path(config_path)
    if not resolved.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {resolved}")
        return {}

    mtime_ns = resolved.stat().st_mtime_ns
    if use_cache and resolved in _CONFIG_CACHE:
        cached_mtime_ns, cached_payload = _CONFIG_CACHE[resolved]
        if cached_mtime_ns == mtime_ns:
            return cached_payload

    try:
        payload = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in config file: {resolved}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"Config root must be a JSON object: {resolved}")

    _CONFIG_CACHE[resolved] = (mtime_ns, payload)
    return payload


def clear_config_cache() -> None:
    """Clear in-memory config cache."""
    _CONFIG_CACHE.clear()


def _section(payload: dict[str, Any], name: str) -> dict[str, Any]:
    value = payload.get(name)
    return value if isinstance(value, dict) else {}


def _positive_int(value: Any, fallback: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return fallback
    return value


def _split_paths(raw: str) -> list[str]:
    for separator in (";", ","):
        if separator in raw:
            return [part.strip() for part in raw.split(separator) if part.strip()]
    return [raw.strip()] if raw.strip() else []


def get_base_paths(config: dict[str, Any] | None = None) -> list[str]:
    """Return absolute base paths.

    `JSONSPLICE_BASE_PATHS` (`;` or `,` separated) wins over the config
    `base_paths` list; with neither, the current directory is used.
    """
    env_value = os.getenv("JSONSPLICE_BASE_PATHS")
    if env_value:
        raw_paths = _split_paths(env_value)
    else:
        payload = config if config is not None else load_config()
        value = payload.get("base_paths")
        raw_paths = [item for item in value if isinstance(item, str) and item.strip()] if isinstance(value, list) else []
    if not raw_paths:
        raw_paths = [os.getcwd()]
    return [str(Path(item).expanduser().resolve()) for item in raw_paths]


def get_batch_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    raw = _section(payload, "batch")
    return {
        "max_workers": _positive_int(raw.get("max_workers"), DEFAULT_BATCH_MAX_WORKERS),
    }


def get_files_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    raw = _section(payload, "files")
    extension = raw.get("extension_filter")
    return {
        "max_file_size_bytes": _positive_int(raw.get("max_file_size_bytes"), DEFAULT_MAX_FILE_SIZE_BYTES),
        "extension_filter": extension if isinstance(extension, str) else ".json",
    }


def get_insert_after_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    raw = _section(payload, "insert_after")
    check = raw.get("check_duplicates", True)
    return {"check_duplicates": check if isinstance(check, bool) else True}


def get_logging_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    raw = _section(payload, "logging")
    level = raw.get("level")
    log_file = raw.get("file")
    return {
        "level": level.upper() if isinstance(level, str) and level.strip() else "INFO",
        "file": log_file if isinstance(log_file, str) and log_file.strip() else None,
    }
