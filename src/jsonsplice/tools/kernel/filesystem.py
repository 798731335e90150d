"""Policy-enforced filesystem primitives with atomic writes."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from src.jsonsplice.core.config_loader import get_base_paths, get_files_config, load_config
from src.jsonsplice.core.path_policy import AccessMode, check_access, resolve_under_base_paths

_LOG = logging.getLogger(__name__)


def _error_payload(source: str, path: str, message: str) -> dict[str, Any]:
    return {"ok": False, "path": path, "error": message, "source": source}


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _resolve(path: str, mode: AccessMode, config: dict[str, Any], base_paths: list[str] | None) -> tuple[Path | None, str]:
    bases = base_paths if base_paths is not None else get_base_paths(config)
    allowed, reason = check_access(path, mode, config=config, base_paths=bases)
    if not allowed:
        return None, reason
    return resolve_under_base_paths(path, bases), ""


def read_file(
    path: str,
    *,
    encoding: str = "utf-8",
    max_bytes: int | None = None,
    config: dict[str, Any] | None = None,
    base_paths: list[str] | None = None,
) -> dict[str, Any]:
    """Read a text file with read-policy enforcement, keeping line separators."""
    source = "filesystem_read"
    try:
        payload = config if config is not None else load_config()
        resolved, reason = _resolve(path, "read", payload, base_paths)
        if resolved is None:
            return _error_payload(source, str(path), reason)
        if not resolved.exists():
            return _error_payload(source, str(resolved), "Path does not exist.")
        if not resolved.is_file():
            return _error_payload(source, str(resolved), "Path is not a file.")

        limit = max_bytes if max_bytes is not None else get_files_config(payload)["max_file_size_bytes"]
        size = resolved.stat().st_size
        if size > limit:
            return _error_payload(source, str(resolved), f"file too large ({size} bytes, max {limit} bytes)")

        with resolved.open("r", encoding=encoding, newline="") as fh:
            content = fh.read()
        return {
            "ok": True,
            "path": str(resolved),
            "content": content,
            "bytes": size,
            "error": None,
            "source": source,
        }
    except Exception as exc:
        return _error_payload(source, str(path), str(exc))


def write_file_atomic(
    path: str,
    content: str,
    *,
    dry_run: bool = False,
    encoding: str = "utf-8",
    config: dict[str, Any] | None = None,
    base_paths: list[str] | None = None,
) -> dict[str, Any]:
    """Write through a temp file in the target directory, then `os.replace`."""
    source = "filesystem_write"
    temp_path: str | None = None
    try:
        payload = config if config is not None else load_config()
        resolved, reason = _resolve(path, "write", payload, base_paths)
        if resolved is None:
            return _error_payload(source, str(path), reason)
        if not resolved.parent.exists():
            return _error_payload(source, str(resolved), "Parent directory does not exist.")

        written_bytes = len(content.encode(encoding))
        if dry_run:
            return {
                "ok": True,
                "path": str(resolved),
                "written_bytes": written_bytes,
                "dry_run": True,
                "written_at": _now_utc_iso(),
                "error": None,
                "source": source,
            }

        fd, temp_path = tempfile.mkstemp(prefix=".jsonsplice_", suffix=".tmp", dir=str(resolved.parent))
        with os.fdopen(fd, "w", encoding=encoding, newline="") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        if resolved.exists():
            os.chmod(temp_path, resolved.stat().st_mode)
        os.replace(temp_path, resolved)
        temp_path = None
        return {
            "ok": True,
            "path": str(resolved),
            "written_bytes": written_bytes,
            "dry_run": False,
            "written_at": _now_utc_iso(),
            "error": None,
            "source": source,
        }
    except Exception as exc:
        _LOG.warning("atomic write failed for %s: %s", path, exc)
        return _error_payload(source, str(path), str(exc))
    finally:
        if temp_path and os.path.exists(temp_path):
            os.remove(temp_path)


def path_exists(
    path: str,
    *,
    config: dict[str, Any] | None = None,
    base_paths: list[str] | None = None,
) -> dict[str, Any]:
    """Check path existence while enforcing read policy."""
    source = "filesystem_exists"
    try:
        payload = config if config is not None else load_config()
        resolved, reason = _resolve(path, "read", payload, base_paths)
        if resolved is None:
            return {"ok": False, "path": str(path), "exists": False, "error": reason, "source": source}
        return {"ok": True, "path": str(resolved), "exists": resolved.exists(), "error": None, "source": source}
    except Exception as exc:
        return {"ok": False, "path": str(path), "exists": False, "error": str(exc), "source": source}


def stat_path(
    path: str,
    *,
    config: dict[str, Any] | None = None,
    base_paths: list[str] | None = None,
) -> dict[str, Any]:
    """Return basic stat metadata for a path."""
    source = "filesystem_stat"
    try:
        payload = config if config is not None else load_config()
        resolved, reason = _resolve(path, "read", payload, base_paths)
        if resolved is None:
            return _error_payload(source, str(path), reason)
        if not resolved.exists():
            return _error_payload(source, str(resolved), "Path does not exist.")

        stat = resolved.stat()
        return {
            "ok": True,
            "path": str(resolved),
            "stat": {
                "is_file": resolved.is_file(),
                "is_dir": resolved.is_dir(),
                "size_bytes": stat.st_size,
                "mtime": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
            },
            "error": None,
            "source": source,
        }
    except Exception as exc:
        return _error_payload(source, str(path), str(exc))
