"""Base-path scoping and access policy for files the editor may touch."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Literal

from .config_loader import get_base_paths, load_config

AccessMode = Literal["read", "write"]

DEFAULT_FILESYSTEM_POLICY: dict[str, Any] = {
    "allow_write": ["**"],
    "deny": ["**/.git/**", "**/.venv/**", "**/node_modules/**"],
}


def is_valid_base_path(base_path: str | Path) -> bool:
    return Path(base_path).expanduser().is_dir()


def valid_base_paths(base_paths: list[str]) -> list[str]:
    return [path for path in base_paths if is_valid_base_path(path)]


def resolve_under_base_paths(path: str | Path, base_paths: list[str]) -> Path:
    """Resolve `path` and reject traversal or escapes from every base path.

    Relative paths are taken against the first base path.
    """
    raw = Path(path).expanduser()
    if ".." in raw.parts:
        raise ValueError("Path traversal (`..`) is not allowed.")
    if not raw.is_absolute():
        if not base_paths:
            raise ValueError("Relative paths need at least one base path.")
        raw = Path(base_paths[0]) / raw
    candidate = raw.resolve()
    if base_paths and matching_base_path(candidate, base_paths) is None:
        raise ValueError("Resolved path escapes configured base paths.")
    return candidate


def matching_base_path(path: str | Path, base_paths: list[str]) -> str | None:
    """Return the first base path containing `path`."""
    candidate = Path(path).resolve()
    for base in base_paths:
        if candidate.is_relative_to(Path(base).resolve()):
            return base
    return None


def get_filesystem_policy(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    fs = payload.get("filesystem")
    raw = fs if isinstance(fs, dict) else {}

    def _list_of_strings(value: Any, fallback: list[str]) -> list[str]:
        if not isinstance(value, list):
            return fallback
        result = [item for item in value if isinstance(item, str) and item.strip()]
        return result or fallback

    return {
        "allow_write": _list_of_strings(raw.get("allow_write"), DEFAULT_FILESYSTEM_POLICY["allow_write"]),
        "deny": _list_of_strings(raw.get("deny"), DEFAULT_FILESYSTEM_POLICY["deny"]),
    }


def _pattern_matches(path: str, pattern: str) -> bool:
    target = path or "."
    if pattern == "**":
        return True
    if fnmatch(target, pattern):
        return True
    if pattern.startswith("**/") and _pattern_matches(target, pattern[3:]):
        return True
    if pattern.endswith("/**"):
        prefix = pattern[:-3].rstrip("/")
        return target == prefix or target.startswith(prefix + "/") or fnmatch(target, prefix + "/*")
    return False


def _matches_any(path: str, patterns: list[str]) -> bool:
    return any(_pattern_matches(path, pattern) for pattern in patterns)


def check_access(
    path: str | Path,
    mode: AccessMode,
    config: dict[str, Any] | None = None,
    *,
    base_paths: list[str] | None = None,
) -> tuple[bool, str]:
    """Check whether `path` is allowed for `mode` under the filesystem policy."""
    payload = config if config is not None else load_config()
    bases = base_paths if base_paths is not None else get_base_paths(payload)
    try:
        resolved = resolve_under_base_paths(path, bases)
    except ValueError as exc:
        return False, str(exc)

    base = matching_base_path(resolved, bases)
    rel_path = resolved.relative_to(Path(base).resolve()).as_posix() if base else resolved.as_posix()
    policy = get_filesystem_policy(config=payload)

    if _matches_any(rel_path, policy["deny"]):
        return False, f"{mode} denied by policy for '{rel_path}'."
    if mode == "write" and not _matches_any(rel_path, policy["allow_write"]):
        return False, f"{mode} not allowed by policy for '{rel_path}'."
    return True, ""


def can_read(path: str | Path, config: dict[str, Any] | None = None, *, base_paths: list[str] | None = None) -> bool:
    allowed, _ = check_access(path, "read", config=config, base_paths=base_paths)
    return allowed


def can_write(path: str | Path, config: dict[str, Any] | None = None, *, base_paths: list[str] | None = None) -> bool:
    allowed, _ = check_access(path, "write", config=config, base_paths=base_paths)
    return allowed
