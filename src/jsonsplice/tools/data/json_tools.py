"""JSON convenience helpers layered over kernel filesystem tools."""

from __future__ import annotations

import json
from typing import Any

from src.jsonsplice.tools.kernel.filesystem import read_file


def read_json(
    path: str,
    *,
    config: dict[str, Any] | None = None,
    base_paths: list[str] | None = None,
) -> dict[str, Any]:
    """Read a JSON file, returning both the raw text and the parsed data."""
    payload = read_file(path, config=config, base_paths=base_paths)
    if not payload.get("ok"):
        return {
            "ok": False,
            "path": payload.get("path", path),
            "content": None,
            "data": None,
            "error": payload.get("error"),
            "source": "json_read",
        }

    try:
        data = json.loads(payload["content"])
    except json.JSONDecodeError as exc:
        return {
            "ok": False,
            "path": payload.get("path", path),
            "content": payload["content"],
            "data": None,
            "error": f"Invalid JSON: {exc}",
            "source": "json_read",
        }

    return {
        "ok": True,
        "path": payload.get("path", path),
        "content": payload["content"],
        "data": data,
        "error": None,
        "source": "json_read",
    }
