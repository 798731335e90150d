"""Read-only deep key lookup used to filter files before editing."""

from __future__ import annotations

import json
from typing import Any


def _contains_key(node: Any, key: str) -> bool:
    if isinstance(node, dict):
        if key in node:
            return True
        return any(_contains_key(value, key) for value in node.values())
    if isinstance(node, list):
        return any(_contains_key(item, key) for item in node)
    return False


def contains_key_deep(document: str | bytes, key: str) -> bool:
    """True when `key` names an object property anywhere in the document.

    Documents that do not parse never match.
    """
    try:
        data = json.loads(document)
    except ValueError:
        return False
    return _contains_key(data, key)
