"""Typed failures raised by the text-level JSON edit engines."""

from __future__ import annotations

from typing import Literal

ErrorKind = Literal["malformed", "not_found", "invalid_target", "duplicate", "invalid_payload"]


class JsonEditError(ValueError):
    """Base class for every edit failure; `kind` drives batch reporting."""

    kind: ErrorKind = "malformed"


class MalformedDocumentError(JsonEditError):
    kind = "malformed"


class TargetNotFoundError(JsonEditError):
    kind = "not_found"


class InvalidTargetError(JsonEditError):
    kind = "invalid_target"


class DuplicateKeyError(JsonEditError):
    kind = "duplicate"


class InvalidPayloadError(JsonEditError):
    kind = "invalid_payload"
