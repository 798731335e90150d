"""Local HTTP surface for browsing and batch-editing JSON files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field

from src.jsonsplice.core.config_loader import get_base_paths, get_files_config, load_config
from src.jsonsplice.core.logging_setup import setup_logging
from src.jsonsplice.core.path_policy import is_valid_base_path, matching_base_path
from src.jsonsplice.jsonops import JsonEditError
from src.jsonsplice.runtime.batch_service import get_batch_service, get_batch_stats
from src.jsonsplice.tools.data.file_browser import browse_folders
from src.jsonsplice.tools.data.json_tools import read_json

app = FastAPI(title="jsonsplice")


class BrowseRequest(BaseModel):
    base_paths: list[str] = Field(default_factory=list)
    extension_filter: str | None = None
    json_key_filter: str = ""


class FileContentRequest(BaseModel):
    path: str


class AddItemRequest(BaseModel):
    file_paths: list[str] = Field(default_factory=list)
    object_path: str = ""
    key: str
    value: Any


class AddAfterRequest(BaseModel):
    file_paths: list[str] = Field(default_factory=list)
    target_key: str
    new_key: str
    new_object_json: str
    check_duplicates: bool | None = None


class RenameRequest(BaseModel):
    file_paths: list[str] = Field(default_factory=list)
    old_key: str
    new_key: str


def _empty_files_error() -> dict[str, Any]:
    return {"ok": False, "results": {}, "error": "file_paths cannot be empty", "source": "batch_edit"}


def _batch_payload(operation: str, results: dict[str, Any], labels: dict[str, str]) -> dict[str, Any]:
    return {
        "ok": all(label == "SUCCESS" for label in labels.values()),
        "operation": operation,
        "results": results,
        "error": None,
        "source": "batch_edit",
    }


@app.on_event("startup")
def _init_logging() -> None:
    setup_logging(load_config())


@app.get("/health")
def health() -> dict:
    return {
        "ok": True,
        "source": "jsonsplice",
        "base_paths": get_base_paths(),
        "stats": get_batch_stats().snapshot(),
    }


@app.get("/api/base-paths")
def base_paths() -> dict:
    return {
        "ok": True,
        "base_paths": [{"path": path, "valid": is_valid_base_path(path)} for path in get_base_paths()],
        "source": "config",
    }


@app.post("/api/browse")
def browse(req: BrowseRequest) -> dict:
    config = load_config()
    configured = get_base_paths(config)
    requested = [str(Path(item).expanduser().resolve()) for item in req.base_paths] or configured

    allowed = [path for path in requested if matching_base_path(path, configured) is not None]
    rejected = [
        {"base_path": path, "error": "Base path is outside configured base paths."}
        for path in requested
        if path not in allowed
    ]
    extension = req.extension_filter if req.extension_filter is not None else get_files_config(config)["extension_filter"]
    out = browse_folders(allowed, extension, req.json_key_filter, config=config)
    out["skipped_base_paths"] = rejected + out["skipped_base_paths"]
    return out


@app.post("/api/files/content")
def file_content(req: FileContentRequest) -> dict:
    return read_json(req.path)


@app.post("/api/edit/add")
def edit_add(req: AddItemRequest) -> dict:
    if not req.file_paths:
        return _empty_files_error()
    labels = get_batch_service().add_item(req.file_paths, req.object_path, req.key, req.value)
    return _batch_payload("add", labels, labels)


@app.post("/api/edit/add-after")
def edit_add_after(req: AddAfterRequest) -> dict:
    if not req.file_paths:
        return _empty_files_error()
    labels = get_batch_service().add_after(
        req.file_paths,
        req.target_key,
        req.new_key,
        req.new_object_json,
        check_duplicates=req.check_duplicates,
    )
    return _batch_payload("add-after", labels, labels)


@app.post("/api/edit/rename")
def edit_rename(req: RenameRequest) -> dict:
    if not req.file_paths:
        return _empty_files_error()
    try:
        results = get_batch_service().rename_keys(req.file_paths, req.old_key, req.new_key)
    except JsonEditError as exc:
        return {"ok": False, "results": {}, "error": str(exc), "source": "batch_edit"}
    labels = {path: row["outcome"] for path, row in results.items()}
    return _batch_payload("rename", results, labels)
