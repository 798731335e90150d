import json
from pathlib import Path

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.main import app
from src.jsonsplice.core.config_loader import clear_config_cache
from src.jsonsplice.runtime.batch_service import reset_batch_service

client = TestClient(app)


@pytest.fixture()
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    base = tmp_path / "data"
    (base / "nested").mkdir(parents=True)
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"files": {"extension_filter": ".json"}}), encoding="utf-8")
    monkeypatch.setenv("JSONSPLICE_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("JSONSPLICE_BASE_PATHS", str(base))
    clear_config_cache()
    reset_batch_service()

    (base / "a.json").write_text('{\n  "name": "a",\n  "tags": [\n    "x"\n  ]\n}\n', encoding="utf-8")
    (base / "nested" / "b.json").write_text('{\n  "name": "b",\n  "id": 2\n}\n', encoding="utf-8")
    (base / "readme.txt").write_text("hello", encoding="utf-8")
    yield base
    reset_batch_service()
    clear_config_cache()


def test_health_reports_base_paths_and_stats(workspace: Path):
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["base_paths"] == [str(workspace.resolve())]
    assert body["stats"] == {}


def test_base_paths_endpoint_marks_validity(workspace: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    missing = tmp_path / "missing"
    monkeypatch.setenv("JSONSPLICE_BASE_PATHS", f"{workspace};{missing}")
    res = client.get("/api/base-paths")
    assert res.status_code == 200
    assert res.json()["base_paths"] == [
        {"path": str(workspace.resolve()), "valid": True},
        {"path": str(missing.resolve()), "valid": False},
    ]


def test_browse_uses_configured_extension_and_key_filter(workspace: Path):
    res = client.post("/api/browse", json={})
    assert res.status_code == 200
    body = res.json()
    assert sorted(item["name"] for item in body["files"]) == ["a.json", "b.json"]

    filtered = client.post("/api/browse", json={"json_key_filter": "id"}).json()
    assert [item["name"] for item in filtered["files"]] == ["b.json"]

    everything = client.post("/api/browse", json={"extension_filter": ""}).json()
    assert everything["count"] == 3


def test_browse_rejects_unconfigured_base_paths(workspace: Path, tmp_path: Path):
    res = client.post("/api/browse", json={"base_paths": [str(tmp_path)]})
    body = res.json()
    assert body["files"] == []
    assert body["skipped_base_paths"][0]["base_path"] == str(tmp_path.resolve())


def test_file_content_returns_parsed_json(workspace: Path):
    res = client.post("/api/files/content", json={"path": str(workspace / "a.json")})
    body = res.json()
    assert body["ok"] is True
    assert body["data"] == {"name": "a", "tags": ["x"]}

    outside = client.post("/api/files/content", json={"path": str(workspace.parent / "config.json")}).json()
    assert outside["ok"] is False


def test_edit_add_reports_per_file_labels(workspace: Path):
    a_path = str(workspace / "a.json")
    b_path = str(workspace / "nested" / "b.json")
    res = client.post("/api/edit/add", json={"file_paths": [a_path, b_path], "key": "id", "value": 1})
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is False
    assert body["results"] == {a_path: "SUCCESS", b_path: "SKIPPED: key 'id' already exists at root level"}
    assert json.loads(Path(a_path).read_text(encoding="utf-8"))["id"] == 1

    stats = client.get("/health").json()["stats"]
    assert stats == {"add_item": {"SKIPPED": 1, "SUCCESS": 1}}


def test_edit_add_into_array_values(workspace: Path):
    a_path = str(workspace / "a.json")
    body = client.post(
        "/api/edit/add",
        json={"file_paths": [a_path], "object_path": "tags", "key": "unused", "value": "y"},
    ).json()
    assert body["ok"] is True
    assert json.loads(Path(a_path).read_text(encoding="utf-8"))["tags"] == ["y", "x"]


def test_edit_add_after_and_rename(workspace: Path):
    b_path = str(workspace / "nested" / "b.json")
    added = client.post(
        "/api/edit/add-after",
        json={"file_paths": [b_path], "target_key": "name", "new_key": "meta", "new_object_json": '{"v": 1}'},
    ).json()
    assert added["results"] == {b_path: "SUCCESS"}

    renamed = client.post(
        "/api/edit/rename",
        json={"file_paths": [b_path], "old_key": "meta", "new_key": "details"},
    ).json()
    assert renamed["ok"] is True
    assert renamed["results"][b_path]["replacement_count"] == 1
    assert json.loads(Path(b_path).read_text(encoding="utf-8")) == {"name": "b", "details": {"v": 1}, "id": 2}


def test_edit_rename_invalid_keys(workspace: Path):
    body = client.post(
        "/api/edit/rename",
        json={"file_paths": [str(workspace / "a.json")], "old_key": "name", "new_key": "name"},
    ).json()
    assert body["ok"] is False
    assert "cannot be the same" in body["error"]


def test_edit_requires_file_paths(workspace: Path):
    body = client.post("/api/edit/add", json={"file_paths": [], "key": "id", "value": 1}).json()
    assert body["ok"] is False
    assert body["error"] == "file_paths cannot be empty"

    res = client.post("/api/edit/add", json={"file_paths": ["x.json"], "key": "id"})
    assert res.status_code == 422
