"""Terminal front end for browsing and batch-editing JSON files."""

from __future__ import annotations

import argparse
import json
from typing import Any

from src.jsonsplice.core.config_loader import get_base_paths, get_files_config, load_config
from src.jsonsplice.core.logging_setup import setup_logging
from src.jsonsplice.core.observers import LoggingObserver
from src.jsonsplice.jsonops import JsonEditError, parse_json_value
from src.jsonsplice.runtime.batch_service import BatchEditService
from src.jsonsplice.tools.data.file_browser import browse_folders


def _print_json(out: dict[str, Any]) -> None:
    print(json.dumps(out, ensure_ascii=False, indent=2))


def _service(args: argparse.Namespace, config: dict[str, Any]) -> BatchEditService:
    return BatchEditService(
        config=config,
        base_paths=args.base_path or None,
        max_workers=args.workers,
        observer=LoggingObserver(),
        dry_run=bool(args.dry_run),
    )


def _finish(operation: str, labels: dict[str, str], extra: dict[str, Any] | None = None) -> int:
    ok = all(label == "SUCCESS" for label in labels.values())
    out: dict[str, Any] = {"ok": ok, "operation": operation, "results": labels}
    if extra:
        out.update(extra)
    _print_json(out)
    return 0 if ok else 1


def _cmd_browse(args: argparse.Namespace, config: dict[str, Any]) -> int:
    bases = args.base_path or get_base_paths(config)
    extension = args.ext if args.ext is not None else get_files_config(config)["extension_filter"]
    out = browse_folders(bases, extension, args.key or "", config=config)
    _print_json(out)
    return 0


def _cmd_add(args: argparse.Namespace, config: dict[str, Any]) -> int:
    try:
        value = parse_json_value(args.value_json)
    except ValueError as exc:
        print(f"error: --value-json is not valid JSON: {exc}")
        return 2
    labels = _service(args, config).add_item(args.files, args.path, args.key, value)
    return _finish("add", labels)


def _cmd_add_after(args: argparse.Namespace, config: dict[str, Any]) -> int:
    labels = _service(args, config).add_after(
        args.files,
        args.target_key,
        args.new_key,
        args.object_json,
        check_duplicates=False if args.allow_duplicates else None,
    )
    return _finish("add-after", labels)


def _cmd_rename(args: argparse.Namespace, config: dict[str, Any]) -> int:
    try:
        results = _service(args, config).rename_keys(args.files, args.old_key, args.new_key)
    except JsonEditError as exc:
        print(f"error: {exc}")
        return 2
    labels = {path: row["outcome"] for path, row in results.items()}
    counts = {path: row["replacement_count"] for path, row in results.items()}
    return _finish("rename", labels, {"replacement_counts": counts})


def _cmd_serve(args: argparse.Namespace) -> int:
    try:
        import uvicorn
    except Exception as exc:  # pragma: no cover - dependency error guard
        raise RuntimeError("uvicorn is required to serve the HTTP app") from exc

    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=False)
    return 0


def _add_edit_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("files", nargs="+", help="JSON files to edit.")
    parser.add_argument(
        "--base-path",
        action="append",
        default=[],
        help="Restrict edits to this base path (repeatable). Defaults to configured base paths.",
    )
    parser.add_argument("--workers", type=int, default=None, help="Max concurrent files.")
    parser.add_argument("--dry-run", action="store_true", help="Run every edit without writing files.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse and batch-edit JSON files without reformatting them.")
    parser.add_argument("--config", default=None, help="Config file path (defaults to config/config.json).")
    sub = parser.add_subparsers(dest="command", required=True)

    browse = sub.add_parser("browse", help="List candidate files under the base paths.")
    browse.add_argument("--base-path", action="append", default=[], help="Folder to walk (repeatable).")
    browse.add_argument("--ext", default=None, help="Extension filter, for example `.json`. Empty matches all.")
    browse.add_argument("--key", default="", help="Only list files containing this key at any depth.")

    add = sub.add_parser("add", help="Insert a key/value into an object, or into each object of an array.")
    _add_edit_arguments(add)
    add.add_argument("--path", default="", help="Dotted object path; only the last segment is used. Empty means root.")
    add.add_argument("--key", required=True, help="Key to insert.")
    add.add_argument("--value-json", required=True, help="Value as JSON text, for example '\"x\"' or '{\"a\": 1}'.")

    add_after = sub.add_parser("add-after", help="Insert a keyed object after every occurrence of a key.")
    _add_edit_arguments(add_after)
    add_after.add_argument("--target-key", required=True, help="Existing key to insert after.")
    add_after.add_argument("--new-key", required=True, help="Key of the inserted entry.")
    add_after.add_argument("--object-json", required=True, help="Inserted value as JSON text.")
    add_after.add_argument(
        "--allow-duplicates",
        action="store_true",
        help="Skip the sibling duplicate check.",
    )

    rename = sub.add_parser("rename", help="Rename every occurrence of a key.")
    _add_edit_arguments(rename)
    rename.add_argument("--old-key", required=True, help="Key to rename.")
    rename.add_argument("--new-key", required=True, help="Replacement key.")

    serve = sub.add_parser("serve", help="Run the HTTP app.")
    serve.add_argument("--host", default="127.0.0.1", help="Local bind host.")
    serve.add_argument("--port", type=int, default=8000, help="Local bind port.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}")
        return 2
    setup_logging(config)

    if args.command == "browse":
        return _cmd_browse(args, config)
    if args.command == "add":
        return _cmd_add(args, config)
    if args.command == "add-after":
        return _cmd_add_after(args, config)
    if args.command == "rename":
        return _cmd_rename(args, config)
    if args.command == "serve":
        return _cmd_serve(args)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
