from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _json_dump(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)


def _json_load(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def snapshot_root(artifact_root: Path) -> Path:
    path = artifact_root / "snapshots"
    path.mkdir(parents=True, exist_ok=True)
    return path


def export_root(artifact_root: Path) -> Path:
    path = artifact_root / "exports"
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_snapshot(artifact_root: Path, snapshot: dict[str, Any]) -> Path:
    root = snapshot_root(artifact_root)
    sid = snapshot["snapshot_id"]
    target = root / sid
    _json_dump(target / "snapshot.json", snapshot)

    manifest = {
        "snapshot_id": sid,
        "source": snapshot.get("source"),
        "generated_at": snapshot.get("generated_at"),
        "counts": snapshot.get("metadata", {}).get("counts", {}),
        "path": str(target.resolve()),
    }
    _json_dump(target / "manifest.json", manifest)
    _json_dump(root / "latest.json", manifest)
    return target


def list_snapshots(artifact_root: Path, limit: int = 20) -> list[dict[str, Any]]:
    root = snapshot_root(artifact_root)
    manifests: list[dict[str, Any]] = []

    for child in root.iterdir():
        if not child.is_dir():
            continue
        manifest_file = child / "manifest.json"
        if not manifest_file.exists():
            continue
        try:
            manifests.append(_json_load(manifest_file))
        except (OSError, json.JSONDecodeError):
            logger.warning("skipping unreadable manifest %s", manifest_file)
            continue

    manifests.sort(key=lambda row: row.get("generated_at", ""), reverse=True)
    return manifests[:limit]


def get_snapshot_manifest(artifact_root: Path, snapshot_id: str | None = None) -> dict[str, Any]:
    root = snapshot_root(artifact_root)
    if snapshot_id:
        manifest_path = root / snapshot_id / "manifest.json"
    else:
        manifest_path = root / "latest.json"
    if not manifest_path.exists():
        raise FileNotFoundError("snapshot manifest not found")
    return _json_load(manifest_path)


def load_snapshot(artifact_root: Path, snapshot_id: str | None = None) -> dict[str, Any]:
    manifest = get_snapshot_manifest(artifact_root, snapshot_id)
    sid = manifest["snapshot_id"]
    path = snapshot_root(artifact_root) / sid / "snapshot.json"
    if not path.exists():
        raise FileNotFoundError(f"snapshot payload not found: {sid}")
    return _json_load(path)
