"""Plan artifacts on disk.

Layout under the artifact root:

    plans/<plan_id>/plan.json       full plan (tasks, calendar, result)
    plans/<plan_id>/manifest.json   summary used for listings
    plans/latest.json               copy of the newest manifest
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PLAN_FILE = "plan.json"
MANIFEST_FILE = "manifest.json"
LATEST_FILE = "latest.json"


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def plan_root(artifact_root: Path) -> Path:
    root = Path(artifact_root) / "plans"
    root.mkdir(parents=True, exist_ok=True)
    return root


def plan_dir(artifact_root: Path, plan_id: str) -> Path:
    return plan_root(artifact_root) / plan_id


def _manifest(plan: dict[str, Any], target: Path) -> dict[str, Any]:
    result = plan.get("result", {})
    days = result.get("allocations", [])
    return {
        "plan_id": plan["plan_id"],
        "generated_at": plan.get("generated_at"),
        "calendar_name": plan.get("calendar_name"),
        "range": {
            "from": days[0]["date"] if days else None,
            "to": days[-1]["date"] if days else None,
        },
        "stats": result.get("stats", {}),
        "unallocated": len(result.get("unallocated_tasks", [])),
        "path": str(target.resolve()),
    }


def save_plan(artifact_root: Path, plan: dict[str, Any]) -> Path:
    """Write plan.json and its manifest, and point latest.json at it."""
    target = plan_dir(artifact_root, plan["plan_id"])
    _write_json(target / PLAN_FILE, plan)
    manifest = _manifest(plan, target)
    _write_json(target / MANIFEST_FILE, manifest)
    _write_json(plan_root(artifact_root) / LATEST_FILE, manifest)
    logger.info("Saved plan %s to %s", plan["plan_id"], target)
    return target


def list_plans(artifact_root: Path, limit: int = 20) -> list[dict[str, Any]]:
    """Stored manifests, newest first."""
    manifests: list[dict[str, Any]] = []
    for manifest_file in plan_root(artifact_root).glob(f"*/{MANIFEST_FILE}"):
        try:
            manifests.append(_read_json(manifest_file))
        except (OSError, ValueError):
            logger.warning("Skipping unreadable plan manifest %s", manifest_file)
    manifests.sort(key=lambda row: row.get("generated_at") or "", reverse=True)
    return manifests[:limit]


def load_plan(artifact_root: Path, plan_id: str | None = None) -> dict[str, Any]:
    """Full plan by id, or the latest one. Raises FileNotFoundError."""
    root = plan_root(artifact_root)
    pointer = root / plan_id / MANIFEST_FILE if plan_id else root / LATEST_FILE
    if not pointer.exists():
        raise FileNotFoundError(f"plan manifest not found: {plan_id or LATEST_FILE}")
    pid = _read_json(pointer)["plan_id"]
    path = root / pid / PLAN_FILE
    if not path.exists():
        raise FileNotFoundError(f"plan payload not found: {pid}")
    return _read_json(path)
