"""parsec-availability command line.

Syncs availability snapshots from the hosted database, lists stored snapshots,
exports filtered and sorted views, prints per-day head counts for a month and
the employee onboarding overview.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from availability_core.filters import criteria_from_params, filter_profiles, onboarding_summary
from availability_core.io import default_export_name, render_xlsx, write_csv
from availability_core.sorting import sort_records

from .config import get_supabase_config, load_env, runtime_config
from .dashboard import DashboardSession
from .ingest import SnapshotBuildInput, build_snapshot, profiles_from_snapshot, records_from_snapshot
from .storage import export_root, list_snapshots, load_snapshot, save_snapshot
from .supabase_client import ReadOnlySupabaseClient
from .utils import parse_month

logger = logging.getLogger(__name__)

_FILTER_FLAGS = (
    "search",
    "shift_type",
    "location",
    "mobile_deployable",
    "is_recurring",
    "weekdays",
    "date",
    "time",
)


def sync_snapshot(artifact_root: Path) -> dict[str, Any]:
    """Fetch rows and profiles and store them as a local snapshot."""
    cfg = get_supabase_config()
    client = ReadOnlySupabaseClient(base_url=cfg.url)
    payload = client.fetch_snapshot_payload(cfg)
    snapshot = build_snapshot(SnapshotBuildInput(payload=payload))
    target = save_snapshot(artifact_root, snapshot)
    return {
        "snapshot_id": snapshot["snapshot_id"],
        "counts": snapshot["metadata"]["counts"],
        "path": str(target),
    }


def export_snapshot(
    artifact_root: Path,
    *,
    params: dict[str, Any],
    sort_field: str,
    direction: str,
    fmt: str = "csv",
    output: Path | None = None,
    snapshot_id: str | None = None,
    month: str | None = None,
) -> Path:
    snapshot = load_snapshot(artifact_root, snapshot_id)
    session = DashboardSession(records_from_snapshot(snapshot), criteria=criteria_from_params(params))
    rows = sort_records(session.filtered(), sort_field, direction)
    target = output or export_root(artifact_root) / default_export_name(suffix=fmt)
    if fmt == "xlsx":
        return render_xlsx(rows, target, month=parse_month(month) if month else None)
    return write_csv(rows, target)


def month_counts(artifact_root: Path, month: str, snapshot_id: str | None = None) -> list[dict[str, Any]]:
    year, mon = parse_month(month)
    session = DashboardSession(records_from_snapshot(load_snapshot(artifact_root, snapshot_id)))
    out: list[dict[str, Any]] = []
    for week in session.calendar(year, mon):
        for cell in week:
            if cell is None:
                continue
            out.append({"date": cell.day.isoformat(), "people": cell.people, "entries": len(cell.entries)})
    return out


def employee_overview(
    artifact_root: Path,
    search: str | None = None,
    snapshot_id: str | None = None,
) -> dict[str, Any]:
    """Onboarding head counts over all profiles plus the profiles matching `search`."""
    profiles = profiles_from_snapshot(load_snapshot(artifact_root, snapshot_id))
    matched = filter_profiles(profiles, search)
    return {
        "summary": onboarding_summary(profiles),
        "employees": [
            {
                "id": p.id,
                "name": p.full_name.strip(),
                "email": p.email,
                "phone_number": p.phone_number,
                "guard_id_number": p.guard_id_number,
                "personal_data_completed": p.personal_data_completed,
                "rules_acknowledged": p.rules_acknowledged,
                "onboarding_completed": p.onboarding_completed,
            }
            for p in matched
        ],
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="parsec-availability", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("sync", help="Fetch availability rows and store a snapshot")

    snaps = sub.add_parser("snapshots", help="List stored snapshots, newest first")
    snaps.add_argument("--limit", type=int, default=20)

    export = sub.add_parser("export", help="Export a filtered, sorted view")
    export.add_argument("--snapshot", default=None, help="Snapshot ID (default: latest)")
    export.add_argument("--format", choices=["csv", "xlsx"], default="csv")
    export.add_argument("--output", type=Path, default=None)
    export.add_argument("--sort", default="createdAt", help="name|date|location|shiftType|createdAt")
    export.add_argument("--direction", choices=["asc", "desc"], default="desc")
    export.add_argument("--month", default=None, help="YYYY-MM; adds a Calendar sheet (xlsx only)")
    for flag in _FILTER_FLAGS:
        export.add_argument(f"--{flag.replace('_', '-')}", dest=flag, default=None)

    cal = sub.add_parser("calendar", help="Distinct people per day for a month")
    cal.add_argument("month", help="YYYY-MM")
    cal.add_argument("--snapshot", default=None)

    emp = sub.add_parser("employees", help="Employee search and onboarding status counts")
    emp.add_argument("--search", default=None, help="Name, email, phone or guard ID")
    emp.add_argument("--snapshot", default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_env(args.env_file)
    artifact_root = runtime_config().artifact_root

    try:
        if args.command == "sync":
            result: Any = sync_snapshot(artifact_root)
        elif args.command == "snapshots":
            result = list_snapshots(artifact_root, limit=args.limit)
        elif args.command == "export":
            params = {flag: getattr(args, flag) for flag in _FILTER_FLAGS}
            path = export_snapshot(
                artifact_root,
                params=params,
                sort_field=args.sort,
                direction=args.direction,
                fmt=args.format,
                output=args.output,
                snapshot_id=args.snapshot,
                month=args.month,
            )
            result = {"path": str(path)}
        elif args.command == "employees":
            result = employee_overview(artifact_root, args.search, args.snapshot)
        else:
            result = month_counts(artifact_root, args.month, args.snapshot)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
