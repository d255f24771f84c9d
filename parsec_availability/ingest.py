from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from availability_core.filters import location_options, onboarding_summary
from availability_core.io.reader import merge_profiles, profile_from_row
from availability_core.models import AvailabilityRecord, PersonProfile

from .utils import now_utc_iso


@dataclass(frozen=True)
class SnapshotBuildInput:
    payload: dict[str, Any]
    source: str = "supabase"
    generated_at: str | None = None
    snapshot_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


def records_from_snapshot(snapshot: dict[str, Any]) -> list[AvailabilityRecord]:
    """Rebuild engine records from a stored snapshot (rows + profiles)."""
    return merge_profiles(snapshot.get("rows", []), snapshot.get("profiles", []))


def profiles_from_snapshot(snapshot: dict[str, Any]) -> list[PersonProfile]:
    return [profile_from_row(row) for row in snapshot.get("profiles", []) or []]


def build_snapshot(data: SnapshotBuildInput) -> dict[str, Any]:
    """Normalize a fetched payload into a JSON-serializable snapshot.

    Raw rows and profiles are stored as-is; counts and location options are
    derived from the joined records.
    """
    rows = [r for r in data.payload.get("rows", []) or [] if isinstance(r, dict)]
    profiles = [p for p in data.payload.get("profiles", []) or [] if isinstance(p, dict)]
    records = merge_profiles(rows, profiles)

    owners = {r.owner_id for r in records if r.owner_id}
    counts = {
        "rows": len(rows),
        "profiles": len(profiles),
        "records": len(records),
        "malformed": sum(1 for r in records if r.start_date is None or not r.locations),
        "recurring": sum(1 for r in records if r.is_recurring),
        "owners": len(owners),
        "owners_without_profile": len(owners - {str(p.get("id")) for p in profiles}),
    }

    return {
        "snapshot_id": data.snapshot_id or f"snap-{uuid4().hex[:12]}",
        "source": data.source,
        "generated_at": data.generated_at or now_utc_iso(),
        "rows": rows,
        "profiles": profiles,
        "metadata": {
            "counts": counts,
            "locations": location_options(records),
            "onboarding": onboarding_summary(profile_from_row(p) for p in profiles),
            **data.extra,
        },
    }
