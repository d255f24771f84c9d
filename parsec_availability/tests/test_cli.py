"""End-to-end CLI runs against a snapshot saved under tmp_path."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import openpyxl
import pytest

from parsec_availability import cli
from parsec_availability.ingest import SnapshotBuildInput, build_snapshot
from parsec_availability.storage import save_snapshot

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def artifact_root(monkeypatch, tmp_path):
    root = tmp_path / "artifacts"
    monkeypatch.setenv("PARSEC_ARTIFACT_DIR", str(root))
    monkeypatch.setenv("PARSEC_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.delenv("PARSEC_SUPABASE_URL", raising=False)
    monkeypatch.delenv("PARSEC_SUPABASE_KEY", raising=False)
    with open(FIXTURES_DIR / "payload.json", encoding="utf-8") as f:
        payload = json.load(f)
    snapshot = build_snapshot(
        SnapshotBuildInput(payload=payload, snapshot_id="snap-test", generated_at="2025-01-06T10:00:00Z")
    )
    save_snapshot(root.resolve(), snapshot)
    return root


def _read_csv(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


class TestExport:
    def test_default_sort_newest_first(self, artifact_root, tmp_path, capsys):
        out = tmp_path / "view.csv"
        assert cli.main(["export", "--output", str(out)]) == 0
        assert json.loads(capsys.readouterr().out) == {"path": str(out)}
        rows = _read_csv(out)
        assert [r["Date Range"] for r in rows] == [
            "2025-01-01 - 2025-01-31",
            "2025-01-06 - 2025-01-06",
            "2025-01-10 - 2025-01-12",
        ]

    def test_filters_and_sort(self, artifact_root, tmp_path):
        out = tmp_path / "filtered.csv"
        code = cli.main([
            "export",
            "--output", str(out),
            "--location", "Köln",
            "--is-recurring", "true",
            "--sort", "name",
            "--direction", "asc",
        ])
        assert code == 0
        rows = _read_csv(out)
        assert len(rows) == 1
        assert rows[0]["Days"] == "saturday,sunday"

    def test_all_means_unset(self, artifact_root, tmp_path):
        out = tmp_path / "all.csv"
        assert cli.main(["export", "--output", str(out), "--shift-type", "all"]) == 0
        assert len(_read_csv(out)) == 3

    def test_default_output_location(self, artifact_root, capsys):
        assert cli.main(["export", "--search", "smith"]) == 0
        path = Path(json.loads(capsys.readouterr().out)["path"])
        assert path.parent == (artifact_root / "exports").resolve()
        assert path.name.startswith("availability-")
        assert [r["Name"] for r in _read_csv(path)] == ["Bob Smith"]

    def test_xlsx_with_calendar(self, artifact_root, tmp_path):
        out = tmp_path / "view.xlsx"
        assert cli.main(["export", "--format", "xlsx", "--output", str(out), "--month", "2025-01"]) == 0
        assert openpyxl.load_workbook(out).sheetnames == ["Overview", "Availability", "Calendar"]

    def test_invalid_filter_exits_2(self, artifact_root, tmp_path):
        out = tmp_path / "never.csv"
        assert cli.main(["export", "--output", str(out), "--shift-type", "brunchShift"]) == 2
        assert not out.exists()

    def test_unknown_sort_exits_2(self, artifact_root, tmp_path):
        assert cli.main(["export", "--output", str(tmp_path / "x.csv"), "--sort", "phone"]) == 2

    def test_missing_snapshot_exits_2(self, artifact_root):
        assert cli.main(["export", "--snapshot", "snap-nope"]) == 2


class TestCalendar:
    def test_month_counts(self, artifact_root, capsys):
        assert cli.main(["calendar", "2025-01"]) == 0
        days = {d["date"]: d for d in json.loads(capsys.readouterr().out)}
        assert len(days) == 31
        assert days["2025-01-06"]["people"] == 1
        assert days["2025-01-11"] == {"date": "2025-01-11", "people": 2, "entries": 2}
        assert days["2025-01-07"]["people"] == 0

    def test_bad_month_exits_2(self, artifact_root):
        assert cli.main(["calendar", "2025-13"]) == 2


class TestSync:
    def test_missing_credentials_exits_2(self, artifact_root):
        assert cli.main(["sync"]) == 2

    def test_sync_stores_snapshot(self, artifact_root, monkeypatch, capsys):
        monkeypatch.setenv("PARSEC_SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setenv("PARSEC_SUPABASE_KEY", "anon-key")
        payload = {"rows": [{"id": "r-1", "date": "2025-02-01", "location": "Berlin"}], "profiles": []}
        monkeypatch.setattr(
            cli.ReadOnlySupabaseClient, "fetch_snapshot_payload", lambda self, cfg: payload
        )
        assert cli.main(["sync"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["counts"]["rows"] == 1
        assert Path(result["path"], "snapshot.json").exists()


class TestSnapshots:
    def test_lists_saved_snapshot(self, artifact_root, capsys):
        assert cli.main(["snapshots"]) == 0
        manifests = json.loads(capsys.readouterr().out)
        assert [m["snapshot_id"] for m in manifests] == ["snap-test"]
        assert manifests[0]["counts"]["records"] == 3

    def test_empty_store(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("PARSEC_ARTIFACT_DIR", str(tmp_path / "empty"))
        monkeypatch.setenv("PARSEC_ENV_FILE", str(tmp_path / "missing.env"))
        assert cli.main(["snapshots", "--limit", "5"]) == 0
        assert json.loads(capsys.readouterr().out) == []


class TestEmployees:
    def test_overview(self, artifact_root, capsys):
        assert cli.main(["employees"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["summary"] == {"total": 1, "completed": 1, "in_progress": 0, "not_started": 0}
        assert [e["name"] for e in result["employees"]] == ["Ana Müller"]
        assert result["employees"][0]["guard_id_number"] == "BW-4711"

    def test_search_keeps_summary_over_all(self, artifact_root, capsys):
        assert cli.main(["employees", "--search", "nobody"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["employees"] == []
        assert result["summary"]["total"] == 1
