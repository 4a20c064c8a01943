"""
Tests for the management CLI

Commands run through main() against snapshot files in tmp_path.
"""

import json

import pytest

from saln_tracker.db import parse_officials_snapshot
from saln_tracker.db.config import DEFAULT_OFFICIALS_SOURCE, DEFAULT_RESOURCES_SOURCE
from saln_tracker.db.store import parse_resources_snapshot
from saln_tracker.web.shared_store import reset_data_store
from tools.manage import main


def write_json(path, doc):
    path.write_text(json.dumps(doc), encoding="utf-8")
    return str(path)


def read_json(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def roster_doc(roster_id, name):
    return {
        "id": roster_id,
        "name": name,
        "position": "Senator",
        "agency": "LEGISLATIVE",
        "status": "active",
    }


def flat_record(record_id, official_id, year, net_worth=1000):
    return {
        "id": record_id,
        "official_id": official_id,
        "year": year,
        "net_worth": net_worth,
        "total_assets": net_worth,
        "total_liabilities": 0,
        "date_filed": f"{year}-12-31",
        "status": "submitted",
    }


@pytest.fixture
def shared_store_env(monkeypatch):
    """Point the shared store at the environment set by each test."""
    reset_data_store()
    monkeypatch.setenv("SALN_CACHE_TTL_SECONDS", "0")
    yield monkeypatch
    reset_data_store()


class TestManageCLI:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "SALN Tracker Management CLI" in capsys.readouterr().out

    # validate

    def test_validate_packaged_snapshots(self, capsys):
        assert main(["validate"]) == 0
        out = capsys.readouterr().out
        assert "[FAIL]" not in out
        assert "42 officials, 0 SALN records" in out
        assert "3 resources" in out

    def test_validate_bad_officials_file(self, tmp_path, capsys):
        bad = write_json(tmp_path / "officials.json", {"records": [{"name": "No Position"}]})
        assert main(["validate", "--officials", bad]) == 1
        out = capsys.readouterr().out
        assert f"[FAIL] {bad}:" in out
        assert f"[OK] {DEFAULT_RESOURCES_SOURCE}: 3 resources" in out

    def test_validate_missing_resources_file(self, tmp_path, capsys):
        missing = str(tmp_path / "nope.json")
        assert main(["validate", "--resources", missing]) == 1
        out = capsys.readouterr().out
        assert f"[OK] {DEFAULT_OFFICIALS_SOURCE}" in out
        assert f"[FAIL] {missing}:" in out

    # migrate

    def test_migrate_writes_nested_snapshot(self, tmp_path, capsys):
        roster = write_json(tmp_path / "roster.json", {"records": [
            roster_doc("sen-006", "Risa Hontiveros"),
            roster_doc("sen-002", "JV Ejercito"),
        ]})
        records = write_json(tmp_path / "saln-records.json", {"records": [
            flat_record("saln-1", "sen-006", 2021),
            flat_record("saln-2", "sen-006", 2023, net_worth=5000),
        ]})
        out = tmp_path / "site" / "officials.json"

        assert main(["migrate", "--officials", roster, "--records", records, "--out", str(out)]) == 0
        assert f"[OK] Wrote {out}" in capsys.readouterr().out

        written = read_json(out)
        assert list(written) == ["metadata", "records"]
        assert written["metadata"]["total_records"] == 2
        risa = written["records"][0]
        assert "id" not in risa
        assert [r["year"] for r in risa["saln_records"]] == [2023, 2021]
        assert all("official_id" not in r and "id" not in r for r in risa["saln_records"])

        snapshot = parse_officials_snapshot(written)
        assert [o.slug for o in snapshot.records] == ["risa-hontiveros", "jv-ejercito"]

    def test_migrate_warns_about_orphans(self, tmp_path, capsys):
        roster = write_json(tmp_path / "roster.json", [roster_doc("sen-006", "Risa Hontiveros")])
        records = write_json(tmp_path / "saln-records.json", {"records": [
            flat_record("saln-9", "sen-999", 2023),
        ]})
        out = tmp_path / "officials.json"

        assert main(["migrate", "--officials", roster, "--records", records, "-o", str(out)]) == 0
        assert "[WARN] Records for unknown officials: sen-999" in capsys.readouterr().out
        assert out.exists()

    def test_migrate_rejects_non_object_roster_entry(self, tmp_path, capsys):
        roster = write_json(tmp_path / "roster.json", [roster_doc("sen-006", "Risa Hontiveros"), 42])
        records = write_json(tmp_path / "saln-records.json", {"records": []})
        out = tmp_path / "officials.json"

        assert main(["migrate", "--officials", roster, "--records", records, "--out", str(out)]) == 1
        assert "[FAIL] Migration failed: Roster entry 1 is not an object" in capsys.readouterr().out
        assert not out.exists()

    def test_migrate_missing_roster_file(self, tmp_path, capsys):
        records = write_json(tmp_path / "saln-records.json", {"records": []})
        args = ["migrate", "--officials", str(tmp_path / "nope.json"), "--records", records,
                "--out", str(tmp_path / "officials.json")]
        assert main(args) == 1
        assert "[FAIL] Migration failed" in capsys.readouterr().out

    def test_migrate_invalid_flat_record(self, tmp_path, capsys):
        roster = write_json(tmp_path / "roster.json", [roster_doc("sen-006", "Risa Hontiveros")])
        records = write_json(tmp_path / "saln-records.json", {"records": [{"id": "saln-1"}]})
        args = ["migrate", "--officials", roster, "--records", records,
                "--out", str(tmp_path / "officials.json")]
        assert main(args) == 1
        assert "[FAIL] Migration failed" in capsys.readouterr().out

    # export

    def test_export_round_trips(self, tmp_path, capsys, shared_store_env):
        shared_store_env.setenv("SALN_DATASTORE_DRIVER", "json")
        shared_store_env.setenv("SALN_OFFICIALS_SOURCE", DEFAULT_OFFICIALS_SOURCE)
        shared_store_env.setenv("SALN_RESOURCES_SOURCE", DEFAULT_RESOURCES_SOURCE)
        out_dir = tmp_path / "export"

        assert main(["export", "--out", str(out_dir)]) == 0
        assert f"[OK] Exported 42 officials and 3 resources to {out_dir}" in capsys.readouterr().out

        officials = read_json(out_dir / "officials.json")
        resources = read_json(out_dir / "resources.json")
        assert list(officials) == ["metadata", "records"]
        assert list(resources) == ["metadata", "data"]
        assert officials["metadata"]["total_records"] == 42
        assert officials["metadata"]["version"] == "2.0"
        assert resources["metadata"]["version"] == "1.0"

        assert parse_officials_snapshot(officials).records == parse_officials_snapshot(
            read_json(DEFAULT_OFFICIALS_SOURCE)
        ).records
        assert [r.id for r in parse_resources_snapshot(resources).data] == ["res-001", "res-002", "res-003"]

    def test_export_keeps_non_ascii_text(self, tmp_path, shared_store_env):
        source = write_json(tmp_path / "officials.json", {"records": [{
            "name": "Pedro Dela Peña",
            "position": "Senator",
            "agency": "LEGISLATIVE",
            "status": "inactive",
        }]})
        shared_store_env.setenv("SALN_DATASTORE_DRIVER", "json")
        shared_store_env.setenv("SALN_OFFICIALS_SOURCE", source)
        shared_store_env.setenv("SALN_RESOURCES_SOURCE", DEFAULT_RESOURCES_SOURCE)
        out_dir = tmp_path / "export"

        assert main(["export", "-o", str(out_dir)]) == 0
        text = (out_dir / "officials.json").read_text(encoding="utf-8")
        assert "Pedro Dela Peña" in text
        assert '"slug": "pedro-dela-pea"' in text

    def test_export_unavailable_source(self, tmp_path, capsys, shared_store_env):
        shared_store_env.setenv("SALN_DATASTORE_DRIVER", "json")
        shared_store_env.setenv("SALN_OFFICIALS_SOURCE", str(tmp_path / "nope.json"))
        out_dir = tmp_path / "export"

        assert main(["export", "--out", str(out_dir)]) == 1
        assert "[FAIL] Export failed" in capsys.readouterr().out
        assert not (out_dir / "officials.json").exists()

    # summary

    def test_summary_over_memory_store(self, capsys, shared_store_env):
        shared_store_env.setenv("SALN_DATASTORE_DRIVER", "memory")

        assert main(["summary"]) == 0
        out = capsys.readouterr().out
        assert "=== SALN Tracker Summary ===" in out
        assert "Store: InMemoryDataStore" in out
        assert "Officials: 0 (0 with SALN records)" in out

    def test_summary_verbose_over_snapshot(self, tmp_path, capsys, shared_store_env):
        source = write_json(tmp_path / "officials.json", {"records": [
            {**roster_doc("sen-006", "Risa Hontiveros"), "saln_records": [
                flat_record("saln-1", "sen-006", 2023),
            ]},
            {**roster_doc("sen-020", "Leila de Lima"), "status": "inactive", "position": "Former Senator"},
        ]})
        shared_store_env.setenv("SALN_DATASTORE_DRIVER", "json")
        shared_store_env.setenv("SALN_OFFICIALS_SOURCE", source)

        assert main(["summary", "-v"]) == 0
        out = capsys.readouterr().out
        assert "Store: JsonDataStore" in out
        assert "  Legislative: 1" in out
        assert "    - Risa Hontiveros (1 records, latest 2023)" in out
        assert "    - Leila de Lima (0 records, latest None)" in out
        assert "Officials: 2 (1 with SALN records)" in out

    def test_summary_unavailable_source(self, tmp_path, capsys, shared_store_env):
        shared_store_env.setenv("SALN_DATASTORE_DRIVER", "json")
        shared_store_env.setenv("SALN_OFFICIALS_SOURCE", str(tmp_path / "nope.json"))

        assert main(["summary"]) == 1
        assert "[FAIL] Could not load officials" in capsys.readouterr().out
