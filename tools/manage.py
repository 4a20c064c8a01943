#!/usr/bin/env python3
"""
SALN Tracker Management CLI

Commands for managing SALN data:
- migrate: Nest a flat saln-records.json under an officials roster
- validate: Check snapshot files against the schemas
- summary: Show grouped counts for the configured data store
- export: Write the configured data store out as snapshot files

Usage:
    python -m tools.manage <command> [options]

Examples:
    python -m tools.manage migrate --officials roster.json --records saln-records.json --out officials.json
    python -m tools.manage validate --officials saln_tracker/data/officials.json
    SALN_DATASTORE_DRIVER=firestore python -m tools.manage export --out ./snapshot
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def _read_json(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_snapshot(snapshot, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
        f.write("\n")


def cmd_migrate(args):
    """Join flat SALN records onto the officials roster."""
    from saln_tracker.core import SALNTrackerError
    from saln_tracker.db.migration import nest_records, publish_to_firestore, roster_entries
    from saln_tracker.schemas import FlatRecordsSnapshot
    from pydantic import ValidationError

    try:
        roster = roster_entries(_read_json(args.officials))
        flat = FlatRecordsSnapshot.model_validate(_read_json(args.records))
        result = nest_records(roster, flat)
    except (OSError, ValueError, ValidationError, SALNTrackerError) as e:
        print(f"[FAIL] Migration failed: {e}")
        return 1

    print(f"Migrating {len(result.officials)} officials with {result.record_count} SALN records")
    for official in result.officials[:3]:
        print(f"  Example: {official.name} -> {official.slug}")

    if result.orphaned:
        print(f"[WARN] Records for unknown officials: {', '.join(result.orphaned)}")

    out = Path(args.out)
    _write_snapshot(result.to_snapshot(), out)
    print(f"[OK] Wrote {out}")

    if args.firestore:
        from google.cloud import firestore
        from saln_tracker.db import DataStoreConfig

        config = DataStoreConfig.from_env()
        client = firestore.Client(project=config.firestore_project)
        written = publish_to_firestore(client, result.officials, config.firestore_collection)
        print(f"[OK] Published {written} officials to {config.firestore_collection}/{{slug}}")

    return 0


def cmd_validate(args):
    """Validate snapshot files through the ingestion boundary."""
    from saln_tracker.core import SALNTrackerError
    from saln_tracker.db import JsonDataStore
    from saln_tracker.db.config import DEFAULT_OFFICIALS_SOURCE, DEFAULT_RESOURCES_SOURCE

    store = JsonDataStore(
        officials_source=args.officials or DEFAULT_OFFICIALS_SOURCE,
        resources_source=args.resources or DEFAULT_RESOURCES_SOURCE,
    )

    failed = False

    try:
        officials = store.list_officials()
        records = sum(len(o.saln_records) for o in officials)
        print(f"[OK] {store.officials_source}: {len(officials)} officials, {records} SALN records")
    except SALNTrackerError as e:
        print(f"[FAIL] {store.officials_source}: {e}")
        failed = True

    try:
        resources = store.list_resources()
        print(f"[OK] {store.resources_source}: {len(resources)} resources")
    except SALNTrackerError as e:
        print(f"[FAIL] {store.resources_source}: {e}")
        failed = True

    return 1 if failed else 0


def cmd_summary(args):
    """Print grouped counts for the configured store."""
    from saln_tracker.core import SALNTrackerError, group_officials, with_summary
    from saln_tracker.web.shared_store import get_data_store

    store = get_data_store()

    print("=== SALN Tracker Summary ===\n")
    print(f"Store: {store.describe()['type']}")

    try:
        views = [with_summary(o) for o in store.list_officials()]
    except SALNTrackerError as e:
        print(f"[FAIL] Could not load officials: {e}")
        return 1

    for status, agencies in group_officials(views).items():
        print(f"\n{status.value}:")
        for agency, members in agencies.items():
            if not members:
                continue
            print(f"  {agency.display_name}: {len(members)}")
            if args.verbose:
                for view in members:
                    latest = view.latest_saln_year or "None"
                    print(f"    - {view.name} ({view.saln_count} records, latest {latest})")

    with_records = sum(1 for v in views if v.saln_count)
    print(f"\nOfficials: {len(views)} ({with_records} with SALN records)")
    return 0


def cmd_export(args):
    """Export the configured store as officials.json and resources.json."""
    from saln_tracker.core import SALNTrackerError
    from saln_tracker.schemas import OfficialsSnapshot, ResourcesSnapshot, build_metadata
    from saln_tracker.web.shared_store import get_data_store

    store = get_data_store()

    try:
        officials = store.list_officials()
        resources = store.list_resources()
    except SALNTrackerError as e:
        print(f"[FAIL] Export failed: {e}")
        return 1

    out_dir = Path(args.out)
    _write_snapshot(
        OfficialsSnapshot(
            metadata=build_metadata(len(officials), "Officials with nested SALN records"),
            records=officials,
        ),
        out_dir / "officials.json",
    )
    _write_snapshot(
        ResourcesSnapshot(
            metadata=build_metadata(len(resources), "Content and links related to SALN", version="1.0"),
            data=resources,
        ),
        out_dir / "resources.json",
    )

    print(f"[OK] Exported {len(officials)} officials and {len(resources)} resources to {out_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SALN Tracker Management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # migrate
    p_migrate = subparsers.add_parser(
        "migrate",
        help="Nest flat SALN records under their officials"
    )
    p_migrate.add_argument("--officials", required=True, help="Officials roster (with roster ids)")
    p_migrate.add_argument("--records", required=True, help="Flat saln-records.json")
    p_migrate.add_argument("--out", "-o", default="officials.json", help="Output snapshot (default: officials.json)")
    p_migrate.add_argument("--firestore", action="store_true", help="Also write officials/{slug} documents")

    # validate
    p_validate = subparsers.add_parser(
        "validate",
        help="Validate snapshot files"
    )
    p_validate.add_argument("--officials", help="Officials snapshot path or URL (default: packaged)")
    p_validate.add_argument("--resources", help="Resources snapshot path or URL (default: packaged)")

    # summary
    p_summary = subparsers.add_parser(
        "summary",
        help="Show grouped counts for the configured store"
    )
    p_summary.add_argument("--verbose", "-v", action="store_true", help="List every official")

    # export
    p_export = subparsers.add_parser(
        "export",
        help="Export the configured store as snapshot files"
    )
    p_export.add_argument("--out", "-o", default=".", help="Output directory (default: .)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "migrate": cmd_migrate,
        "validate": cmd_validate,
        "summary": cmd_summary,
        "export": cmd_export,
    }

    return commands[args.command](args) or 0


if __name__ == "__main__":
    sys.exit(main())
