"""
Flat-to-Nested Migration

Older deployments kept SALN records in one flat file, each record pointing
at its owner through "official_id". The current shape nests the records
under their official, and the official's slug replaces the roster id.

    roster:  [{"id": "sen-006", "name": "Risa Hontiveros", ...}, ...]
    flat:    {"metadata": ..., "records": [{"official_id": "sen-006", "year": 2023, ...}]}
        ->
    {"metadata": ..., "records": [{"name": ..., "slug": "risa-hontiveros",
                                   "saln_records": [...newest first...]}]}
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from ..observability import get_logger
from ..schemas import FlatRecordsSnapshot, Official, OfficialsSnapshot, build_metadata
from .store import ensure_unique_slugs, parse_official

logger = get_logger(__name__)

# Batched writes are capped at 500 operations
FIRESTORE_BATCH_LIMIT = 500


@dataclass
class MigrationResult:
    officials: list[Official]
    record_count: int = 0
    orphaned: list[str] = field(default_factory=list)

    def to_snapshot(self) -> OfficialsSnapshot:
        return OfficialsSnapshot(
            metadata=build_metadata(
                total_records=len(self.officials),
                description="Officials with nested SALN records",
            ),
            records=self.officials,
        )


def roster_entries(raw: Any) -> list[dict]:
    """A roster is a bare list or a snapshot-style document."""
    if isinstance(raw, dict):
        raw = raw.get("records") or raw.get("data") or []
    if not isinstance(raw, list):
        raise ValueError("Roster must be a JSON array or an object with 'records'")
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"Roster entry {index} is not an object: {entry!r}")
    return raw


def nest_records(roster: Iterable[dict], flat: FlatRecordsSnapshot) -> MigrationResult:
    """
    Attach flat SALN records to their officials.

    Records lose "id" and "official_id" and are ordered newest first.
    Records whose official_id is not on the roster are reported in
    `orphaned`, never silently attached elsewhere.
    """
    by_official: dict[str, list[dict]] = {}
    for record in flat.records:
        by_official.setdefault(record.official_id, []).append(
            record.model_dump(mode="json", exclude={"id", "official_id"})
        )

    officials = []
    record_count = 0
    seen_ids = set()
    for entry in roster:
        payload = dict(entry)
        roster_id = payload.pop("id", None)
        seen_ids.add(roster_id)

        records = sorted(by_official.get(roster_id, []), key=lambda r: r["year"], reverse=True)
        payload["saln_records"] = records
        payload.setdefault("slug", "")

        official = parse_official(payload, f"roster entry {roster_id}")
        officials.append(official)
        record_count += len(records)

    ensure_unique_slugs(officials)

    orphaned = sorted(oid for oid in by_official if oid not in seen_ids)
    if orphaned:
        logger.warning("SALN records reference unknown officials", official_ids=orphaned)

    return MigrationResult(officials=officials, record_count=record_count, orphaned=orphaned)


def publish_to_firestore(client: Any, officials: Iterable[Official], collection: str = "officials") -> int:
    """
    Write officials to Firestore as officials/{slug}.

    Returns:
        Number of documents written
    """
    col = client.collection(collection)
    batch = client.batch()
    pending = 0
    written = 0

    for official in officials:
        batch.set(col.document(official.slug), official.model_dump(mode="json"))
        pending += 1
        written += 1
        if pending == FIRESTORE_BATCH_LIMIT:
            batch.commit()
            batch = client.batch()
            pending = 0

    if pending:
        batch.commit()

    logger.info("Published officials to Firestore", collection=collection, count=written)
    return written
