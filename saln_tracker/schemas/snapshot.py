"""
Snapshot Document Schemas

The flat-file form of the store: one JSON document per collection,

    {
      "metadata": {"version": ..., "last_updated": ..., "total_records": ...,
                   "source": ..., "description": ...},
      "records": [...]      # officials (older exports call it "data")
    }

Resources use a "data" array. The legacy flat SALN file (records carrying
"id" and "official_id") is only read by the migration command.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator

from .official import Official
from .resource import Resource
from .saln import SALNRecord


DEFAULT_SOURCE = "SALN Tracker Philippines - Aggregated from official government sources"


class SnapshotMetadata(BaseModel):
    version: str = "2.0"
    last_updated: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    total_records: int = 0
    source: str = DEFAULT_SOURCE
    description: str = ""


class OfficialsSnapshot(BaseModel):
    """Officials with nested SALN records."""
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)
    records: list[Official] = Field(
        default_factory=list,
        validation_alias=AliasChoices("records", "data"),
    )

    @model_validator(mode="after")
    def check_unique_slugs(self) -> "OfficialsSnapshot":
        seen: set[str] = set()
        for official in self.records:
            if official.slug in seen:
                raise ValueError(f"duplicate official slug '{official.slug}'")
            seen.add(official.slug)
        return self


class ResourcesSnapshot(BaseModel):
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)
    data: list[Resource] = Field(
        default_factory=list,
        validation_alias=AliasChoices("data", "records"),
    )


class FlatSALNRecord(SALNRecord):
    """A SALN record from the pre-migration flat file, joined to officials by id."""
    id: Optional[str] = None
    official_id: str


class FlatRecordsSnapshot(BaseModel):
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)
    records: list[FlatSALNRecord] = Field(default_factory=list)


def build_metadata(total_records: int, description: str, version: str = "2.0") -> SnapshotMetadata:
    """Fresh metadata block for an export."""
    return SnapshotMetadata(
        version=version,
        last_updated=datetime.now(timezone.utc).isoformat(),
        total_records=total_records,
        description=description,
    )
