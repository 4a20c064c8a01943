# Canonical schemas for SALN Tracker data.
# Everything that enters from the document store is validated against these.

from .saln import Asset, Liability, RecordStatus, SALNRecord
from .official import AGENCY_DISPLAY_NAMES, Agency, Official, OfficialStatus
from .resource import Resource
from .snapshot import (
    FlatRecordsSnapshot,
    FlatSALNRecord,
    OfficialsSnapshot,
    ResourcesSnapshot,
    SnapshotMetadata,
    build_metadata,
)

__all__ = [
    # SALN
    "Asset",
    "Liability",
    "RecordStatus",
    "SALNRecord",
    # Official
    "AGENCY_DISPLAY_NAMES",
    "Agency",
    "Official",
    "OfficialStatus",
    # Resource
    "Resource",
    # Snapshots
    "FlatRecordsSnapshot",
    "FlatSALNRecord",
    "OfficialsSnapshot",
    "ResourcesSnapshot",
    "SnapshotMetadata",
    "build_metadata",
]
