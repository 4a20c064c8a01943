"""
Shared Data Store and Templates

Holds the process-wide DataStore and the Jinja2 environment used by pages.

Driver selection comes from the environment (see db/config.py):
- SALN_DATASTORE_DRIVER=json (default): packaged or configured snapshots
- SALN_DATASTORE_DRIVER=firestore: Firestore collections
- SALN_DATASTORE_DRIVER=memory: empty store

The store is created lazily on first use and wrapped in CachedDataStore.
reset_data_store() drops it (tests, config reloads).
"""

from pathlib import Path
from threading import Lock
from typing import Optional

from fastapi.templating import Jinja2Templates

from saln_tracker.core import format_currency
from saln_tracker.db.cache import CachedDataStore
from saln_tracker.db.config import DataStoreConfig, DataStoreDriver
from saln_tracker.db.store import DataStore, FirestoreDataStore, InMemoryDataStore, JsonDataStore
from saln_tracker.observability import get_logger
from saln_tracker.schemas import AGENCY_DISPLAY_NAMES, Agency, RecordStatus

logger = get_logger(__name__)

# Templates directory
TEMPLATES_DIR = Path(__file__).parent / "templates"

_store_lock = Lock()
_data_store: Optional[DataStore] = None


# ============================================================
# TEMPLATES
# ============================================================

RECORD_STATUS_LABELS = {
    RecordStatus.VERIFIED: "Verified",
    RecordStatus.SUBMITTED: "Submitted",
    RecordStatus.UNDER_REVIEW: "Under Review",
    RecordStatus.FLAGGED: "Flagged",
}

RECORD_STATUS_VARIANTS = {
    RecordStatus.VERIFIED: "success",
    RecordStatus.SUBMITTED: "info",
    RecordStatus.UNDER_REVIEW: "warning",
    RecordStatus.FLAGGED: "danger",
}


def agency_label(agency) -> str:
    try:
        return AGENCY_DISPLAY_NAMES[Agency(agency)]
    except ValueError:
        return str(agency)


def record_status_label(status) -> str:
    try:
        return RECORD_STATUS_LABELS[RecordStatus(status)]
    except ValueError:
        return str(status)


def record_status_variant(status) -> str:
    try:
        return RECORD_STATUS_VARIANTS[RecordStatus(status)]
    except ValueError:
        return "default"


def create_templates() -> Jinja2Templates:
    """Jinja2 templates with the SALN display filters registered."""
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["currency"] = format_currency
    templates.env.filters["agency_label"] = agency_label
    templates.env.filters["record_status_label"] = record_status_label
    templates.env.filters["record_status_variant"] = record_status_variant
    return templates


# ============================================================
# DATA STORE
# ============================================================

def _create_firestore_store(config: DataStoreConfig) -> DataStore:
    """Create FirestoreDataStore with application default credentials."""
    from google.cloud import firestore

    client = firestore.Client(project=config.firestore_project)
    logger.info(
        "Using Firestore store",
        project=config.firestore_project,
        collection=config.firestore_collection,
    )
    return FirestoreDataStore(
        client,
        collection=config.firestore_collection,
        resources_collection=config.firestore_resources_collection,
    )


def create_data_store(config: Optional[DataStoreConfig] = None) -> DataStore:
    """
    Create the DataStore described by the configuration.

    Returns:
        The driver's store wrapped in CachedDataStore
    """
    config = config or DataStoreConfig.from_env()

    if config.driver == DataStoreDriver.MEMORY:
        logger.info("Using in-memory store (no data)")
        inner: DataStore = InMemoryDataStore()
    elif config.driver == DataStoreDriver.FIRESTORE:
        inner = _create_firestore_store(config)
    else:
        logger.info("Using JSON snapshot store", **config.describe())
        inner = JsonDataStore(
            officials_source=config.officials_source,
            resources_source=config.resources_source,
            timeout_seconds=config.fetch_timeout_seconds,
        )

    return CachedDataStore(inner, ttl_seconds=config.cache_ttl_seconds)


def get_data_store() -> DataStore:
    """Get the shared data store, creating it on first use."""
    global _data_store

    with _store_lock:
        if _data_store is None:
            _data_store = create_data_store()
        return _data_store


def reset_data_store() -> None:
    """Forget the shared store; the next get_data_store() builds a new one."""
    global _data_store

    with _store_lock:
        _data_store = None
