"""
Data Access Layer for SALN Tracker

Provides:
- DataStore abstraction (in-memory, JSON snapshots, Firestore)
- Explicit collection cache with single-flight fetches
- Environment-based configuration
"""

from .store import (
    DataStore,
    InMemoryDataStore,
    JsonDataStore,
    FirestoreDataStore,
    parse_officials_snapshot,
    parse_resources_snapshot,
)
from .cache import CachedDataStore
from .config import DataStoreConfig, DataStoreDriver, get_datastore_driver

__all__ = [
    "DataStore",
    "InMemoryDataStore",
    "JsonDataStore",
    "FirestoreDataStore",
    "parse_officials_snapshot",
    "parse_resources_snapshot",
    "CachedDataStore",
    "DataStoreConfig",
    "DataStoreDriver",
    "get_datastore_driver",
]
