"""
Data Store Configuration

Selects where officials and resources are read from.

Environment Variables:
    SALN_DATASTORE_DRIVER: Which driver to use
        - "json" (default): snapshot documents from a file path or URL
        - "memory": empty in-process store (tests, local development)
        - "firestore": Firestore collections keyed by slug
    SALN_OFFICIALS_SOURCE: Path or http(s) URL of the officials snapshot
    SALN_RESOURCES_SOURCE: Path or http(s) URL of the resources snapshot
    SALN_SITE_URL: Public site URL; resources default to <site>/resources.json
    SALN_FIRESTORE_PROJECT: Google Cloud project (default saln-tracker-ph)
    SALN_FIRESTORE_COLLECTION: Officials collection (default officials)
    SALN_FIRESTORE_RESOURCES_COLLECTION: Resources collection (default resources)
    SALN_CACHE_TTL_SECONDS: Seconds a fetched collection is reused (default 300, 0 = forever)
    SALN_FETCH_TIMEOUT_SECONDS: HTTP timeout for remote snapshots (default 10)
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


# Snapshots shipped with the package
PACKAGED_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_OFFICIALS_SOURCE = str(PACKAGED_DATA_DIR / "officials.json")
DEFAULT_RESOURCES_SOURCE = str(PACKAGED_DATA_DIR / "resources.json")


class DataStoreDriver(str, Enum):
    """Supported DataStore drivers."""
    MEMORY = "memory"
    JSON = "json"
    FIRESTORE = "firestore"


@dataclass
class DataStoreConfig:
    """Where and how to read the SALN collections."""
    driver: DataStoreDriver = DataStoreDriver.JSON

    officials_source: str = DEFAULT_OFFICIALS_SOURCE
    resources_source: str = DEFAULT_RESOURCES_SOURCE

    firestore_project: str = "saln-tracker-ph"
    firestore_collection: str = "officials"
    firestore_resources_collection: str = "resources"

    cache_ttl_seconds: float = 300.0
    fetch_timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "DataStoreConfig":
        """Load configuration from environment variables."""
        return cls(
            driver=get_datastore_driver(),
            officials_source=os.getenv("SALN_OFFICIALS_SOURCE", DEFAULT_OFFICIALS_SOURCE),
            resources_source=get_resources_source(),
            firestore_project=os.getenv("SALN_FIRESTORE_PROJECT", "saln-tracker-ph"),
            firestore_collection=os.getenv("SALN_FIRESTORE_COLLECTION", "officials"),
            firestore_resources_collection=os.getenv(
                "SALN_FIRESTORE_RESOURCES_COLLECTION", "resources"
            ),
            cache_ttl_seconds=float(os.getenv("SALN_CACHE_TTL_SECONDS", "300")),
            fetch_timeout_seconds=float(os.getenv("SALN_FETCH_TIMEOUT_SECONDS", "10")),
        )

    def describe(self) -> dict:
        """Loggable summary (no credentials are held here)."""
        if self.driver == DataStoreDriver.FIRESTORE:
            return {
                "driver": self.driver.value,
                "project": self.firestore_project,
                "collection": self.firestore_collection,
            }
        if self.driver == DataStoreDriver.JSON:
            return {
                "driver": self.driver.value,
                "officials_source": self.officials_source,
                "resources_source": self.resources_source,
            }
        return {"driver": self.driver.value}


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def get_resources_source() -> str:
    """
    Resolve the resources snapshot location.

    SALN_RESOURCES_SOURCE wins; otherwise SALN_SITE_URL/resources.json;
    otherwise the packaged file.
    """
    explicit = os.getenv("SALN_RESOURCES_SOURCE")
    if explicit:
        return explicit

    site_url: Optional[str] = os.getenv("SALN_SITE_URL")
    if site_url:
        return f"{site_url.rstrip('/')}/resources.json"

    return DEFAULT_RESOURCES_SOURCE


def get_datastore_driver() -> DataStoreDriver:
    """
    Get the DataStore driver to use.

    Returns:
        DataStoreDriver enum value (json when unset)

    Raises:
        ValueError: For an unrecognized SALN_DATASTORE_DRIVER
    """
    explicit = os.getenv("SALN_DATASTORE_DRIVER", "").lower()

    if not explicit:
        return DataStoreDriver.JSON

    try:
        return DataStoreDriver(explicit)
    except ValueError:
        raise ValueError(
            f"Unknown SALN_DATASTORE_DRIVER: {explicit}. "
            f"Valid values: memory, json, firestore"
        )
