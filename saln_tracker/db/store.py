"""
Data Store Abstraction

Read-only access to the officials and resources collections.

Implementations:
- InMemoryDataStore: fixed collections (tests, local development)
- JsonDataStore: snapshot documents from a file path or http(s) URL
- FirestoreDataStore: Firestore collections, officials keyed by slug

CONTRACT:
- list_officials() / list_resources() return validated models
- get_official(slug) returns None when nothing matches
- Store failures raise DataUnavailableError
- Documents that break the schema raise DataIntegrityError

Nothing here degrades to empty data; that decision belongs to the
presentation read-model (web/projector.py).
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Optional

import httpx
from google.api_core.exceptions import GoogleAPIError
from pydantic import ValidationError

from ..core import DataIntegrityError, DataUnavailableError, find_by_slug
from ..observability import get_logger
from ..schemas import Official, OfficialsSnapshot, Resource, ResourcesSnapshot
from .config import is_remote

logger = get_logger(__name__)


# ============================================================
# INGESTION BOUNDARY
# ============================================================

def _integrity_error(what: str, source: str, e: ValidationError) -> DataIntegrityError:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
    )
    return DataIntegrityError(f"Invalid {what} in {source}: {problems}")


def parse_officials_snapshot(raw: Any, source: str = "<document>") -> OfficialsSnapshot:
    """Validate an officials snapshot document."""
    try:
        return OfficialsSnapshot.model_validate(raw)
    except ValidationError as e:
        raise _integrity_error("officials snapshot", source, e) from e


def parse_resources_snapshot(raw: Any, source: str = "<document>") -> ResourcesSnapshot:
    """Validate a resources snapshot document."""
    try:
        return ResourcesSnapshot.model_validate(raw)
    except ValidationError as e:
        raise _integrity_error("resources snapshot", source, e) from e


def parse_official(raw: Any, source: str = "<document>") -> Official:
    """Validate a single official document."""
    try:
        return Official.model_validate(raw)
    except ValidationError as e:
        raise _integrity_error("official", source, e) from e


def parse_resource(raw: Any, source: str = "<document>") -> Resource:
    try:
        return Resource.model_validate(raw)
    except ValidationError as e:
        raise _integrity_error("resource", source, e) from e


def ensure_unique_slugs(officials: Iterable[Official]) -> None:
    seen: set[str] = set()
    for official in officials:
        if official.slug in seen:
            raise DataIntegrityError(f"Duplicate official slug '{official.slug}'")
        seen.add(official.slug)


# ============================================================
# STORES
# ============================================================

class DataStore(ABC):
    """Abstract base class for SALN data access."""

    @abstractmethod
    def list_officials(self) -> list[Official]:
        """All officials, each with nested SALN records."""
        pass

    @abstractmethod
    def list_resources(self) -> list[Resource]:
        pass

    def get_official(self, slug: str) -> Optional[Official]:
        """Official with this slug, or None."""
        return find_by_slug(self.list_officials(), slug)

    def describe(self) -> dict[str, Any]:
        """Diagnostics for health checks and startup logs."""
        return {"type": type(self).__name__}


class InMemoryDataStore(DataStore):
    """
    Store over fixed, already-validated collections.

    Suitable for tests and for serving an exported snapshot from memory.
    """

    def __init__(
        self,
        officials: Optional[Iterable[Official]] = None,
        resources: Optional[Iterable[Resource]] = None,
    ):
        self._officials = list(officials or [])
        self._resources = list(resources or [])
        ensure_unique_slugs(self._officials)

    def list_officials(self) -> list[Official]:
        return list(self._officials)

    def list_resources(self) -> list[Resource]:
        return list(self._resources)

    def describe(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "officials": len(self._officials),
            "resources": len(self._resources),
        }


class JsonDataStore(DataStore):
    """
    Store backed by snapshot documents.

    Each source is either a local path or an http(s) URL. Documents are read
    on every call; wrap in CachedDataStore to avoid refetching.
    """

    def __init__(
        self,
        officials_source: str,
        resources_source: str,
        timeout_seconds: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.officials_source = officials_source
        self.resources_source = resources_source
        self._timeout = timeout_seconds
        self._http_client = http_client

    def _fetch_remote(self, url: str) -> Any:
        try:
            if self._http_client is not None:
                response = self._http_client.get(url, timeout=self._timeout)
            else:
                response = httpx.get(url, timeout=self._timeout, follow_redirects=True)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise DataUnavailableError(f"Failed to fetch {url}: {e}") from e
        except ValueError as e:
            raise DataUnavailableError(f"Response from {url} is not JSON: {e}") from e

    def _read_local(self, path: str) -> Any:
        try:
            with open(Path(path), "r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise DataUnavailableError(f"Cannot read {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise DataUnavailableError(f"{path} is not valid JSON: {e}") from e
        except UnicodeDecodeError as e:
            raise DataUnavailableError(f"{path} is not UTF-8: {e}") from e

    def _read_document(self, source: str) -> Any:
        logger.debug("Reading snapshot", source=source)
        if is_remote(source):
            return self._fetch_remote(source)
        return self._read_local(source)

    def list_officials(self) -> list[Official]:
        raw = self._read_document(self.officials_source)
        return parse_officials_snapshot(raw, self.officials_source).records

    def list_resources(self) -> list[Resource]:
        raw = self._read_document(self.resources_source)
        return parse_resources_snapshot(raw, self.resources_source).data

    def describe(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "officials_source": self.officials_source,
            "resources_source": self.resources_source,
        }


class FirestoreDataStore(DataStore):
    """
    Store backed by Firestore.

    Layout:
        officials/{slug}    official fields + saln_records array
        resources/{id}      one resource per document

    Args:
        client: A google.cloud.firestore.Client (or anything with the same
            collection()/document()/stream() surface).
    """

    def __init__(
        self,
        client: Any,
        collection: str = "officials",
        resources_collection: str = "resources",
    ):
        self._client = client
        self.collection = collection
        self.resources_collection = resources_collection

    @staticmethod
    def _official_from_doc(doc_id: str, data: Optional[dict]) -> Official:
        payload = dict(data or {})
        payload.setdefault("slug", doc_id)
        return parse_official(payload, f"officials/{doc_id}")

    def list_officials(self) -> list[Official]:
        try:
            docs = list(self._client.collection(self.collection).stream())
        except GoogleAPIError as e:
            raise DataUnavailableError(f"Firestore read of '{self.collection}' failed: {e}") from e

        officials = [self._official_from_doc(doc.id, doc.to_dict()) for doc in docs]
        ensure_unique_slugs(officials)
        return officials

    def get_official(self, slug: str) -> Optional[Official]:
        # Slug is the document ID, so this is a direct lookup
        try:
            snapshot = self._client.collection(self.collection).document(slug).get()
        except GoogleAPIError as e:
            raise DataUnavailableError(f"Firestore read of '{self.collection}/{slug}' failed: {e}") from e

        if not snapshot.exists:
            return None
        return self._official_from_doc(snapshot.id, snapshot.to_dict())

    def list_resources(self) -> list[Resource]:
        try:
            docs = list(self._client.collection(self.resources_collection).stream())
        except GoogleAPIError as e:
            raise DataUnavailableError(
                f"Firestore read of '{self.resources_collection}' failed: {e}"
            ) from e

        resources = []
        for doc in docs:
            payload = dict(doc.to_dict() or {})
            payload.setdefault("id", doc.id)
            resources.append(parse_resource(payload, f"{self.resources_collection}/{doc.id}"))
        return resources

    def describe(self) -> dict[str, Any]:
        return {
            "type": type(self).__name__,
            "project": getattr(self._client, "project", None),
            "collection": self.collection,
            "resources_collection": self.resources_collection,
        }
