"""
Projector: Read-model for pages and the public API

Turns store collections into view objects. This is the boundary where a
failed fetch becomes an empty page instead of an error: store errors are
logged, counted, and replaced with empty collections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from saln_tracker.core import (
    DataIntegrityError,
    DataUnavailableError,
    GroupedOfficials,
    OfficialSummary,
    OfficialView,
    format_currency,
    group_officials,
    sort_officials,
    sort_resources,
    summarize,
    with_summary,
)
from saln_tracker.db.store import DataStore
from saln_tracker.observability import ContextLogger, get_logger, get_metrics
from saln_tracker.schemas import Agency, Official, OfficialStatus, Resource, SALNRecord

T = TypeVar("T")

# The net worth chart is only drawn when there is a trend to show
MIN_RECORDS_FOR_CHART = 2

STATUS_HEADINGS = {
    OfficialStatus.ACTIVE: "Current Officials",
    OfficialStatus.INACTIVE: "Former Officials",
}


@dataclass
class ChartPoint:
    """One year on the net worth chart."""
    year: str
    net_worth: float
    assets: float
    liabilities: float
    net_worth_label: str
    assets_label: str
    liabilities_label: str


@dataclass
class OfficialDetail:
    """Everything the official page shows."""
    official: Official
    summary: OfficialSummary
    records: list[SALNRecord]
    chart: list[ChartPoint] = field(default_factory=list)


@dataclass
class AgencySection:
    agency: Agency
    officials: list[OfficialView]


@dataclass
class StatusSection:
    status: OfficialStatus
    heading: str
    agencies: list[AgencySection]

    @property
    def total(self) -> int:
        return sum(len(a.officials) for a in self.agencies)


def records_newest_first(records: list[SALNRecord]) -> list[SALNRecord]:
    """Stored order is not guaranteed, so pages sort by year themselves."""
    return sorted(records, key=lambda r: r.year, reverse=True)


def chart_points(records: list[SALNRecord]) -> list[ChartPoint]:
    """Oldest-first series with shortened labels; empty below the chart threshold."""
    if len(records) < MIN_RECORDS_FOR_CHART:
        return []

    return [
        ChartPoint(
            year=str(r.year),
            net_worth=float(r.net_worth),
            assets=float(r.total_assets),
            liabilities=float(r.total_liabilities),
            net_worth_label=format_currency(r.net_worth, shorten=True),
            assets_label=format_currency(r.total_assets, shorten=True),
            liabilities_label=format_currency(r.total_liabilities, shorten=True),
        )
        for r in sorted(records, key=lambda r: r.year)
    ]


class Projector:
    """
    Read-model over a DataStore.

    Args:
        store: Where officials and resources come from
        logger: Diagnostic channel for degraded fetches
    """

    def __init__(self, store: DataStore, logger: Optional[ContextLogger] = None):
        self.store = store
        self.logger = logger or get_logger(__name__)

    def _degrade(self, what: str, fetch: Callable[[], T], fallback: T) -> T:
        try:
            return fetch()
        except DataUnavailableError as e:
            self.logger.warning(f"{what} unavailable, showing empty state", error=str(e))
        except DataIntegrityError as e:
            self.logger.error(f"{what} rejected by schema, showing empty state", error=str(e))
        get_metrics().record_fetch_failure()
        return fallback

    # ------------------------------------------------------------
    # Officials
    # ------------------------------------------------------------

    def list_officials(self, sort: Optional[str] = None) -> list[OfficialView]:
        """All officials with summaries, in the requested order."""
        officials = self._degrade("Officials", self.store.list_officials, [])
        return sort_officials([with_summary(o) for o in officials], sort)

    def grouped_officials(self, sort: Optional[str] = None) -> GroupedOfficials:
        """Officials bucketed by status and agency; each bucket keeps the sort order."""
        return group_officials(self.list_officials(sort))

    def home_sections(self, sort: Optional[str] = None) -> list[StatusSection]:
        """Non-empty status/agency sections for the home page."""
        grouped = self.grouped_officials(sort)
        sections = []
        for status, agencies in grouped.items():
            agency_sections = [
                AgencySection(agency=agency, officials=officials)
                for agency, officials in agencies.items()
                if officials
            ]
            if agency_sections:
                sections.append(StatusSection(
                    status=status,
                    heading=STATUS_HEADINGS[status],
                    agencies=agency_sections,
                ))
        return sections

    def official_detail(self, slug: str) -> Optional[OfficialDetail]:
        """Detail view for one official, or None when the slug is unknown."""
        official = self._degrade("Official", lambda: self.store.get_official(slug), None)
        if official is None:
            return None

        return OfficialDetail(
            official=official,
            summary=summarize(official.saln_records),
            records=records_newest_first(official.saln_records),
            chart=chart_points(official.saln_records),
        )

    # ------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------

    def list_resources(self, sort: Optional[str] = None) -> list[Resource]:
        resources = self._degrade("Resources", self.store.list_resources, [])
        return sort_resources(resources, sort)

    def stats(self) -> dict[str, Any]:
        """Counts for the API index."""
        views = self.list_officials()
        return {
            "officials": len(views),
            "officials_with_records": sum(1 for v in views if v.saln_count),
            "saln_records": sum(v.saln_count for v in views),
        }
