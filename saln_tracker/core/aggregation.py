"""
Per-official SALN summaries.

Derived on demand, never stored:
- saln_count: number of records
- latest_saln_year: max filing year (None when there are no records)
- latest_saln_record: first record, in input order, filed for that year
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from ..schemas import Agency, Official, OfficialStatus, SALNRecord


@dataclass(frozen=True)
class OfficialSummary:
    saln_count: int
    latest_saln_year: Optional[int] = None
    latest_saln_record: Optional["SALNRecord"] = None

    @property
    def has_records(self) -> bool:
        return self.latest_saln_record is not None


def summarize(records: Sequence["SALNRecord"]) -> OfficialSummary:
    """
    Summarize an official's SALN records.

    An empty sequence yields a summary with no latest year/record,
    which is distinct from a record whose figures are zero.
    """
    if not records:
        return OfficialSummary(saln_count=0)

    latest_year = max(r.year for r in records)
    latest = next(r for r in records if r.year == latest_year)

    return OfficialSummary(
        saln_count=len(records),
        latest_saln_year=latest_year,
        latest_saln_record=latest,
    )


@dataclass(frozen=True)
class OfficialView:
    """An official together with its derived summary."""
    official: "Official"
    summary: OfficialSummary

    @property
    def slug(self) -> str:
        return self.official.slug

    @property
    def name(self) -> str:
        return self.official.name

    @property
    def position(self) -> str:
        return self.official.position

    @property
    def agency(self) -> "Agency":
        return self.official.agency

    @property
    def status(self) -> "OfficialStatus":
        return self.official.status

    @property
    def saln_count(self) -> int:
        return self.summary.saln_count

    @property
    def latest_saln_year(self) -> Optional[int]:
        return self.summary.latest_saln_year

    @property
    def latest_saln_record(self) -> Optional["SALNRecord"]:
        return self.summary.latest_saln_record


def with_summary(official: "Official") -> OfficialView:
    return OfficialView(official=official, summary=summarize(official.saln_records))
