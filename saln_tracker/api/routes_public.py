"""
Public API Routes

Read-only JSON mirror of the public pages: officials (flat and grouped),
one official's records, and resources.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from saln_tracker.core import (
    OfficialNotFoundError,
    OfficialView,
    format_currency,
    resolve_official_sort,
    resolve_resource_sort,
)
from saln_tracker.schemas import Agency, OfficialStatus, Resource, SALNRecord
from saln_tracker.schemas.saln import Money


router = APIRouter(prefix="/api/public", tags=["Public API"])


# Default cache for public read endpoints (30 seconds)
CACHE_CONTROL_PUBLIC = "public, max-age=30"


# ============================================================
# Response Models
# ============================================================

class LatestRecord(BaseModel):
    """Headline figures of an official's most recent SALN."""
    year: int
    net_worth: Money
    total_assets: Money
    total_liabilities: Money
    net_worth_display: str


class OfficialListItem(BaseModel):
    """Official summary for list views."""
    slug: str
    name: str
    position: str
    agency: Agency
    status: OfficialStatus
    saln_count: int
    latest_saln_year: Optional[int] = None
    latest: Optional[LatestRecord] = None


class AgencyGroup(BaseModel):
    agency: Agency
    label: str
    officials: list[OfficialListItem] = []


class StatusGroup(BaseModel):
    status: OfficialStatus
    heading: str
    total: int
    agencies: list[AgencyGroup] = []


class OfficialDetailResponse(BaseModel):
    """Full official detail; records are newest first."""
    slug: str
    name: str
    position: str
    agency: Agency
    status: OfficialStatus
    term_start: Optional[str] = None
    term_end: Optional[str] = None
    saln_count: int
    latest_saln_year: Optional[int] = None
    saln_records: list[SALNRecord] = []


# ============================================================
# Helper Functions
# ============================================================

def get_projector(request: Request):
    """Get projector from app state."""
    return request.app.state.projector


def _cached(content) -> JSONResponse:
    return JSONResponse(content=content, headers={"Cache-Control": CACHE_CONTROL_PUBLIC})


def to_list_item(view: OfficialView) -> OfficialListItem:
    record = view.latest_saln_record
    latest = None
    if record is not None:
        latest = LatestRecord(
            year=record.year,
            net_worth=record.net_worth,
            total_assets=record.total_assets,
            total_liabilities=record.total_liabilities,
            net_worth_display=format_currency(record.net_worth),
        )

    return OfficialListItem(
        slug=view.slug,
        name=view.name,
        position=view.position,
        agency=view.agency,
        status=view.status,
        saln_count=view.saln_count,
        latest_saln_year=view.latest_saln_year,
        latest=latest,
    )


# ============================================================
# Endpoints
# ============================================================

@router.get("/officials", response_model=list[OfficialListItem])
def list_officials(request: Request, sort: Optional[str] = None):
    """
    All officials with their SALN count and latest filing.

    `sort` is one of default, net_worth, assets, liabilities, first_name,
    last_name; anything else keeps the stored order.
    """
    projector = get_projector(request)
    views = projector.list_officials(resolve_official_sort(sort))

    return _cached([to_list_item(v).model_dump(mode="json") for v in views])


@router.get("/officials/grouped", response_model=list[StatusGroup])
def list_officials_grouped(request: Request, sort: Optional[str] = None):
    """Officials grouped by status, then by branch. Empty buckets are omitted."""
    projector = get_projector(request)
    sections = projector.home_sections(resolve_official_sort(sort))

    result = [
        StatusGroup(
            status=section.status,
            heading=section.heading,
            total=section.total,
            agencies=[
                AgencyGroup(
                    agency=group.agency,
                    label=group.agency.display_name,
                    officials=[to_list_item(v) for v in group.officials],
                )
                for group in section.agencies
            ],
        )
        for section in sections
    ]

    return _cached([item.model_dump(mode="json") for item in result])


@router.get("/officials/{slug}", response_model=OfficialDetailResponse)
def get_official(request: Request, slug: str):
    """One official with every SALN record, newest first."""
    projector = get_projector(request)
    detail = projector.official_detail(slug)

    if detail is None:
        raise HTTPException(status_code=404, detail=str(OfficialNotFoundError(slug)))

    official = detail.official
    response = OfficialDetailResponse(
        slug=official.slug,
        name=official.name,
        position=official.position,
        agency=official.agency,
        status=official.status,
        term_start=official.term_start.isoformat() if official.term_start else None,
        term_end=official.term_end.isoformat() if official.term_end else None,
        saln_count=detail.summary.saln_count,
        latest_saln_year=detail.summary.latest_saln_year,
        saln_records=detail.records,
    )

    return _cached(response.model_dump(mode="json"))


@router.get("/resources", response_model=list[Resource])
def list_resources(request: Request, sort: Optional[str] = None):
    """SALN-related resources; `sort` is year (default), type or source."""
    projector = get_projector(request)
    resources = projector.list_resources(resolve_resource_sort(sort))

    return _cached([r.model_dump(mode="json") for r in resources])
