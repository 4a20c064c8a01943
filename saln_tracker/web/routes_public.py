"""
Public Routes: server-rendered pages

Home (officials grid), official detail, resources, about, and the
/ping monitor endpoint. Everything here is read-only.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from saln_tracker.core import resolve_official_sort, resolve_resource_sort

router = APIRouter()

SITE_NAME = "SALN Tracker Philippines"

OFFICIAL_SORT_OPTIONS = [
    ("default", "Default"),
    ("net_worth", "Net Worth"),
    ("assets", "Total Assets"),
    ("liabilities", "Total Liabilities"),
    ("first_name", "First Name"),
    ("last_name", "Last Name"),
]

RESOURCE_SORT_OPTIONS = [
    ("year", "Year"),
    ("type", "Type"),
    ("source", "Source"),
]


def get_projector(request: Request):
    """Get projector from app state."""
    return request.app.state.projector


def get_templates(request: Request):
    """Get templates from app state."""
    return request.app.state.templates


def readable_slug(slug: str) -> str:
    """'risa-hontiveros' -> 'Risa Hontiveros' (page titles only)."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)


@router.get("/", response_class=HTMLResponse)
def home(request: Request, sort: Optional[str] = None):
    """Officials grouped by status and branch."""
    projector = get_projector(request)
    templates = get_templates(request)

    sort_key = resolve_official_sort(sort)
    sections = projector.home_sections(sort_key)

    return templates.TemplateResponse(
        request,
        "public/home.html",
        {
            "title": f"{SITE_NAME} - Public Officials Transparency",
            "sections": sections,
            "sort": sort_key.value,
            "sort_options": OFFICIAL_SORT_OPTIONS,
        },
    )


@router.get("/official/{slug}", response_class=HTMLResponse)
def official_detail(request: Request, slug: str):
    """SALN records of one official."""
    projector = get_projector(request)
    templates = get_templates(request)

    detail = projector.official_detail(slug)

    if detail is None:
        raise HTTPException(status_code=404, detail="Official not found")

    return templates.TemplateResponse(
        request,
        "public/official_detail.html",
        {
            "title": f"{readable_slug(slug)} - SALN Records | {SITE_NAME}",
            "detail": detail,
            "chart_data": [asdict(p) for p in detail.chart],
        },
    )


@router.get("/resources", response_class=HTMLResponse)
def resources(request: Request, sort: Optional[str] = None):
    """SALN-related links."""
    projector = get_projector(request)
    templates = get_templates(request)

    sort_key = resolve_resource_sort(sort)

    return templates.TemplateResponse(
        request,
        "public/resources.html",
        {
            "title": f"Resources - {SITE_NAME}",
            "resources": projector.list_resources(sort_key),
            "sort": sort_key.value,
            "sort_options": RESOURCE_SORT_OPTIONS,
        },
    )


@router.get("/about", response_class=HTMLResponse)
def about(request: Request):
    templates = get_templates(request)
    return templates.TemplateResponse(
        request,
        "public/about.html",
        {"title": f"About - {SITE_NAME}"},
    )


@router.get("/ping", response_class=PlainTextResponse, include_in_schema=False)
def ping():
    """Uptime monitor endpoint."""
    return PlainTextResponse(
        "pong",
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )


def render_not_found(request: Request) -> HTMLResponse:
    """Not-found page; used by the app's 404 handler."""
    templates = get_templates(request)
    return templates.TemplateResponse(
        request,
        "public/not_found.html",
        {"title": f"Page Not Found - {SITE_NAME}"},
        status_code=404,
    )
