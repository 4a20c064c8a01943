"""
Canonical Official Schema

A public figure whose SALNs are tracked.
The slug is the official's identity: it is derived from the name,
and it is the document ID in the store.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .saln import SALNRecord


class Agency(str, Enum):
    """Government branch an official belongs to. Order is display order."""
    EXECUTIVE = "EXECUTIVE"
    LEGISLATIVE = "LEGISLATIVE"
    CONSTITUTIONAL_COMMISSION = "CONSTITUTIONAL_COMMISSION"
    JUDICIARY = "JUDICIARY"

    @property
    def display_name(self) -> str:
        return AGENCY_DISPLAY_NAMES[self]


AGENCY_DISPLAY_NAMES = {
    Agency.EXECUTIVE: "Executive",
    Agency.LEGISLATIVE: "Legislative",
    Agency.CONSTITUTIONAL_COMMISSION: "Constitutional Commission",
    Agency.JUDICIARY: "Judiciary",
}


class OfficialStatus(str, Enum):
    """Whether the official currently holds office."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Official(BaseModel):
    """
    An official and the SALN records they own.

    Rules enforced at load time:
    - slug == slugify(name) (derived when the document omits it)
    - at most one SALN record per filing year
    """
    name: str = Field(..., min_length=1)

    position: str = Field(
        ...,
        description="Free-text role",
        examples=["President", "Senator", "COMELEC Commissioner"],
    )

    agency: Agency
    status: OfficialStatus

    term_start: Optional[date] = None
    term_end: Optional[date] = None

    slug: str = Field(default="", description="URL identifier derived from name")

    saln_records: list[SALNRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_identity_and_years(self) -> "Official":
        from ..core.slugs import slugify

        expected = slugify(self.name)
        if not self.slug:
            self.slug = expected
        elif self.slug != expected:
            raise ValueError(
                f"slug '{self.slug}' does not match name {self.name!r} (expected '{expected}')"
            )

        seen: set[int] = set()
        for record in self.saln_records:
            if record.year in seen:
                raise ValueError(f"{self.slug}: more than one SALN record for {record.year}")
            seen.add(record.year)
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "slug": "risa-hontiveros",
                "name": "Risa Hontiveros",
                "position": "Senator",
                "agency": "LEGISLATIVE",
                "status": "active",
                "term_start": "2022-06-30",
                "term_end": "2028-06-29",
                "saln_records": [],
            }
        }
