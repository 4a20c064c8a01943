"""
Canonical SALN Record Schema

One official's Statement of Assets, Liabilities, and Net Worth
for one filing year. Figures are stored exactly as filed:
net worth is displayed as reported, never recomputed.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, PlainSerializer


def _money_to_json(value: Decimal):
    # Snapshots store plain JSON numbers; keep integers integral
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Money = Annotated[Decimal, PlainSerializer(_money_to_json, when_used="json")]


class RecordStatus(str, Enum):
    """Review state of a filed SALN."""
    SUBMITTED = "submitted"
    VERIFIED = "verified"
    UNDER_REVIEW = "under_review"
    FLAGGED = "flagged"


class Asset(BaseModel):
    """A declared asset."""
    description: str
    value: Money
    source: Optional[str] = Field(
        default=None,
        description="Provenance note for the figure",
        examples=["As reported in SALN"],
    )
    category: Optional[str] = Field(
        default=None,
        examples=["Real Property", "Personal Property", "Investments"],
    )


class Liability(BaseModel):
    """A declared liability."""
    creditor: str
    nature: str
    balance: Money


class SALNRecord(BaseModel):
    """
    A single year's disclosure.

    Owned by exactly one Official (nested under `saln_records`).
    """
    year: int = Field(..., ge=1900, le=2100, description="Filing year")

    net_worth: Money
    total_assets: Money
    total_liabilities: Money

    assets: list[Asset] = Field(default_factory=list)
    liabilities: list[Liability] = Field(default_factory=list)

    date_filed: date
    status: RecordStatus = RecordStatus.SUBMITTED

    source_url: Optional[str] = None
    source_description: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "year": 2023,
                "net_worth": 389000000,
                "total_assets": 400000000,
                "total_liabilities": 11000000,
                "assets": [
                    {"description": "Total Assets as reported", "value": 400000000,
                     "source": "As reported in SALN"}
                ],
                "liabilities": [
                    {"creditor": "As reported in SALN",
                     "nature": "Total Liabilities as reported", "balance": 11000000}
                ],
                "date_filed": "2023-12-31",
                "status": "submitted",
                "source_url": "/saln/President Ferdinand Marcos Jr./2023.pdf",
                "source_description": "SALN PDF Document",
            }
        }
