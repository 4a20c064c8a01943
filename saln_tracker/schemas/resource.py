"""
Resource Schema

A link to SALN-related reading material (news, laws, explainers).
Unrelated to any particular official.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Resource(BaseModel):
    id: str
    description: str
    source_url: str
    year: Optional[int] = None
    type: str = Field(..., examples=["News", "Law", "Explainer"])
    source: str = Field(..., description="Publisher", examples=["Rappler", "Official Gazette"])
    summary: Optional[str] = None
