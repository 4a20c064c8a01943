"""
Shared fixtures for SALN Tracker tests.

Officials and records here are fictional.
"""

import os
from datetime import date
from decimal import Decimal

import pytest

# Keep test logs readable
os.environ.setdefault("SALN_TRACKER_LOG_FORMAT", "text")

from saln_tracker.db import InMemoryDataStore
from saln_tracker.schemas import (
    Agency,
    Asset,
    Liability,
    Official,
    OfficialStatus,
    RecordStatus,
    Resource,
    SALNRecord,
)


def make_record(year, net_worth=0, total_assets=None, total_liabilities=0, **kwargs) -> SALNRecord:
    """A SALN record; assets default to net worth + liabilities."""
    if total_assets is None:
        total_assets = Decimal(net_worth) + Decimal(total_liabilities)
    return SALNRecord(
        year=year,
        net_worth=net_worth,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        date_filed=kwargs.pop("date_filed", date(year, 12, 31)),
        **kwargs,
    )


def make_official(
    name,
    agency=Agency.LEGISLATIVE,
    status=OfficialStatus.ACTIVE,
    records=None,
    position="Senator",
) -> Official:
    return Official(
        name=name,
        position=position,
        agency=agency,
        status=status,
        saln_records=records or [],
    )


def make_resource(resource_id, year=None, type="News", source="Rappler", **kwargs) -> Resource:
    return Resource(
        id=resource_id,
        description=kwargs.pop("description", f"Resource {resource_id}"),
        source_url=kwargs.pop("source_url", f"https://example.org/{resource_id}"),
        year=year,
        type=type,
        source=source,
        **kwargs,
    )


@pytest.fixture
def officials():
    """A small roster covering both statuses and three branches."""
    return [
        make_official(
            "Maria Santos",
            records=[
                make_record(2022, net_worth=10_000_000, total_liabilities=500_000),
                make_record(
                    2023,
                    net_worth=12_500_000,
                    total_liabilities=1_000_000,
                    status=RecordStatus.VERIFIED,
                    assets=[
                        Asset(description="House and lot, Quezon City", value=9_000_000,
                              category="Real Property"),
                        Asset(description="Cash in bank", value=4_500_000,
                              category="Personal Property", source="As reported in SALN"),
                    ],
                    liabilities=[
                        Liability(creditor="Landbank", nature="Housing loan", balance=1_000_000),
                    ],
                    source_url="https://example.org/saln/maria-santos-2023.pdf",
                ),
            ],
        ),
        make_official(
            "Jose Reyes",
            agency=Agency.EXECUTIVE,
            position="Vice President",
            records=[make_record(2023, net_worth=80_000_000, total_liabilities=2_000_000)],
        ),
        make_official(
            "Ana Cruz",
            agency=Agency.CONSTITUTIONAL_COMMISSION,
            position="Commissioner, Commission on Elections",
        ),
        make_official(
            "Pedro Dela Peña",
            status=OfficialStatus.INACTIVE,
            position="Former Senator",
            records=[make_record(2015, net_worth=3_000_000, total_liabilities=0)],
        ),
    ]


@pytest.fixture
def resources():
    return [
        make_resource("res-1", year=2019, type="News", source="Rappler"),
        make_resource("res-2", year=None, type="Law", source="Official Gazette"),
        make_resource("res-3", year=2023, type="Explainer", source="inquirer"),
    ]


@pytest.fixture
def memory_store(officials, resources):
    return InMemoryDataStore(officials=officials, resources=resources)
