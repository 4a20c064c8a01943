"""
Grouping of officials by status and government branch.

    group_officials(officials)[OfficialStatus.ACTIVE][Agency.EXECUTIVE] -> [...]

Every status and every agency key is always present, so templates can
iterate the full grid without checking for missing buckets.
"""

from typing import Iterable, TypeVar

from ..schemas import Agency, OfficialStatus
from .errors import DataIntegrityError

T = TypeVar("T")

GroupedOfficials = dict[OfficialStatus, dict[Agency, list[T]]]


def empty_groups() -> GroupedOfficials:
    return {status: {agency: [] for agency in Agency} for status in OfficialStatus}


def group_officials(officials: Iterable[T]) -> GroupedOfficials:
    """
    Partition officials into (status, agency) buckets.

    Works on anything with `status` and `agency` attributes (Official or
    OfficialView). Input order is kept inside each bucket.

    Raises:
        DataIntegrityError: If an item carries a status or agency outside the
            known enums. Validated data never does.
    """
    groups = empty_groups()

    for official in officials:
        try:
            status = OfficialStatus(official.status)
            agency = Agency(official.agency)
        except ValueError as e:
            raise DataIntegrityError(
                f"Official '{getattr(official, 'slug', '?')}' has an unknown status/agency: {e}"
            ) from e
        groups[status][agency].append(official)

    return groups


def count_grouped(groups: GroupedOfficials) -> int:
    """Total number of officials across all buckets."""
    return sum(len(bucket) for agencies in groups.values() for bucket in agencies.values())
