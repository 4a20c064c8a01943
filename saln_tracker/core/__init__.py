# Core SALN presentation logic: pure functions over in-memory collections
from .errors import (
    SALNTrackerError,
    DataUnavailableError,
    OfficialNotFoundError,
    InvalidNameError,
    DataIntegrityError,
)
from .formatting import format_currency
from .slugs import slugify, find_by_slug
from .aggregation import OfficialSummary, OfficialView, summarize, with_summary
from .grouping import GroupedOfficials, group_officials, empty_groups, count_grouped
from .sorting import (
    OfficialSortKey,
    ResourceSortKey,
    sort_officials,
    sort_resources,
    resolve_official_sort,
    resolve_resource_sort,
)

__all__ = [
    "SALNTrackerError",
    "DataUnavailableError",
    "OfficialNotFoundError",
    "InvalidNameError",
    "DataIntegrityError",
    "format_currency",
    "slugify",
    "find_by_slug",
    "OfficialSummary",
    "OfficialView",
    "summarize",
    "with_summary",
    "GroupedOfficials",
    "group_officials",
    "empty_groups",
    "count_grouped",
    "OfficialSortKey",
    "ResourceSortKey",
    "sort_officials",
    "sort_resources",
    "resolve_official_sort",
    "resolve_resource_sort",
]
