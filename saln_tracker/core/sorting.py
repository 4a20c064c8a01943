"""
Sort orders for the officials grid and the resources page.

All sorts are stable and return a new list; the input is never reordered.
Unknown keys fall back to the collection's default order.

Officials (OfficialView items):
    net_worth / assets / liabilities  descending on the latest SALN, no SALN = 0
    first_name                        ascending on the full name
    last_name                         ascending on the last word of the name
    default                           input order

Resources:
    year                              descending, no year = 0 (the default)
    type / source                     ascending, case-insensitive
"""

import unicodedata
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional, Sequence, TypeVar, Union

from ..schemas import Resource
from .aggregation import OfficialView

E = TypeVar("E", bound=Enum)


class OfficialSortKey(str, Enum):
    DEFAULT = "default"
    NET_WORTH = "net_worth"
    ASSETS = "assets"
    LIABILITIES = "liabilities"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"


class ResourceSortKey(str, Enum):
    YEAR = "year"
    TYPE = "type"
    SOURCE = "source"


def coerce_sort_key(value: Union[str, E, None], enum_cls: type[E], default: E) -> E:
    """Map a raw query value onto a sort key enum, falling back to the default."""
    if isinstance(value, enum_cls):
        return value
    if not value:
        return default
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


def name_key(text: str) -> str:
    """Comparison key for names: accents folded, case folded ("Ñ" sorts with "N")."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def last_name(name: str) -> str:
    parts = name.split()
    return parts[-1] if parts else ""


# Field on the latest SALN record used by each numeric key
_RECORD_FIELDS = {
    OfficialSortKey.NET_WORTH: "net_worth",
    OfficialSortKey.ASSETS: "total_assets",
    OfficialSortKey.LIABILITIES: "total_liabilities",
}


def _latest_value(field_name: str) -> Callable[[OfficialView], Decimal]:
    def key(view: OfficialView) -> Decimal:
        record = view.latest_saln_record
        if record is None:
            return Decimal(0)
        return Decimal(getattr(record, field_name))
    return key


def sort_officials(
    officials: Sequence[OfficialView],
    key: Union[str, OfficialSortKey, None] = None,
) -> list[OfficialView]:
    """
    Return officials reordered by the selected key.

    Args:
        officials: Officials with their summaries.
        key: An OfficialSortKey or its string value. Anything else keeps input order.
    """
    sort_key = coerce_sort_key(key, OfficialSortKey, OfficialSortKey.DEFAULT)

    if sort_key in _RECORD_FIELDS:
        # reverse=True keeps equal items in input order
        return sorted(officials, key=_latest_value(_RECORD_FIELDS[sort_key]), reverse=True)
    if sort_key == OfficialSortKey.FIRST_NAME:
        return sorted(officials, key=lambda v: name_key(v.name))
    if sort_key == OfficialSortKey.LAST_NAME:
        return sorted(officials, key=lambda v: name_key(last_name(v.name)))
    return list(officials)


def sort_resources(
    resources: Sequence[Resource],
    key: Union[str, ResourceSortKey, None] = None,
) -> list[Resource]:
    """Return resources reordered by year (default), type, or source."""
    sort_key = coerce_sort_key(key, ResourceSortKey, ResourceSortKey.YEAR)

    if sort_key == ResourceSortKey.TYPE:
        return sorted(resources, key=lambda r: r.type.casefold())
    if sort_key == ResourceSortKey.SOURCE:
        return sorted(resources, key=lambda r: r.source.casefold())
    return sorted(resources, key=lambda r: r.year or 0, reverse=True)


def resolve_official_sort(value: Optional[str]) -> OfficialSortKey:
    return coerce_sort_key(value, OfficialSortKey, OfficialSortKey.DEFAULT)


def resolve_resource_sort(value: Optional[str]) -> ResourceSortKey:
    return coerce_sort_key(value, ResourceSortKey, ResourceSortKey.YEAR)
