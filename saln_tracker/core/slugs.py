"""
URL slugs for officials.

The slug is the official's public identifier (it is also the Firestore
document ID), so it must stay a pure function of the display name:

    slugify('Ferdinand "Bongbong" Romualdez Marcos Jr.')
        -> "ferdinand-bongbong-romualdez-marcos-jr"
"""

import re
from typing import Iterable, Optional, TypeVar

from .errors import InvalidNameError

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

T = TypeVar("T")


def slugify(name: str) -> str:
    """
    Derive a URL-safe slug from a display name.

    Raises:
        InvalidNameError: If nothing survives the stripping (e.g. "***").
    """
    slug = _DISALLOWED.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    slug = slug.strip("-")

    if not slug:
        raise InvalidNameError(f"Name {name!r} does not produce a usable slug")
    return slug


def find_by_slug(officials: Iterable[T], slug: str) -> Optional[T]:
    """Return the first official whose slug matches, or None."""
    for official in officials:
        if getattr(official, "slug", None) == slug:
            return official
    return None
