"""
Listing query / result models (pure logic layer).

Kept free of filesystem access so the same filter / sort / paginate rules
apply whatever produced the records.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Union


DEFAULT_MAX_PAGE_SIZE = 1000


def _parse_int(value: Union[int, str, None], *, default: int, label: str) -> int:
    if value is None:
        return default
    if isinstance(value, int):
        return value
    if not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"{label} must be an integer, got {value!r}") from None


class SortKey(str, Enum):
    NAME = "name"
    SIZE = "size"
    CREATED_AT = "createdAt"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SortKey"]:
        """
        Parse a sort key, accepting the wire names case-insensitively.

        None / blank means "no sort".
        """
        if value is None or not value.strip():
            return None
        raw = value.strip().lower()
        for key in cls:
            if key.value.lower() == raw:
                return key
        if raw in ("created_at", "date", "fecha"):
            return cls.CREATED_AT
        raise ValueError(f"Unknown sort key: {value!r}")


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        if value is None or not value.strip():
            return cls.ASC
        raw = value.strip().lower()
        if raw in ("asc", "ascending"):
            return cls.ASC
        if raw in ("desc", "descending"):
            return cls.DESC
        raise ValueError(f"Unknown sort order: {value!r}")


@dataclass(frozen=True)
class ListingQuery:
    """
    Filter, sort and pagination inputs of one listing call.

    page_size == 0 means "every matching record, unpaginated".
    """
    mime_type: Optional[str] = None
    extension: Optional[str] = None
    sort_by: Optional[SortKey] = None
    order: SortOrder = SortOrder.ASC
    page: int = 1
    page_size: int = 0

    @classmethod
    def from_raw(
        cls,
        *,
        mime_type: Optional[str] = None,
        extension: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
        page: Union[int, str, None] = 1,
        page_size: Union[int, str, None] = 0,
    ) -> "ListingQuery":
        """Build a query from raw request values. Raises ValueError on bad sort or paging inputs."""
        return cls(
            mime_type=(mime_type.strip() or None) if mime_type else None,
            extension=(extension.strip() or None) if extension else None,
            sort_by=SortKey.parse(sort_by),
            order=SortOrder.parse(order),
            page=_parse_int(page, default=1, label="page"),
            page_size=_parse_int(page_size, default=0, label="pageSize"),
        )


@dataclass(frozen=True)
class ListingResult:
    """One page of a listing plus counts over the whole filtered set."""
    current_page: int
    total_pages: int
    total_count: int
    items: Sequence[Any]
