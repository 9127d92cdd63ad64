"""
Listing engine (pure logic).

Input: records exposing ``name``, ``size``, ``created_at`` and ``mime_type``
plus a ListingQuery.
Output: a ListingResult. Filters run first (MIME, then extension), then the
optional sort, then pagination over the filtered set.
"""

from __future__ import annotations

import math
from pathlib import PurePath
from typing import Any, Callable, Sequence

from .models import DEFAULT_MAX_PAGE_SIZE, ListingQuery, ListingResult, SortKey, SortOrder


def _normalize_extension(value: str) -> str:
    return value.strip().lstrip(".").lower()


def validate_query(query: ListingQuery, *, max_page_size: int = DEFAULT_MAX_PAGE_SIZE) -> None:
    """
    Check pagination bounds.

    Raises:
        ValueError: page < 1, page_size < 0 or page_size > max_page_size.
    """
    if query.page < 1:
        raise ValueError(f"page must be >= 1, got {query.page}")
    if query.page_size < 0:
        raise ValueError(f"pageSize must be >= 0, got {query.page_size}")
    if query.page_size > max_page_size:
        raise ValueError(f"pageSize must be <= {max_page_size}, got {query.page_size}")


def apply_filters(records: Sequence[Any], query: ListingQuery) -> list[Any]:
    """Keep records matching both the MIME type and extension filters (when set)."""
    result = list(records)

    if query.mime_type:
        wanted_mime = query.mime_type.strip().lower()
        result = [r for r in result if r.mime_type.lower() == wanted_mime]

    if query.extension:
        wanted_ext = _normalize_extension(query.extension)
        if wanted_ext:
            result = [r for r in result if _normalize_extension(PurePath(r.name).suffix) == wanted_ext]

    return result


_SORT_KEYS: dict[SortKey, Callable[[Any], Any]] = {
    SortKey.NAME: lambda r: (r.name.casefold(), r.name),
    SortKey.SIZE: lambda r: r.size,
    SortKey.CREATED_AT: lambda r: r.created_at,
}


def apply_sort(records: Sequence[Any], query: ListingQuery) -> list[Any]:
    """Sort by the requested key; without a key the input order is kept."""
    if query.sort_by is None:
        return list(records)
    return sorted(
        records,
        key=_SORT_KEYS[query.sort_by],
        reverse=query.order == SortOrder.DESC,
    )


def paginate(records: Sequence[Any], *, page: int, page_size: int) -> ListingResult:
    """
    Slice one page out of the filtered, sorted records.

    A page past the end yields an empty item list, not an error.
    """
    total_count = len(records)

    if page_size == 0:
        return ListingResult(
            current_page=page,
            total_pages=1,
            total_count=total_count,
            items=list(records),
        )

    total_pages = math.ceil(total_count / page_size)
    start = (page - 1) * page_size
    return ListingResult(
        current_page=page,
        total_pages=total_pages,
        total_count=total_count,
        items=list(records[start:start + page_size]),
    )


def run_listing(
    records: Sequence[Any],
    query: ListingQuery,
    *,
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> ListingResult:
    validate_query(query, max_page_size=max_page_size)
    filtered = apply_filters(records, query)
    ordered = apply_sort(filtered, query)
    return paginate(ordered, page=query.page, page_size=query.page_size)
