from .engine import apply_filters, apply_sort, paginate, run_listing, validate_query
from .models import (
    DEFAULT_MAX_PAGE_SIZE,
    ListingQuery,
    ListingResult,
    SortKey,
    SortOrder,
)

__all__ = [
    "DEFAULT_MAX_PAGE_SIZE",
    "ListingQuery",
    "ListingResult",
    "SortKey",
    "SortOrder",
    "apply_filters",
    "apply_sort",
    "paginate",
    "run_listing",
    "validate_query",
]
