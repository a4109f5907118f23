# =============================================================================
# core/models/listing.py - Listing Query & Page Schemas
# =============================================================================
# A listing is one filtered, sorted, paginated read of the contacts table:
# - ListingQuery: search text + sort key/direction + zero-based page
# - ContactPage: one page of results plus the total match count
#
# Pages are zero-based. Page p of size s covers the inclusive row range
# [p*s, p*s + s - 1].
# =============================================================================

import math

from pydantic import BaseModel, Field, computed_field

from .contact import Contact, SortDirection, SortField

DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT_FIELD = SortField.CREATED_AT
DEFAULT_SORT_DIRECTION = SortDirection.DESC


def total_pages(total: int, page_size: int) -> int:
    """Number of pages needed to show `total` rows, `page_size` at a time."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return math.ceil(total / page_size) if total > 0 else 0


class ListingQuery(BaseModel):
    """
    Parameters of one listing request.

    Example:
        ListingQuery(search="jo", sort_by="age", sort_dir="asc", page=2)
    """

    search: str = Field(
        default="",
        max_length=255,
        description="Case-insensitive substring matched against name"
    )

    sort_by: SortField = Field(
        default=DEFAULT_SORT_FIELD,
        description="Column to order by"
    )

    sort_dir: SortDirection = Field(
        default=DEFAULT_SORT_DIRECTION,
        description="Sort direction"
    )

    page: int = Field(
        default=0,
        ge=0,
        description="Zero-based page index"
    )

    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=100,
        description="Rows per page"
    )

    @property
    def descending(self) -> bool:
        return self.sort_dir == SortDirection.DESC

    @property
    def range_start(self) -> int:
        return self.page * self.page_size

    @property
    def range_end(self) -> int:
        """Inclusive end offset of the page."""
        return self.range_start + self.page_size - 1

    def to_params(self) -> dict[str, str | int]:
        """Query-string form used by the HTTP client."""
        params: dict[str, str | int] = {
            "sort_by": self.sort_by.value,
            "sort_dir": self.sort_dir.value,
            "page": self.page,
            "page_size": self.page_size,
        }
        if self.search:
            params["search"] = self.search
        return params


class ContactPage(BaseModel):
    """
    One page of contacts.

    Returned by GET /contacts.

    Example:
        {
            "contacts": [...],
            "total": 25,
            "page": 2,
            "page_size": 10,
            "total_pages": 3
        }
    """

    contacts: list[Contact] = Field(default_factory=list)
    total: int = Field(default=0, ge=0, description="Rows matching the filter")
    page: int = Field(default=0, ge=0)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=100)

    @computed_field
    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)
