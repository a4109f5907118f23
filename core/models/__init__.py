# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - contact.py: Contact record schemas and field rules
# - listing.py: Listing query and result page schemas
# - upload.py: Upload authorization schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .contact import (
    AGE_RANGE_MESSAGE,
    EDITABLE_FIELDS,
    FIELD_MESSAGES,
    Contact,
    ContactBatchCreate,
    ContactCreate,
    ContactUpdate,
    SortDirection,
    SortField,
    field_errors,
)
from .listing import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_FIELD,
    ContactPage,
    ListingQuery,
    total_pages,
)
from .upload import (
    UploadAuthorization,
    UploadAuthorizationRequest,
    UploadMethod,
)

__all__ = [
    # Contact
    "AGE_RANGE_MESSAGE",
    "EDITABLE_FIELDS",
    "FIELD_MESSAGES",
    "Contact",
    "ContactBatchCreate",
    "ContactCreate",
    "ContactUpdate",
    "SortDirection",
    "SortField",
    "field_errors",
    # Listing
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT_DIRECTION",
    "DEFAULT_SORT_FIELD",
    "ContactPage",
    "ListingQuery",
    "total_pages",
    # Upload
    "UploadAuthorization",
    "UploadAuthorizationRequest",
    "UploadMethod",
]
