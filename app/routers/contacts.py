# =============================================================================
# app/routers/contacts.py - Contact CRUD Endpoints
# =============================================================================
# Create (single or batch), list/search/sort/paginate, read, partially
# update, and delete contact records.
# All endpoints require authentication.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import get_current_user, AuthUser
from app.config import settings
from app.dependencies import ContactServiceDep
from core.models.contact import (
    Contact,
    ContactBatchCreate,
    ContactCreate,
    ContactUpdate,
    SortDirection,
    SortField,
)
from core.models.listing import (
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_FIELD,
    ContactPage,
    ListingQuery,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Listing
# =============================================================================

@router.get("", response_model=ContactPage)
async def list_contacts(
    service: ContactServiceDep,
    user: AuthUser = Depends(get_current_user),
    search: Annotated[str, Query(max_length=255, description="Name contains (case-insensitive)")] = "",
    sort_by: Annotated[SortField, Query(description="Column to sort by")] = DEFAULT_SORT_FIELD,
    sort_dir: Annotated[SortDirection, Query(description="Sort direction")] = DEFAULT_SORT_DIRECTION,
    page: Annotated[int, Query(ge=0, description="Zero-based page index")] = 0,
    page_size: Annotated[int | None, Query(ge=1, le=100, description="Rows per page")] = None,
):
    """
    List contacts.

    Filters by name substring, sorts by any column, and returns one page
    plus the total number of matches so clients can render page controls.
    """
    query = ListingQuery(
        search=search,
        sort_by=sort_by,
        sort_dir=sort_dir,
        page=page,
        page_size=page_size or settings.DEFAULT_PAGE_SIZE,
    )
    return service.list_contacts(query)


# =============================================================================
# Create
# =============================================================================

@router.post("", response_model=Contact, status_code=status.HTTP_201_CREATED)
async def create_contact(
    request: ContactCreate,
    service: ContactServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create one contact.

    Returns the stored record with its server-generated id and created_at.
    """
    contact = service.create_contact(request)
    logger.info(f"User {user.id} created contact {contact.id}")
    return contact


@router.post("/batch", status_code=status.HTTP_201_CREATED)
async def create_contacts(
    request: ContactBatchCreate,
    service: ContactServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create several contacts at once.

    The batch is stored in a single insert: all contacts or none.
    """
    contacts = service.create_contacts(request.contacts)
    logger.info(f"User {user.id} created {len(contacts)} contact(s)")
    return {
        "created": len(contacts),
        "contacts": [c.model_dump(mode="json") for c in contacts],
    }


# =============================================================================
# Read / Update / Delete
# =============================================================================

@router.get("/{contact_id}", response_model=Contact)
async def get_contact(
    contact_id: Annotated[str, Path(description="Contact identifier")],
    service: ContactServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """Get one contact by id."""
    return service.get_contact(contact_id)


@router.patch("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: Annotated[str, Path(description="Contact identifier")],
    request: ContactUpdate,
    service: ContactServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Partially update a contact.

    Only the fields present in the body are changed. The identifier and
    creation timestamp can never be changed.
    """
    contact = service.update_contact(contact_id, request)
    logger.info(f"User {user.id} updated contact {contact_id}: {sorted(request.changes())}")
    return contact


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: Annotated[str, Path(description="Contact identifier")],
    service: ContactServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """Delete a contact permanently."""
    service.delete_contact(contact_id)
    logger.info(f"User {user.id} deleted contact {contact_id}")
    return {"deleted": contact_id}
