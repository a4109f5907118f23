# =============================================================================
# core/services/contact_service.py - Contact Business Logic
# =============================================================================
# Handles contact CRUD operations on top of the record store.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import ContactStore, SupabaseClientError
from lib.utils import normalize_id
from core.models.contact import Contact, ContactCreate, ContactUpdate
from core.models.listing import ContactPage, ListingQuery
from app.exceptions import ContactNotFoundError, EmptyUpdateError, RecordStoreError

logger = logging.getLogger(__name__)


class ContactService:
    """
    Service for contact management operations.

    Receives its ContactStore at construction so one store (and one
    Supabase client) is shared by every request.
    """

    def __init__(self, store: ContactStore):
        self.store = store

    def list_contacts(self, query: ListingQuery) -> ContactPage:
        """
        Run one listing query.

        Returns:
            ContactPage with the rows of the requested page and the total
            number of contacts matching the search
        """
        try:
            rows, total = self.store.list(
                search=query.search.strip(),
                sort_by=query.sort_by.value,
                descending=query.descending,
                page=query.page,
                page_size=query.page_size,
            )
        except SupabaseClientError as e:
            logger.error(f"Failed to list contacts: {e}")
            raise RecordStoreError("list", e.message)

        return ContactPage(
            contacts=[Contact.from_row(row) for row in rows],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )

    def get_contact(self, contact_id: str | UUID) -> Contact:
        """
        Get a contact by ID.

        Raises:
            ContactNotFoundError: If no contact has that id
        """
        contact_id = normalize_id(contact_id)
        try:
            row = self.store.get(contact_id)
        except SupabaseClientError as e:
            logger.error(f"Failed to fetch contact {contact_id}: {e}")
            raise RecordStoreError("fetch", e.message)

        if row is None:
            raise ContactNotFoundError(contact_id)
        return Contact.from_row(row)

    def create_contact(self, data: ContactCreate) -> Contact:
        """Create one contact and return it as stored."""
        return self.create_contacts([data])[0]

    def create_contacts(self, items: list[ContactCreate]) -> list[Contact]:
        """
        Create several contacts in a single insert.

        Either all are stored or none are.
        """
        records = [item.model_dump(mode="json", exclude_none=True) for item in items]
        try:
            rows = self.store.insert_many(records)
        except SupabaseClientError as e:
            logger.error(f"Failed to create {len(records)} contact(s): {e}")
            raise RecordStoreError("insert", e.message)

        return [Contact.from_row(row) for row in rows]

    def update_contact(self, contact_id: str | UUID, update: ContactUpdate) -> Contact:
        """
        Apply a partial update.

        Only fields set on `update` are sent; identifier and timestamps are
        never part of the payload.

        Raises:
            EmptyUpdateError: If no updatable field was supplied
            ContactNotFoundError: If no contact has that id
        """
        contact_id = normalize_id(contact_id)
        changes = update.changes()
        if not changes:
            raise EmptyUpdateError(contact_id)

        try:
            row = self.store.update(contact_id, changes)
        except SupabaseClientError as e:
            logger.error(f"Failed to update contact {contact_id}: {e}")
            raise RecordStoreError("update", e.message)

        if row is None:
            raise ContactNotFoundError(contact_id)
        return Contact.from_row(row)

    def delete_contact(self, contact_id: str | UUID) -> None:
        """
        Delete a contact.

        Raises:
            ContactNotFoundError: If no contact has that id
        """
        contact_id = normalize_id(contact_id)
        try:
            deleted = self.store.delete(contact_id)
        except SupabaseClientError as e:
            logger.error(f"Failed to delete contact {contact_id}: {e}")
            raise RecordStoreError("delete", e.message)

        if not deleted:
            raise ContactNotFoundError(contact_id)
