# =============================================================================
# client/listing.py - Contact Listing View
# =============================================================================
# State behind the contacts table: search box, sortable column headers,
# page controls and the rows currently shown.
#
# Search is debounced: every keystroke restarts a quiet period and only
# the last text is queried. Each fetch carries a sequence number and a
# response that is not the latest one issued is dropped, so a slow early
# query can never overwrite a newer result.
#
# All methods must be called from the event loop that owns the view.
# =============================================================================

import asyncio
import logging
from typing import Any, Coroutine

from core.models.contact import Contact, SortDirection, SortField
from core.models.listing import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_FIELD,
    ListingQuery,
    total_pages,
)

from .api import ContactsAPI, ContactsAPIError
from .editor import RowEditor
from .notifications import NoticeBoard

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


class ListingView:
    """
    Filtered, sorted, paginated view over the contacts table.

    Example:
        view = ListingView(api)
        await view.mount()
        view.set_search("jo")       # fetches after the quiet period
        await view.set_sort(SortField.AGE, SortDirection.ASC)
        await view.set_page(1)
    """

    def __init__(
        self,
        api: ContactsAPI,
        page_size: int = DEFAULT_PAGE_SIZE,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        notices: NoticeBoard | None = None,
    ):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.api = api
        self.page_size = page_size
        self.debounce_seconds = debounce_seconds
        self.notices = notices or NoticeBoard()

        self.search = ""
        self.sort_by = DEFAULT_SORT_FIELD
        self.sort_dir = DEFAULT_SORT_DIRECTION
        self.page = 0

        self.contacts: list[Contact] = []
        self.total = 0
        self.loading = False

        self._issued = 0
        self._debounce: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def query(self) -> ListingQuery:
        return ListingQuery(
            search=self.search,
            sort_by=self.sort_by,
            sort_dir=self.sort_dir,
            page=self.page,
            page_size=self.page_size,
        )

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def mount(self) -> None:
        """Load the first page."""
        await self.refresh()

    async def refresh(self) -> bool:
        """
        Fetch the current query and replace the shown rows.

        Returns:
            True if the response was applied, False if it failed or was
            superseded by a newer fetch
        """
        self._issued += 1
        seq = self._issued
        query = self.query
        self.loading = True
        logger.debug(f"Fetch #{seq}: {query.to_params()}")

        try:
            page = await self.api.list_contacts(query)
        except ContactsAPIError as e:
            if seq != self._issued:
                logger.debug(f"Dropping failed stale fetch #{seq}")
                return False
            self.loading = False
            self.notices.error("Error", f"Failed to fetch contacts: {e.message}")
            return False

        if seq != self._issued:
            logger.debug(f"Dropping stale fetch #{seq} (latest is #{self._issued})")
            return False

        self.contacts = page.contacts
        self.total = page.total
        self.loading = False
        return True

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    def _cancel_debounce(self) -> None:
        if self._debounce is not None and not self._debounce.done():
            self._debounce.cancel()
        self._debounce = None

    async def _fetch_after_quiet_period(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # Spawned separately so a later keystroke cancels only the timer
        self._spawn(self.refresh())

    async def wait_idle(self) -> None:
        """Wait for the pending debounce timer and all in-flight fetches."""
        while True:
            pending = list(self._inflight)
            if self._debounce is not None and not self._debounce.done():
                pending.append(self._debounce)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Query controls
    # -------------------------------------------------------------------------

    def set_search(self, text: str) -> None:
        """Change the search text; the fetch runs after the quiet period."""
        self.search = text
        self.page = 0
        self._cancel_debounce()
        self._debounce = asyncio.create_task(self._fetch_after_quiet_period())

    async def set_sort(self, field: SortField | str, direction: SortDirection | str) -> None:
        self.sort_by = SortField(field)
        self.sort_dir = SortDirection(direction)
        self._cancel_debounce()
        await self.refresh()

    async def toggle_sort(self, field: SortField | str) -> None:
        """Header click: flip direction on the sorted column, else sort ascending."""
        field = SortField(field)
        if field == self.sort_by:
            direction = SortDirection.ASC if self.sort_dir == SortDirection.DESC else SortDirection.DESC
        else:
            direction = SortDirection.ASC
        await self.set_sort(field, direction)

    async def set_page(self, index: int) -> None:
        # Page 0 always exists, even for an empty result
        if index < 0 or (index > 0 and index >= self.total_pages):
            raise ValueError(f"Page {index} is out of range (0-{max(self.total_pages - 1, 0)})")
        self.page = index
        self._cancel_debounce()
        await self.refresh()

    async def next_page(self) -> None:
        await self.set_page(self.page + 1)

    async def previous_page(self) -> None:
        await self.set_page(self.page - 1)

    async def clear_filters(self) -> None:
        self.search = ""
        self.sort_by = DEFAULT_SORT_FIELD
        self.sort_dir = DEFAULT_SORT_DIRECTION
        self.page = 0
        self._cancel_debounce()
        await self.refresh()

    # -------------------------------------------------------------------------
    # Row actions
    # -------------------------------------------------------------------------

    def editor_for(self, contact: Contact) -> RowEditor:
        """Inline editor whose saves go through this view."""
        return RowEditor(contact, self.update_contact)

    async def update_contact(self, contact_id: str, fields: dict[str, Any]) -> Contact | None:
        """
        Save a partial update and show the stored record.

        The shown row changes only after the server confirms.
        """
        try:
            contact = await self.api.update_contact(contact_id, fields)
        except ContactsAPIError as e:
            self.notices.error("Error", f"Failed to update contact: {e.message}")
            return None

        self.contacts = [contact if c.id == contact.id else c for c in self.contacts]
        self.notices.success("Success", "Contact updated successfully.")
        return contact

    async def delete_contact(self, contact_id: str) -> bool:
        try:
            await self.api.delete_contact(contact_id)
        except ContactsAPIError as e:
            self.notices.error("Error", f"Failed to delete contact: {e.message}")
            return False

        remaining = [c for c in self.contacts if c.id != contact_id]
        if len(remaining) != len(self.contacts):
            self.total = max(self.total - 1, 0)
        self.contacts = remaining
        self.notices.success("Success", "Contact deleted successfully.")

        # Deleting the last row of a later page moves back one page
        if not self.contacts and self.page > 0:
            self.page -= 1
            await self.refresh()
        return True
