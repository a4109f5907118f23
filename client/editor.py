# =============================================================================
# client/editor.py - Inline Row Editor
# =============================================================================
# Each table row is either showing a contact (DISPLAY) or holding an edit
# buffer (EDITING). Confirming sends only the fields that changed; the row
# shows the new values once the server has stored them.
# =============================================================================

import logging
from enum import Enum
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from core.models.contact import EDITABLE_FIELDS, Contact, ContactUpdate, field_errors

from .api import ContactsAPIError

logger = logging.getLogger(__name__)

UpdateFn = Callable[[str, dict[str, Any]], Awaitable[Contact | None]]


class RowMode(str, Enum):
    DISPLAY = "display"
    EDITING = "editing"


class RowEditor:
    """
    Edit state for one row.

    Args:
        contact: The record the row shows
        update: Saves a partial update; returns the stored record, or
            None when the save failed
    """

    def __init__(self, contact: Contact, update: UpdateFn):
        self.contact = contact
        self.update = update
        self.mode = RowMode.DISPLAY
        self.buffer: dict[str, Any] = {}
        self.errors: dict[str, str] = {}
        self.saving = False

    @property
    def values(self) -> dict[str, Any]:
        """What the row's inputs or cells show right now."""
        if self.mode == RowMode.EDITING:
            return dict(self.buffer)
        return self.contact.editable_values()

    def begin_edit(self) -> None:
        if self.mode == RowMode.EDITING:
            return
        self.buffer = self.contact.editable_values()
        self.errors = {}
        self.mode = RowMode.EDITING

    def set_field(self, field: str, value: Any) -> None:
        if self.mode != RowMode.EDITING:
            raise RuntimeError("Row is not being edited")
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"{field} cannot be edited")
        self.buffer[field] = value
        self.errors.pop(field, None)

    def cancel(self) -> None:
        """Drop the buffer; the server is never contacted."""
        self.buffer = {}
        self.errors = {}
        self.mode = RowMode.DISPLAY

    def _changes(self) -> dict[str, Any]:
        original = self.contact.editable_values()
        changed: dict[str, Any] = {}
        for field, value in self.buffer.items():
            if field == "image_url" and value == "":
                value = None
            if value != original[field]:
                changed[field] = value
        return changed

    async def confirm(self) -> bool:
        """
        Validate and save the changed fields.

        Returns:
            True when the row is back in DISPLAY, False when it stays in
            EDITING because of validation or server errors
        """
        if self.mode != RowMode.EDITING:
            raise RuntimeError("Row is not being edited")

        try:
            payload = ContactUpdate.model_validate(self._changes()).changes()
        except ValidationError as e:
            self.errors = field_errors(e)
            return False

        # "30" typed over 30 is not a change once parsed
        original = self.contact.model_dump(mode="json")
        payload = {k: v for k, v in payload.items() if v != original.get(k)}
        if not payload:
            self.cancel()
            return True

        self.saving = True
        try:
            contact = await self.update(self.contact.id, payload)
        except ContactsAPIError as e:
            logger.error(f"Update of contact {self.contact.id} failed: {e}")
            contact = None
        finally:
            self.saving = False

        if contact is None:
            self.errors = {"__root__": "Failed to update contact. Please try again."}
            return False

        self.contact = contact
        self.cancel()
        return True
