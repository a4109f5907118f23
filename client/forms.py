# =============================================================================
# client/forms.py - Create Forms
# =============================================================================
# ContactForm creates one contact; BatchContactForm creates a dynamic list
# of contacts in one request. Both validate locally with the same rules
# the API applies and never call the server while a field is invalid.
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError

from core.models.contact import Contact, ContactCreate, field_errors

from .api import ContactsAPI, ContactsAPIError
from .notifications import NoticeBoard
from .upload import DirectUploadFlow, UploadState

logger = logging.getLogger(__name__)

FORM_FIELDS = ("name", "phone", "email", "age", "image_url")


def empty_values() -> dict[str, Any]:
    return {"name": "", "phone": "", "email": "", "age": "", "image_url": None}


def _validate(values: dict[str, Any]) -> tuple[ContactCreate | None, dict[str, str]]:
    data = {k: v for k, v in values.items() if not (k == "image_url" and not v)}
    try:
        return ContactCreate.model_validate(data), {}
    except ValidationError as e:
        return None, field_errors(e)


def _uploaded_url(flow: DirectUploadFlow) -> str | None:
    if flow.state == UploadState.SUCCEEDED and flow.public_url:
        return flow.public_url
    return None


class ContactForm:
    """
    Single-contact create form.

    Example:
        form = ContactForm(api)
        form.set_field("name", "John Doe")
        ...
        contact = await form.submit()
    """

    def __init__(self, api: ContactsAPI, notices: NoticeBoard | None = None):
        self.api = api
        self.notices = notices or NoticeBoard()
        self.values = empty_values()
        self.errors: dict[str, str] = {}
        self.submitting = False

    def set_field(self, field: str, value: Any) -> None:
        if field not in FORM_FIELDS:
            raise ValueError(f"Unknown field: {field}")
        self.values[field] = value
        self.errors.pop(field, None)

    def attach_image(self, url: str) -> None:
        self.set_field("image_url", url)

    def attach_upload(self, flow: DirectUploadFlow) -> bool:
        """Use the flow's image if, and only if, its upload completed."""
        url = _uploaded_url(flow)
        if url is None:
            return False
        self.attach_image(url)
        return True

    def validate(self) -> ContactCreate | None:
        contact, self.errors = _validate(self.values)
        return contact

    def reset(self) -> None:
        self.values = empty_values()
        self.errors = {}

    async def submit(self) -> Contact | None:
        payload = self.validate()
        if payload is None:
            return None

        self.submitting = True
        try:
            contact = await self.api.create_contact(payload)
        except ContactsAPIError as e:
            logger.error(f"Create contact failed: {e}")
            self.notices.error("Error", "Failed to create contact. Please try again.")
            return None
        finally:
            self.submitting = False

        self.reset()
        self.notices.success("Contact created", "The new contact has been successfully added.")
        return contact


class BatchContactForm:
    """
    Create several contacts at once.

    The form always holds at least one entry. Submission sends every
    entry in one request and is blocked while any entry is invalid.
    """

    def __init__(self, api: ContactsAPI, notices: NoticeBoard | None = None):
        self.api = api
        self.notices = notices or NoticeBoard()
        self.entries: list[dict[str, Any]] = [empty_values()]
        self.errors: dict[int, dict[str, str]] = {}
        self.submitting = False

    def add_entry(self) -> int:
        self.entries.append(empty_values())
        return len(self.entries) - 1

    def remove_entry(self, index: int) -> bool:
        """
        Remove an entry by position.

        Returns False, leaving the entries unchanged, when the index is out
        of range or names the last remaining entry.
        """
        if len(self.entries) <= 1 or not 0 <= index < len(self.entries):
            return False
        del self.entries[index]
        # Errors are keyed by position
        self.errors = {}
        return True

    def set_field(self, index: int, field: str, value: Any) -> None:
        if field not in FORM_FIELDS:
            raise ValueError(f"Unknown field: {field}")
        self.entries[index][field] = value
        if index in self.errors:
            self.errors[index].pop(field, None)
            if not self.errors[index]:
                del self.errors[index]

    def attach_image(self, index: int, url: str) -> None:
        self.set_field(index, "image_url", url)

    def attach_upload(self, index: int, flow: DirectUploadFlow) -> bool:
        url = _uploaded_url(flow)
        if url is None:
            return False
        self.attach_image(index, url)
        return True

    def validate(self) -> list[ContactCreate] | None:
        contacts: list[ContactCreate] = []
        self.errors = {}
        for index, values in enumerate(self.entries):
            contact, errors = _validate(values)
            if errors:
                self.errors[index] = errors
            else:
                contacts.append(contact)
        return None if self.errors else contacts

    def reset(self) -> None:
        self.entries = [empty_values()]
        self.errors = {}

    async def submit(self) -> list[Contact] | None:
        payload = self.validate()
        if payload is None:
            return None

        self.submitting = True
        try:
            contacts = await self.api.create_contacts(payload)
        except ContactsAPIError as e:
            logger.error(f"Create contacts failed: {e}")
            self.notices.error("Error", "Failed to create contacts. Please try again.")
            return None
        finally:
            self.submitting = False

        self.reset()
        self.notices.success("Contacts created", f"Successfully added {len(contacts)} new contact(s).")
        return contacts
