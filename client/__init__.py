# =============================================================================
# client/__init__.py - Contacts Client Package
# =============================================================================
# Operator-side state for the contacts app: the API client, the listing
# view, inline row editing, create forms and the direct upload flow.
# Imports only the shared models, never the server's settings.
# =============================================================================

from .api import ContactsAPI, ContactsAPIError
from .editor import RowEditor, RowMode
from .forms import BatchContactForm, ContactForm
from .listing import ListingView
from .notifications import Notice, NoticeBoard, NoticeLevel
from .upload import (
    DirectUploadFlow,
    InvalidTransitionError,
    UploadRejectedError,
    UploadState,
)

__all__ = [
    "ContactsAPI",
    "ContactsAPIError",
    "RowEditor",
    "RowMode",
    "BatchContactForm",
    "ContactForm",
    "ListingView",
    "Notice",
    "NoticeBoard",
    "NoticeLevel",
    "DirectUploadFlow",
    "InvalidTransitionError",
    "UploadRejectedError",
    "UploadState",
]
