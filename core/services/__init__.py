# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .contact_service import ContactService
from .upload_service import UploadService

__all__ = [
    "ContactService",
    "UploadService",
]
