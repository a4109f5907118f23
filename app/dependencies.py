# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for the process-wide services.
# Each service is built once (lru_cache) around the singleton SDK clients
# and injected into route handlers using Depends(). The lifespan handler in
# main.py builds them at startup; tests swap them via dependency_overrides.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import settings
from core.services.contact_service import ContactService
from core.services.upload_service import UploadService
from lib.storage_client import StorageClient
from lib.supabase_client import ContactStore, SupabaseClient


@lru_cache
def get_contact_service() -> ContactService:
    """Get the shared ContactService."""
    store = ContactStore(SupabaseClient.get_client(), table=settings.CONTACTS_TABLE)
    return ContactService(store)


@lru_cache
def get_upload_service() -> UploadService:
    """Get the shared UploadService."""
    return UploadService(
        StorageClient.get_client(),
        bucket=settings.AWS_BUCKET_NAME,
        expires_in=settings.UPLOAD_URL_EXPIRES_SECONDS,
        mode=settings.UPLOAD_MODE,
        key_prefix=settings.UPLOAD_KEY_PREFIX,
        allowed_types=settings.allowed_upload_types_list,
        max_size_bytes=settings.max_upload_size_bytes,
    )


# Type aliases for dependency injection
ContactServiceDep = Annotated[ContactService, Depends(get_contact_service)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
