# =============================================================================
# app/routers/uploads.py - Upload Authorization Endpoint
# =============================================================================
# Issues pre-signed upload authorizations. The file itself goes straight
# from the client to S3; this endpoint only signs.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import get_current_user, AuthUser
from app.dependencies import UploadServiceDep
from core.models.upload import UploadAuthorization, UploadAuthorizationRequest

router = APIRouter()


@router.post(
    "/authorization",
    response_model=UploadAuthorization,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def issue_upload_authorization(
    request: UploadAuthorizationRequest,
    service: UploadServiceDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Get a short-lived authorization to upload one file.

    Body: {"fileName": "avatar.png", "fileType": "image/png"}

    Returns either {"uploadURL": ...} (PUT the bytes there with the same
    Content-Type) or {"url": ..., "fields": {...}} (POST a multipart form),
    depending on server configuration. Both include "publicUrl", the
    address of the object once the upload succeeds.
    """
    return service.issue_authorization(request.file_name, request.file_type)
