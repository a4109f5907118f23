# =============================================================================
# core/models/upload.py - Upload Authorization Schemas
# =============================================================================
# An upload authorization lets a client write ONE object straight to the
# storage bucket without the file passing through the API server.
#
# Two variants, selected by UPLOAD_MODE:
# - PUT:  a single pre-signed URL; the client PUTs the raw bytes to it
# - POST: a form endpoint plus policy fields; the client POSTs a multipart form
#
# Wire format is camelCase to match what browser upload widgets send.
# =============================================================================

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UploadMethod(str, Enum):
    PUT = "PUT"
    POST = "POST"


class UploadAuthorizationRequest(BaseModel):
    """
    Request body for POST /uploads/authorization.

    Example:
        {"fileName": "avatar.png", "fileType": "image/png"}
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    file_name: str = Field(
        ...,
        alias="fileName",
        min_length=1,
        max_length=1024,
        description="Desired object name"
    )

    file_type: str = Field(
        ...,
        alias="fileType",
        min_length=1,
        max_length=255,
        description="MIME type the object will be stored with"
    )


class UploadAuthorization(BaseModel):
    """
    A short-lived, single-key authorization to write one object.

    PUT variant example:
        {
            "method": "PUT",
            "key": "avatar.png",
            "contentType": "image/png",
            "expiresAt": "2024-01-15T10:31:00Z",
            "uploadURL": "https://bucket.s3.amazonaws.com/avatar.png?X-Amz-...",
            "publicUrl": "https://bucket.s3.amazonaws.com/avatar.png"
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    method: UploadMethod
    key: str
    content_type: str = Field(..., alias="contentType")
    expires_at: datetime = Field(..., alias="expiresAt")
    public_url: str = Field(..., alias="publicUrl")

    # PUT variant
    upload_url: str | None = Field(default=None, alias="uploadURL")

    # POST variant
    url: str | None = None
    fields: dict[str, str] | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at
