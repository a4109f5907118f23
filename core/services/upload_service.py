# =============================================================================
# core/services/upload_service.py - Upload Authorization Issuer
# =============================================================================
# Issues short-lived authorizations that let a client write one object
# directly to the S3 bucket. The API server never sees the file bytes and
# issuing an authorization creates no contact record.
#
# One capability, two variants (selected by UPLOAD_MODE):
# - "put":  pre-signed PUT URL bound to key + content type
# - "post": pre-signed POST policy bound to key + content type (+ size cap)
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Literal

from botocore.exceptions import BotoCoreError, ClientError

from lib.utils import object_key, object_url, strip_query
from core.models.upload import UploadAuthorization, UploadMethod
from app.exceptions import (
    InvalidUploadKeyError,
    InvalidUploadTypeError,
    UploadAuthorizationError,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadService:
    """
    Service that signs upload authorizations.

    Example:
        service = UploadService(s3, bucket="media", expires_in=60)
        auth = service.issue_authorization("avatar.png", "image/png")
        # client: PUT auth.upload_url with Content-Type: image/png
    """

    def __init__(
        self,
        s3_client: Any,
        bucket: str,
        expires_in: int = 60,
        mode: Literal["put", "post"] = "put",
        key_prefix: str = "",
        allowed_types: list[str] | None = None,
        max_size_bytes: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.s3 = s3_client
        self.bucket = bucket
        self.expires_in = expires_in
        self.mode = mode
        self.key_prefix = key_prefix
        self.allowed_types = allowed_types or []
        self.max_size_bytes = max_size_bytes
        self.clock = clock

    def _check_type(self, file_type: str) -> None:
        if not self.allowed_types:
            return
        normalized = file_type.lower()
        for allowed in self.allowed_types:
            if allowed.endswith("/") and normalized.startswith(allowed):
                return
            if normalized == allowed:
                return
        raise InvalidUploadTypeError(file_type, self.allowed_types)

    def issue_authorization(self, file_name: str, file_type: str) -> UploadAuthorization:
        """
        Sign an authorization to write `file_name` with type `file_type`.

        Single attempt: a storage API failure is reported, never retried.

        Raises:
            InvalidUploadTypeError: If the content type is not allowed
            InvalidUploadKeyError: If the name has no usable basename
            UploadAuthorizationError: If signing fails
        """
        self._check_type(file_type)

        key = object_key(self.key_prefix, file_name)
        if not key:
            raise InvalidUploadKeyError(file_name)

        issued_at = self.clock()
        expires_at = issued_at + timedelta(seconds=self.expires_in)

        try:
            if self.mode == "post":
                authorization = self._sign_post(key, file_type, expires_at)
            else:
                authorization = self._sign_put(key, file_type, expires_at)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to sign upload for {key}: {e}")
            raise UploadAuthorizationError(str(e))

        logger.info(
            f"Issued {authorization.method.value} upload authorization for {key} "
            f"({file_type}, expires in {self.expires_in}s)"
        )
        return authorization

    def _sign_put(self, key: str, file_type: str, expires_at: datetime) -> UploadAuthorization:
        upload_url = self.s3.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": key, "ContentType": file_type},
            ExpiresIn=self.expires_in,
        )
        return UploadAuthorization(
            method=UploadMethod.PUT,
            key=key,
            content_type=file_type,
            expires_at=expires_at,
            upload_url=upload_url,
            public_url=strip_query(upload_url),
        )

    def _sign_post(self, key: str, file_type: str, expires_at: datetime) -> UploadAuthorization:
        conditions: list[Any] = [{"Content-Type": file_type}]
        if self.max_size_bytes:
            conditions.append(["content-length-range", 1, self.max_size_bytes])

        response = self.s3.generate_presigned_post(
            Bucket=self.bucket,
            Key=key,
            Fields={"Content-Type": file_type},
            Conditions=conditions,
            ExpiresIn=self.expires_in,
        )
        url = response["url"]
        fields = {name: str(value) for name, value in response["fields"].items()}
        return UploadAuthorization(
            method=UploadMethod.POST,
            key=key,
            content_type=file_type,
            expires_at=expires_at,
            url=url,
            fields=fields,
            public_url=object_url(url, fields.get("key", key)),
        )
