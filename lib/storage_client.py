# =============================================================================
# lib/storage_client.py - S3 Client Wrapper
# =============================================================================
# Holds the process-wide boto3 S3 client used to sign upload authorizations.
# Signing happens locally; no request reaches S3 until the client uploads.
#
# Usage:
#   from lib.storage_client import StorageClient
#   s3 = StorageClient.get_client()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config

from app.config import settings

logger = logging.getLogger(__name__)


class StorageClientError(Exception):
    """Error creating the S3 client."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        result = self.message
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def create_s3_client(
    region: str,
    access_key_id: str | None = None,
    secret_access_key: str | None = None,
) -> Any:
    """
    Create an S3 client that signs with SigV4.

    SigV4 with virtual-hosted addressing produces URLs of the form
    https://<bucket>.s3[.<region>].amazonaws.com/<key>?X-Amz-..., so the
    public object URL is the signed URL without its query string.
    Explicit keys are optional; without them boto3 uses its normal
    credential chain (env, profile, instance role).
    """
    kwargs: dict[str, Any] = {
        "region_name": region,
        "config": Config(signature_version="s3v4", s3={"addressing_style": "virtual"}),
    }
    if access_key_id and secret_access_key:
        kwargs["aws_access_key_id"] = access_key_id
        kwargs["aws_secret_access_key"] = secret_access_key
    return boto3.client("s3", **kwargs)


class StorageClient:
    """Singleton holder for the S3 client."""

    _instance: Any = None

    @classmethod
    def get_client(cls) -> Any:
        """
        Get or create the singleton S3 client.

        Raises:
            StorageClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_s3_client(
                    settings.AWS_REGION,
                    settings.AWS_ACCESS_KEY_ID,
                    settings.AWS_SECRET_ACCESS_KEY,
                )
                logger.info(f"S3 client initialized for region {settings.AWS_REGION}")
            except Exception as e:
                raise StorageClientError(
                    f"Failed to create S3 client: {e}",
                    suggestion="Check AWS_REGION and the AWS credentials in your .env file",
                )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None
