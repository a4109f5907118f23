# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import posixpath
from urllib.parse import quote, urlsplit, urlunsplit
from uuid import UUID


# =============================================================================
# Identifier Utilities
# =============================================================================

def normalize_id(value: str | UUID) -> str:
    """
    Normalize a record identifier to string format.

    Example:
        contact_id = normalize_id(uuid_obj)  # "550e8400-..."
        contact_id = normalize_id("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Object Storage Utilities
# =============================================================================

def object_key(prefix: str, file_name: str) -> str:
    """
    Build an object key from a client-supplied file name.

    Directory components are dropped so a client can never write outside
    the configured prefix.

    Returns:
        The key, or "" if the name has no usable basename
    """
    base = posixpath.basename(file_name.replace("\\", "/")).strip()
    if base in ("", ".", ".."):
        return ""
    return f"{prefix}{base}"


def object_url(base_url: str, key: str) -> str:
    """
    Join a bucket endpoint and an object key into the object's URL.

    The key is percent-encoded the way S3 signers encode it, so the result
    matches a signed PUT URL with its query string removed.

    Example:
        object_url("https://b.s3.amazonaws.com/", "my photo.png")
        # "https://b.s3.amazonaws.com/my%20photo.png"
    """
    return f"{base_url.rstrip('/')}/{quote(key, safe='/~')}"


def strip_query(url: str) -> str:
    """
    Remove the query string and fragment from a URL.

    A pre-signed URL minus its signature is the object's plain URL.
    """
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
