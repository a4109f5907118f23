# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where possible, a hint
# telling the caller how to fix it.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ContactsException(Exception):
    """
    Base exception for the Contacts API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CONTACTS_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Contact Exceptions
# =============================================================================

class ContactNotFoundError(ContactsException):
    """Raised when a contact ID doesn't exist."""

    def __init__(self, contact_id: str):
        super().__init__(
            message=f"Contact not found: {contact_id}",
            code="CONTACT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the contact_id is correct and the contact hasn't been deleted",
            details={"contact_id": contact_id}
        )


class EmptyUpdateError(ContactsException):
    """Raised when a partial update carries no updatable fields."""

    def __init__(self, contact_id: str):
        super().__init__(
            message=f"No updatable fields supplied for contact: {contact_id}",
            code="EMPTY_UPDATE",
            status_code=400,
            suggestion="Send at least one of: name, phone, email, age, image_url",
            details={"contact_id": contact_id}
        )


class RecordStoreError(ContactsException):
    """Raised when the remote record store rejects or fails an operation."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Record store {operation} failed: {error}",
            code="RECORD_STORE_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation, "error": error}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidUploadTypeError(ContactsException):
    """Raised when the requested content type is not allowed."""

    def __init__(self, file_type: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {file_type}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"file_type": file_type, "allowed_types": allowed}
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **super().to_dict()}


class InvalidUploadKeyError(ContactsException):
    """Raised when a file name cannot be turned into an object key."""

    def __init__(self, file_name: str):
        super().__init__(
            message=f"Invalid file name: {file_name!r}",
            code="INVALID_FILE_NAME",
            status_code=400,
            suggestion="Send the plain name of the file, e.g. 'avatar.png'",
            details={"file_name": file_name}
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **super().to_dict()}


class UploadAuthorizationError(ContactsException):
    """Raised when the storage API refuses to sign an upload."""

    def __init__(self, error: str):
        super().__init__(
            message="Error generating upload URL",
            code="UPLOAD_AUTHORIZATION_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )

    def to_dict(self) -> dict[str, Any]:
        # Upload clients read the failure from the "error" key
        return {"error": self.message, **super().to_dict()}


# =============================================================================
# Exception Handlers
# =============================================================================

async def contacts_exception_handler(
    request: Request,
    exc: ContactsException
) -> JSONResponse:
    """
    Convert ContactsException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
