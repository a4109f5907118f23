# =============================================================================
# client/api.py - Contacts API Client
# =============================================================================
# Async HTTP client for the Contacts API, used by the listing view, row
# editor, create forms and upload flow. One ContactsAPI (one httpx
# AsyncClient) is created per operator session and injected into each
# component.
#
# Usage:
#   async with httpx.AsyncClient(base_url="http://localhost:8000") as http:
#       api = ContactsAPI(http, token=access_token)
#       page = await api.list_contacts(ListingQuery(search="jo"))
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from core.models.contact import Contact, ContactCreate
from core.models.listing import ContactPage, ListingQuery
from core.models.upload import UploadAuthorization

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

ModelT = TypeVar("ModelT", bound=BaseModel)


class ContactsAPIError(Exception):
    """
    A request to the Contacts API failed.

    status_code is None when the request never got a response.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"[{self.status_code}] {self.message}"


def _error_from_response(response: httpx.Response) -> ContactsAPIError:
    try:
        body = response.json()
    except ValueError:
        body = {}

    message = "Request failed"
    details = None
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str):
            message = detail
        elif isinstance(detail, list):
            # FastAPI request validation errors
            message = "Validation error"
            details = detail
        if isinstance(body.get("error"), str):
            message = body["error"]
        details = details or body.get("details")
        code = body.get("code")
    else:
        code = None

    return ContactsAPIError(message, status_code=response.status_code, code=code, details=details)


class ContactsAPI:
    """Typed wrapper over the Contacts API endpoints."""

    def __init__(self, http: httpx.AsyncClient, token: str | None = None):
        self.http = http
        self.token = token

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self.http.request(method, f"{API_PREFIX}{path}", headers=headers, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ContactsAPIError(f"Could not reach the server: {e}")

        if response.is_error:
            error = _error_from_response(response)
            logger.error(f"{method} {path} -> {error}")
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.error(f"{method} {path} returned a non-JSON body")
            raise ContactsAPIError(
                "Server returned an unreadable response", status_code=response.status_code
            )

    @staticmethod
    def _parse(model: type[ModelT], data: Any) -> ModelT:
        """Validate a response body; a malformed body is an API error."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected {model.__name__} response: {e}")
            raise ContactsAPIError(
                f"Server returned an invalid {model.__name__}", details=e.errors()
            )

    # -------------------------------------------------------------------------
    # Contacts
    # -------------------------------------------------------------------------

    async def list_contacts(self, query: ListingQuery) -> ContactPage:
        data = await self._request("GET", "/contacts", params=query.to_params())
        return self._parse(ContactPage, data)

    async def get_contact(self, contact_id: str) -> Contact:
        data = await self._request("GET", f"/contacts/{contact_id}")
        return self._parse(Contact, data)

    async def create_contact(self, contact: ContactCreate) -> Contact:
        data = await self._request(
            "POST", "/contacts", json=contact.model_dump(mode="json", exclude_none=True)
        )
        return self._parse(Contact, data)

    async def create_contacts(self, contacts: list[ContactCreate]) -> list[Contact]:
        payload = {"contacts": [c.model_dump(mode="json", exclude_none=True) for c in contacts]}
        data = await self._request("POST", "/contacts/batch", json=payload)
        rows = data.get("contacts") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            logger.error("Batch create response has no contacts list")
            raise ContactsAPIError("Server returned an invalid batch result")
        return [self._parse(Contact, row) for row in rows]

    async def update_contact(self, contact_id: str, fields: dict[str, Any]) -> Contact:
        """Send a partial update carrying only `fields`."""
        data = await self._request("PATCH", f"/contacts/{contact_id}", json=fields)
        return self._parse(Contact, data)

    async def delete_contact(self, contact_id: str) -> None:
        await self._request("DELETE", f"/contacts/{contact_id}")

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    async def request_upload_authorization(self, file_name: str, file_type: str) -> UploadAuthorization:
        data = await self._request(
            "POST",
            "/uploads/authorization",
            json={"fileName": file_name, "fileType": file_type},
        )
        return self._parse(UploadAuthorization, data)
