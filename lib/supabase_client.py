# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides:
# - SupabaseClient: the process-wide Supabase client (created once, reused)
# - ContactStore: a typed wrapper over the contacts table supporting
#   filtered/sorted/paginated listing with an exact count, single and bulk
#   inserts, partial updates by id, and deletes by id
#
# Every ContactStore method is a single round-trip. Nothing is cached: a
# successful server response is the only source of truth.
#
# Usage:
#   from lib.supabase_client import SupabaseClient, ContactStore
#   store = ContactStore(SupabaseClient.get_client(), table="contact_info")
#   rows, total = store.list(search="jo", sort_by="age", page=0, page_size=10)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

logger = logging.getLogger(__name__)

# PostgREST answers 416 with this code when the requested range starts past
# the last row.
RANGE_NOT_SATISFIABLE = "PGRST103"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a code and a suggestion so callers can tell the user how to
    fix the problem, not just what failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Holder for the singleton Supabase client.

    One client is created on first use (the API warms it at startup) and
    shared for the life of the process. There is no teardown.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the service_role key, which bypasses Row Level Security.
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input only ever matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ContactStore:
    """
    Record store client for the contacts table.

    Example:
        store = ContactStore(SupabaseClient.get_client())
        row = store.insert_one({"name": "Jo", "phone": "123", ...})
        store.update(row["id"], {"email": "new@example.com"})
        store.delete(row["id"])
    """

    def __init__(self, client: Client, table: str = "contact_info"):
        self._client = client
        self.table = table

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list(
        self,
        search: str = "",
        sort_by: str = "created_at",
        descending: bool = True,
        page: int = 0,
        page_size: int = 10,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Fetch one page of contacts and the total number of matches.

        Args:
            search: Case-insensitive substring matched against name
            sort_by: Column to order by
            descending: Sort direction
            page: Zero-based page index
            page_size: Rows per page

        Returns:
            Tuple of (rows, total count)

        Raises:
            SupabaseClientError: If the query fails
        """
        start = page * page_size
        end = start + page_size - 1

        query = self._client.table(self.table).select("*", count="exact")
        if search:
            query = query.ilike("name", f"%{escape_like(search)}%")
        query = query.order(sort_by, desc=descending)
        # Postgres leaves ties unordered; offset paging needs a total order
        if sort_by != "id":
            query = query.order("id", desc=descending)
        query = query.range(start, end)

        try:
            response = query.execute()
        except Exception as e:
            if RANGE_NOT_SATISFIABLE in str(e):
                logger.debug(f"Page {page} is past the end of {self.table}")
                return [], self.count(search)
            raise SupabaseClientError(
                message=f"Failed to list contacts: {e}",
                code="LIST_FAILED",
                suggestion=f"Check that the {self.table} table exists and '{sort_by}' is a column",
                details={"search": search, "sort_by": sort_by, "page": page}
            )

        rows = response.data or []
        total = response.count or 0
        logger.debug(
            f"Listed {len(rows)} of {total} contacts "
            f"(search={search!r}, sort={sort_by} {'desc' if descending else 'asc'}, page={page})"
        )
        return rows, total

    def count(self, search: str = "") -> int:
        """Count contacts whose name matches `search`."""
        query = self._client.table(self.table).select("id", count="exact")
        if search:
            query = query.ilike("name", f"%{escape_like(search)}%")

        try:
            response = query.limit(1).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count contacts: {e}",
                code="COUNT_FAILED",
                details={"search": search}
            )
        return response.count or 0

    def get(self, contact_id: str) -> dict[str, Any] | None:
        """
        Fetch one contact by id.

        Returns:
            Row dict, or None if no contact has that id
        """
        try:
            response = (
                self._client.table(self.table)
                .select("*")
                .eq("id", contact_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch contact: {e}",
                code="FETCH_FAILED",
                suggestion="Check that the contact_id is well formed",
                details={"contact_id": contact_id}
            )

        rows = response.data or []
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert_one(self, record: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a single contact.

        Returns:
            The stored row, including server-generated id and created_at
        """
        rows = self.insert_many([record])
        return rows[0]

    def insert_many(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert several contacts in one request.

        The bulk insert is a single statement, so either every record is
        stored or none is.
        """
        if not records:
            return []

        try:
            response = self._client.table(self.table).insert(records).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert contacts: {e}",
                code="INSERT_FAILED",
                suggestion="Check the record fields against the table's constraints",
                details={"count": len(records)}
            )

        rows = response.data or []
        if len(rows) != len(records):
            raise SupabaseClientError(
                message=f"Insert returned {len(rows)} rows for {len(records)} records",
                code="INSERT_INCOMPLETE",
            )

        logger.info(f"Inserted {len(rows)} contact(s) into {self.table}")
        return rows

    def update(self, contact_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        """
        Apply a partial update to one contact.

        Returns:
            The updated row, or None if no contact has that id
        """
        try:
            response = (
                self._client.table(self.table)
                .update(fields)
                .eq("id", contact_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update contact: {e}",
                code="UPDATE_FAILED",
                details={"contact_id": contact_id, "fields": sorted(fields)}
            )

        rows = response.data or []
        if not rows:
            return None

        logger.info(f"Updated contact {contact_id}: {sorted(fields)}")
        return rows[0]

    def delete(self, contact_id: str) -> bool:
        """
        Delete one contact.

        Returns:
            True if a row was deleted, False if no contact has that id
        """
        try:
            response = (
                self._client.table(self.table)
                .delete()
                .eq("id", contact_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete contact: {e}",
                code="DELETE_FAILED",
                details={"contact_id": contact_id}
            )

        deleted = bool(response.data)
        if deleted:
            logger.info(f"Deleted contact {contact_id}")
        return deleted
