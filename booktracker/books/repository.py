"""Book repository for Supabase table operations."""

from typing import Any, Optional

from loguru import logger
from supabase import AsyncClient

from .exceptions import BookStoreError
from .models import BookStatus


class BookRepository:
    """Repository for the ``books`` table.

    The client is expected to carry the service-role key, so row-level
    security does not apply and every query is scoped here by ``user_id``.
    The one exception is :meth:`update_status` without an owner, which keeps
    the legacy id-only behaviour of the status update endpoint.
    """

    def __init__(self, client: AsyncClient, table: str = "books"):
        """
        Initialize the repository with a Supabase client.

        Args:
            client: Supabase async client instance
            table: Name of the books table
        """
        self.client = client
        self.table = table

    async def _execute(self, operation: str, query) -> list[dict[str, Any]]:
        """Run a query builder and return its rows, raising BookStoreError on failure."""
        try:
            response = await query.execute()
        except Exception as e:
            logger.exception(f"Supabase error during {operation}")
            raise BookStoreError(operation, str(e)) from e

        if getattr(response, "error", None):
            logger.error(f"Supabase error during {operation}: {response.error}")
            raise BookStoreError(operation, str(response.error))

        if response.data is None:
            raise BookStoreError(operation, "No data returned")

        return response.data

    async def list_books(
        self, user_id: str, status: Optional[BookStatus] = None
    ) -> list[dict[str, Any]]:
        """
        List the owner's books, newest first.

        Args:
            user_id: Owner ID
            status: Optional status filter; None returns every status

        Returns:
            Book rows
        """
        query = (
            self.client.table(self.table)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        if status is not None:
            query = query.eq("status", BookStatus(status).value)

        rows = await self._execute("list_books", query)
        logger.debug(f"Listed {len(rows)} books for user {user_id} (status={status})")
        return rows

    async def create_book(
        self, user_id: str, title: str, author: str, status: BookStatus
    ) -> dict[str, Any]:
        """
        Insert a new book owned by ``user_id``.

        Returns:
            The inserted row including its assigned ``id`` and ``created_at``
        """
        query = self.client.table(self.table).insert({
            "title": title,
            "author": author,
            "status": BookStatus(status).value,
            "user_id": user_id,
        })
        rows = await self._execute("create_book", query)
        if not rows:
            raise BookStoreError("create_book", "Insert returned no rows")

        logger.info(f"Created book {rows[0].get('id')} for user {user_id}")
        return rows[0]

    async def update_book(
        self,
        book_id: str,
        user_id: str,
        title: str,
        author: str,
        status: BookStatus,
    ) -> Optional[dict[str, Any]]:
        """
        Replace title, author and status of an owned book.

        Returns:
            The updated row, or None if no book with this id belongs to the owner
        """
        query = (
            self.client.table(self.table)
            .update({"title": title, "author": author, "status": BookStatus(status).value})
            .eq("id", book_id)
            .eq("user_id", user_id)
        )
        rows = await self._execute("update_book", query)
        if not rows:
            return None

        logger.info(f"Updated book {book_id} for user {user_id}")
        return rows[0]

    async def update_status(
        self, book_id: str, status: BookStatus, user_id: Optional[str] = None
    ) -> Optional[dict[str, Any]]:
        """
        Change only the status of a book.

        Without ``user_id`` the update is filtered by id alone.

        Returns:
            The updated row, or None if nothing matched
        """
        query = (
            self.client.table(self.table)
            .update({"status": BookStatus(status).value})
            .eq("id", book_id)
        )
        if user_id is not None:
            query = query.eq("user_id", user_id)

        rows = await self._execute("update_status", query)
        if not rows:
            return None

        logger.info(f"Set status of book {book_id} to {BookStatus(status).value}")
        return rows[0]

    async def delete_book(self, book_id: str, user_id: str) -> None:
        """
        Delete an owned book.

        A book that does not exist or belongs to someone else is left alone
        without raising.
        """
        query = (
            self.client.table(self.table)
            .delete()
            .eq("id", book_id)
            .eq("user_id", user_id)
        )
        rows = await self._execute("delete_book", query)
        logger.info(f"Deleted {len(rows)} book(s) with id {book_id} for user {user_id}")
