"""Book Tracker HTTP API 클라이언트"""
from typing import Any, Optional

import httpx
from loguru import logger

from booktracker.books.models import ALL_STATUSES, Book, BookStatus


class ApiError(Exception):
    """Raised for any non-2xx response from the API."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class BooksApiClient:
    """Thin async wrapper over the /api/books endpoints.

    Every call carries ``Authorization: Bearer <token>`` when a token is set.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.token = token
        self._client = http_client or httpx.AsyncClient(base_url=base_url.rstrip("/"))

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, url, headers=self._headers(), **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("detail", response.text) if isinstance(body, dict) else response.text
            logger.debug(f"{method} {url} failed with {response.status_code}: {detail}")
            raise ApiError(response.status_code, str(detail))
        try:
            return response.json()
        except ValueError:
            logger.debug(f"{method} {url} returned a non-JSON body")
            raise ApiError(response.status_code, "Invalid JSON response")

    async def list_books(self, status: str = ALL_STATUSES) -> list[Book]:
        params = {"status": status} if status and status != ALL_STATUSES else None
        data = await self._request("GET", "/api/books", params=params)
        return [Book.model_validate(item) for item in data or []]

    async def create_book(self, title: str, author: str, status: BookStatus) -> Book:
        data = await self._request(
            "POST",
            "/api/books",
            json={"title": title, "author": author, "status": BookStatus(status).value},
        )
        return Book.model_validate(data)

    async def update_status(self, book_id: str, status: BookStatus) -> Book:
        data = await self._request(
            "PUT", f"/api/books/{book_id}", json={"status": BookStatus(status).value}
        )
        return Book.model_validate(data)

    async def update_book(
        self, book_id: str, title: str, author: str, status: BookStatus
    ) -> Book:
        data = await self._request(
            "PATCH",
            f"/api/books/{book_id}",
            json={"title": title, "author": author, "status": BookStatus(status).value},
        )
        return Book.model_validate(data)

    async def delete_book(self, book_id: str) -> None:
        await self._request("DELETE", f"/api/books/{book_id}")

    async def aclose(self) -> None:
        await self._client.aclose()
