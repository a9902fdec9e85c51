"""대시보드 상태 관리

화면 표현과 무관한 대시보드 로직: 현재 사용자의 책 목록을 메모리에 유지하고,
사용자 동작마다 API를 한 번 호출하며, 실시간 변경 알림이 오면 목록을 다시 가져옵니다.
"""
import asyncio
from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from booktracker.books.models import ALL_STATUSES, Book, BookStatus, parse_status_filter
from .client import ApiError, BooksApiClient

# 네트워크/응답 오류: 로그만 남기고 이전 상태를 유지
REQUEST_ERRORS = (ApiError, httpx.HTTPError, ValidationError)


class BookDashboard:
    """In-memory view of the signed-in user's books."""

    def __init__(self, api: BooksApiClient):
        self.api = api
        self.books: list[Book] = []
        self.filter: str = ALL_STATUSES
        self.search: str = ""
        self.user_id: Optional[str] = None
        self._refresh_tasks: set[asyncio.Task] = set()
        self._fetch_seq = 0

    def set_session(self, token: str, user_id: str) -> None:
        self.api.token = token
        self.user_id = user_id

    def clear(self) -> None:
        """로그아웃 시 상태 초기화"""
        self.api.token = None
        self.user_id = None
        self.books = []
        self._fetch_seq += 1

    async def fetch_books(self, status_filter: Optional[str] = None) -> list[Book]:
        """Reload the list with ``status_filter`` (defaults to the selected filter).

        On failure the previous list is kept. A response that arrives after a
        newer fetch was started is dropped.
        """
        current = self.filter if status_filter is None else status_filter
        self._fetch_seq += 1
        seq = self._fetch_seq
        logger.debug(f"Fetching books with status: {current}")
        try:
            books = await self.api.list_books(current)
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to fetch books: {e}")
            return self.books

        if seq != self._fetch_seq:
            logger.debug(f"Dropping stale response for status: {current}")
            return self.books
        self.books = [book for book in books if book.user_id == self.user_id]
        return self.books

    async def change_filter(self, new_filter: str) -> list[Book]:
        parse_status_filter(new_filter)
        logger.debug(f"Changing filter to: {new_filter}")
        self.filter = new_filter
        return await self.fetch_books(new_filter)

    async def add_book(self, title: str, author: str, status: BookStatus) -> Optional[Book]:
        try:
            book = await self.api.create_book(title, author, status)
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to add book: {e}")
            return None

        self.books = [book, *self.books]
        return book

    async def delete_book(self, book_id: str) -> bool:
        try:
            await self.api.delete_book(book_id)
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to delete book: {e}")
            return False

        self.books = [book for book in self.books if book.id != book_id]
        return True

    async def update_status(self, book_id: str, status: BookStatus) -> Optional[Book]:
        try:
            updated = await self.api.update_status(book_id, status)
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to update status: {e}")
            return None

        self._replace(updated)
        return updated

    async def update_book(
        self, book_id: str, title: str, author: str, status: BookStatus
    ) -> Optional[Book]:
        try:
            updated = await self.api.update_book(book_id, title, author, status)
        except REQUEST_ERRORS as e:
            logger.error(f"Failed to update book: {e}")
            return None

        self._replace(updated)
        return updated

    def _replace(self, updated: Book) -> None:
        self.books = [updated if book.id == updated.id else book for book in self.books]

    @property
    def visible_books(self) -> list[Book]:
        """검색어는 클라이언트에서만 적용 (상태 필터는 서버에서 처리)"""
        needle = self.search.lower()
        return [book for book in self.books if needle in book.title.lower()]

    def stats(self) -> dict[str, int]:
        counts = {status.value: 0 for status in BookStatus}
        for book in self.books:
            counts[BookStatus(book.status).value] += 1
        counts["total"] = len(self.books)
        return counts

    def handle_change(self, payload: dict[str, Any]) -> None:
        """Realtime callback: refetch with the currently selected filter."""
        if self.user_id is None:
            return
        self.schedule_refresh()

    def schedule_refresh(self) -> None:
        task = asyncio.get_running_loop().create_task(self.fetch_books())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def wait_for_refresh(self) -> None:
        """진행 중인 실시간 갱신이 끝날 때까지 대기"""
        if self._refresh_tasks:
            await asyncio.gather(*list(self._refresh_tasks))
