"""Book records"""
from .exceptions import BookStoreError
from .models import ALL_STATUSES, Book, BookStatus, parse_status_filter
from .repository import BookRepository

__all__ = [
    "ALL_STATUSES",
    "Book",
    "BookStatus",
    "parse_status_filter",
    "BookRepository",
    "BookStoreError",
]
