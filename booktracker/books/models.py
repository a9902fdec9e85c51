"""Book domain types"""
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel

# 목록 조회에서 필터를 적용하지 않음을 뜻하는 값
ALL_STATUSES = "all"


class BookStatus(str, Enum):
    """Reading status of a book"""
    READING = "reading"
    COMPLETED = "completed"
    WISHLIST = "wishlist"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


def parse_status_filter(value: Optional[str]) -> Optional[BookStatus]:
    """Resolve a list filter value.

    ``None``/empty and ``"all"`` mean "no filter". Anything outside the
    enumeration raises ``ValueError``.
    """
    if not value or value == ALL_STATUSES:
        return None
    if value not in BookStatus.values():
        raise ValueError(
            f"Invalid status filter: {value!r} (expected {ALL_STATUSES} or one of {', '.join(BookStatus.values())})"
        )
    return BookStatus(value)


class Book(BaseModel):
    """A book record as returned by the API"""
    id: str
    title: str
    author: str
    status: BookStatus
    created_at: Union[datetime, str]
    user_id: Optional[str] = None
