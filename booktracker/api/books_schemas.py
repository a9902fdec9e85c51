from datetime import datetime
from typing import Union

from pydantic import BaseModel, Field

from booktracker.books.models import BookStatus


class BookCreateRequest(BaseModel):
    """Request schema for creating a book"""
    title: str = Field(..., min_length=1, max_length=500, description="Book title")
    author: str = Field(..., min_length=1, max_length=500, description="Book author")
    status: BookStatus = Field(..., description="reading | completed | wishlist")


class BookUpdateRequest(BookCreateRequest):
    """Request schema for a full book update (PATCH)"""


class BookStatusUpdateRequest(BaseModel):
    """Request schema for a status-only update (PUT)"""
    status: BookStatus = Field(..., description="reading | completed | wishlist")


class BookResponse(BaseModel):
    """Response schema for book"""
    id: str = Field(..., description="Book ID (UUID)")
    user_id: str = Field(..., description="Owner user ID (UUID)")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    status: BookStatus = Field(..., description="Reading status")
    created_at: Union[datetime, str] = Field(..., description="Creation timestamp")

    @classmethod
    def from_row(cls, row: dict) -> "BookResponse":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            title=row["title"],
            author=row["author"],
            status=row["status"],
            created_at=row["created_at"],
        )


class DeleteResponse(BaseModel):
    """Response schema for delete"""
    success: bool = True
