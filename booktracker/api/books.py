from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials
from supabase import AsyncClient
from loguru import logger

from booktracker.auth.dependencies import (
    get_supabase_client,
    oauth2_scheme,
    require_bearer_token,
    verify_current_user,
)
from booktracker.auth.schemas import User
from booktracker.books import BookRepository, BookStoreError, parse_status_filter
from booktracker.config import config
from .books_schemas import (
    BookCreateRequest,
    BookResponse,
    BookStatusUpdateRequest,
    BookUpdateRequest,
    DeleteResponse,
)


router = APIRouter(prefix="/books", tags=["books"])


def get_book_repository(
    client: AsyncClient = Depends(get_supabase_client),
) -> BookRepository:
    return BookRepository(client, table=config.BOOKS_TABLE)


async def get_status_update_owner(
    token: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    client: AsyncClient = Depends(get_supabase_client),
) -> Optional[User]:
    """
    Resolve the caller for PUT /books/{id}.

    Returns None while STATUS_UPDATE_OWNER_SCOPED is off, in which case the
    update is filtered by id only. When it is on, the caller must present a
    valid bearer token and the update is restricted to their own book.
    """
    if not config.STATUS_UPDATE_OWNER_SCOPED:
        return None

    return await verify_current_user(require_bearer_token(token), client)


@router.get("", response_model=list[BookResponse])
async def get_books(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    current_user: User = Depends(verify_current_user),
    repository: BookRepository = Depends(get_book_repository),
) -> list[BookResponse]:
    """
    Get the current user's books, newest first.

    ``status`` narrows the list to one status; missing or ``all`` returns everything.
    """
    try:
        book_status = parse_status_filter(status_filter)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid status filter"
        )

    try:
        rows = await repository.list_books(current_user.id, book_status)
        books = [BookResponse.from_row(row) for row in rows]

        logger.info(f"Retrieved {len(books)} books for user {current_user.id}")
        return books

    except Exception:
        logger.exception(f"Failed to retrieve books for user {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch books"
        )


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    request: BookCreateRequest,
    current_user: User = Depends(verify_current_user),
    repository: BookRepository = Depends(get_book_repository),
) -> BookResponse:
    """Create a new book owned by the current user."""
    try:
        row = await repository.create_book(
            current_user.id, request.title, request.author, request.status
        )
        return BookResponse.from_row(row)

    except Exception:
        # 🔒 Security: Log full error with stack trace internally, but hide details from user
        logger.exception(f"Failed to create book for user {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add book"
        )


@router.put("/{book_id}", response_model=BookResponse)
async def update_book_status(
    book_id: str,
    request: BookStatusUpdateRequest,
    owner: Optional[User] = Depends(get_status_update_owner),
    repository: BookRepository = Depends(get_book_repository),
) -> BookResponse:
    """
    Change only the status of a book.

    Unless STATUS_UPDATE_OWNER_SCOPED is enabled this is filtered by book id
    alone and needs no token, unlike every other mutation.
    """
    try:
        row = await repository.update_status(
            book_id, request.status, user_id=owner.id if owner else None
        )
    except BookStoreError as e:
        logger.error(f"Failed to update status of book {book_id}: {e.operation}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to update status"
        )

    if row is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to update status"
        )
    return BookResponse.from_row(row)


@router.patch("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: str,
    request: BookUpdateRequest,
    current_user: User = Depends(verify_current_user),
    repository: BookRepository = Depends(get_book_repository),
) -> BookResponse:
    """Replace title, author and status of one of the current user's books."""
    try:
        row = await repository.update_book(
            book_id, current_user.id, request.title, request.author, request.status
        )
        if row is None:
            # not found and not owned collapse into the same failure
            raise BookStoreError("update_book", f"No book {book_id} for user {current_user.id}")
        return BookResponse.from_row(row)

    except Exception:
        logger.exception(f"Failed to update book {book_id} for user {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update book"
        )


@router.delete("/{book_id}", response_model=DeleteResponse)
async def delete_book(
    book_id: str,
    current_user: User = Depends(verify_current_user),
    repository: BookRepository = Depends(get_book_repository),
) -> DeleteResponse:
    """Delete one of the current user's books."""
    try:
        await repository.delete_book(book_id, current_user.id)
        return DeleteResponse(success=True)

    except Exception:
        logger.exception(f"Failed to delete book {book_id} for user {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete"
        )
