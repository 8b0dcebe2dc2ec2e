"""
Bookshelf Backend — Books Route Table
=======================================

What:  GET /books (paged list), POST /books (create), and the by-id routes,
       which answer 501 until they are built.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.controllers import books_controller
from bookshelf.database import get_db_session
from bookshelf.schemas.book import BookCreateRequest, BookListResponse, BookResponse
from bookshelf.schemas.common import ErrorResponse

router = APIRouter(prefix="/books", tags=["Books"])

_NOT_IMPLEMENTED = {501: {"description": "Not implemented yet", "model": ErrorResponse}}


@router.get(
    "",
    response_model=BookListResponse,
    summary="List books with offset/limit paging",
)
async def get_books(
    # Plain strings: malformed values fall back to defaults in the controller
    # instead of failing the request.
    offset: Optional[str] = Query(default=None, description="Books to skip (default 0)"),
    limit: Optional[str] = Query(default=None, description="Page size (default 10, max 100)"),
    db: AsyncSession = Depends(get_db_session),
) -> BookListResponse:
    return await books_controller.get_books(db, offset=offset, limit=limit)


@router.post(
    "",
    status_code=201,
    response_model=BookResponse,
    responses={400: {"description": "Title or author missing", "model": ErrorResponse}},
    summary="Create a book",
)
async def create_book(
    payload: BookCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> BookResponse:
    return await books_controller.create_book(db, payload)


@router.get("/{book_id}", responses=_NOT_IMPLEMENTED, summary="Get a book by ID")
async def get_book(book_id: str):
    return await books_controller.book_by_id_not_implemented(book_id)


@router.put("/{book_id}", responses=_NOT_IMPLEMENTED, summary="Update a book by ID")
async def update_book(book_id: str):
    return await books_controller.book_by_id_not_implemented(book_id)


@router.delete("/{book_id}", responses=_NOT_IMPLEMENTED, summary="Delete a book by ID")
async def delete_book(book_id: str):
    return await books_controller.book_by_id_not_implemented(book_id)
