"""
Bookshelf Backend — Books Controller
======================================

What:  Handlers behind the /books routes: paged listing, creation, and the
       by-id routes that are registered but not built yet.

Paging parameters:
    offset and limit arrive as raw query strings. Anything that is not a
    positive integer falls back to the default (offset 0, limit from
    settings), and limit is capped at settings.books_max_limit. A bad paging
    value never fails the request.
"""

import logging
from typing import NoReturn, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.config import settings
from bookshelf.exceptions import ErrorType, error_responder
from bookshelf.schemas.book import BookCreateRequest, BookListResponse, BookResponse
from bookshelf.services.books_service import books_service
from bookshelf.services.validation import Rule, is_present, validate

logger = logging.getLogger(__name__)


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def resolve_paging(offset: Optional[str], limit: Optional[str]) -> Tuple[int, int]:
    """Returns the (offset, limit) pair actually applied to the query."""
    parsed_offset = _parse_int(offset)
    parsed_limit = _parse_int(limit)

    if parsed_offset is None or parsed_offset < 0:
        parsed_offset = 0
    if parsed_limit is None or parsed_limit <= 0:
        parsed_limit = settings.books_default_limit

    return parsed_offset, min(parsed_limit, settings.books_max_limit)


async def get_books(
    db: AsyncSession,
    offset: Optional[str] = None,
    limit: Optional[str] = None,
) -> BookListResponse:
    applied_offset, applied_limit = resolve_paging(offset, limit)
    books, total_count = await books_service.list_books(db, applied_offset, applied_limit)
    return BookListResponse(
        books=[BookResponse.model_validate(book) for book in books],
        offset=applied_offset,
        limit=applied_limit,
        total_count=total_count,
    )


async def create_book(db: AsyncSession, payload: BookCreateRequest) -> BookResponse:
    await validate([
        Rule(lambda: is_present(payload.title), ErrorType.VALIDATION_ERROR,
             "Title is required", field="title"),
        Rule(lambda: is_present(payload.author), ErrorType.VALIDATION_ERROR,
             "Author is required", field="author"),
    ])

    book = await books_service.create_book(db, payload.title, payload.author)
    if book is None:
        raise error_responder(ErrorType.UNPROCESSABLE_ENTITY, "Failed to create book")

    return BookResponse.model_validate(book)


async def book_by_id_not_implemented(book_id: str) -> NoReturn:
    # TODO: get/update/delete a single book once BooksService grows by-id lookups
    logger.debug("By-id book route called for %s", book_id)
    raise error_responder(ErrorType.NOT_IMPLEMENTED)
