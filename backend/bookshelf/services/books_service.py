"""
Bookshelf Backend — Books Service
===================================

What:  Paged listing and creation over the `books` table.
Who:   Called by the books route handlers.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.exceptions import DatabaseError
from bookshelf.models.book import Book

logger = logging.getLogger(__name__)


class BooksService:
    async def list_books(
        self,
        db: AsyncSession,
        offset: int,
        limit: int,
    ) -> Tuple[List[Book], int]:
        """
        Returns one page of books plus the total count.

        Query plan:
            SELECT * FROM books ORDER BY created_at, id LIMIT :limit OFFSET :offset
            → idx_books_created_at serves the ordering
        """
        try:
            result = await db.execute(
                select(Book)
                .order_by(Book.created_at, Book.id)
                .offset(offset)
                .limit(limit)
            )
            books = list(result.scalars().all())

            count_result = await db.execute(select(func.count(Book.id)))
            total_count = count_result.scalar() or 0
            return books, total_count
        except SQLAlchemyError as e:
            logger.error("Database error listing books: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve books. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_book(
        self,
        db: AsyncSession,
        title: str,
        author: str,
    ) -> Optional[Book]:
        """Inserts a book; returns it, or None if the database rejected the row."""
        book = Book(title=title, author=author)
        db.add(book)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning("Create book rejected by database constraint")
            return None
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating book: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the book. Please try again.",
                context={"error_type": type(e).__name__},
            )
        logger.info("Book record created: %s", book.id)
        return book


books_service = BooksService()
