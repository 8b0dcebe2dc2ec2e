"""
Bookshelf Backend — Book SQLAlchemy Model
===========================================

What:  ORM model representing the `books` table.
Who:   Used by BooksService for listing and creation.

Listing is offset/limit paged and ordered by (created_at, id), so the
index on created_at serves the common query directly.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.database import Base


class Book(Base):
    __tablename__ = "books"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_books_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"
