"""
Bookshelf Backend — User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table.
Who:   Used by UsersService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: non-sequential, so ids cannot be enumerated
    - email: unique index backs the controller's "email already exists" check
      and catches the race between two concurrent registrations
    - password_hash: bcrypt output; never leaves the service layer
      (UserResponse has no field for it)
    - created_at / updated_at: UTC with timezone
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    A registered user.

    Lifecycle:
        1. Created by POST /users (registration)
        2. email/full_name changed by PUT /users/{id}
        3. password_hash changed by POST /users/{id}/password
        4. Removed by DELETE /users/{id}
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Compared exactly: no case folding or trimming is applied.
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
