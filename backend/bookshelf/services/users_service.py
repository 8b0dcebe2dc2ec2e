"""
Bookshelf Backend — Users Service (Persistence Layer)
=======================================================

What:  Existence checks and create/read/update/delete over the `users` table.
Why:   Keeps SQL out of the controllers; controllers decide what an outcome
       means for the client, this module only reports what happened.
How:   Every method takes the request's AsyncSession. Lookups return the
       record or None; writes return True/False. Nothing here raises a
       client-facing error: unexpected driver failures become DatabaseError.
Who:   Called by bookshelf.controllers.users_controller.

Identifier handling:
    Ids arrive from the URL as strings. A string that is not a UUID can never
    match a row, so it is treated exactly like an unknown id (None / False)
    instead of producing a framework-level 422.

Write failures:
    The unique index on users.email turns the race between two concurrent
    registrations of one address into an IntegrityError here. That is
    reported as False ("Failed to create user") after rolling the session back.
"""

import logging
import uuid
from typing import List, Optional, Union

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.exceptions import DatabaseError
from bookshelf.models.user import User

logger = logging.getLogger(__name__)

UserId = Union[str, uuid.UUID]


def parse_user_id(user_id: UserId) -> Optional[uuid.UUID]:
    """Returns the UUID for `user_id`, or None when it is not a valid UUID."""
    if isinstance(user_id, uuid.UUID):
        return user_id
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


class UsersService:
    """
    Stateless persistence operations for users.

    Responsibilities:
        - get_users / get_user / get_user_by_email: lookups
        - email_exists: uniqueness check used before create/update
        - create_user / update_user / change_password / delete_user: writes
    """

    async def get_users(self, db: AsyncSession) -> List[User]:
        try:
            result = await db.execute(
                select(User).order_by(User.created_at, User.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_user(self, db: AsyncSession, user_id: UserId) -> Optional[User]:
        uid = parse_user_id(user_id)
        if uid is None:
            return None
        try:
            result = await db.execute(select(User).where(User.id == uid))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", uid, str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": str(uid)},
            )

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user by email: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def email_exists(self, db: AsyncSession, email: str) -> bool:
        try:
            result = await db.execute(
                select(func.count(User.id)).where(User.email == email)
            )
            return (result.scalar() or 0) > 0
        except SQLAlchemyError as e:
            logger.error("Database error checking email: %s", str(e))
            raise DatabaseError(
                message="Could not verify the email address. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_user(
        self,
        db: AsyncSession,
        email: str,
        password_hash: str,
        full_name: str,
    ) -> bool:
        user = User(email=email, password_hash=password_hash, full_name=full_name)
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning("Create user rejected by database constraint")
            return False
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )
        logger.info("User record created: %s", user.id)
        return True

    async def update_user(
        self,
        db: AsyncSession,
        user_id: UserId,
        email: str,
        full_name: str,
    ) -> bool:
        user = await self.get_user(db, user_id)
        if user is None:
            return False

        user.email = email
        user.full_name = full_name
        return await self._flush_update(db, user, "update user")

    async def change_password(
        self,
        db: AsyncSession,
        user_id: UserId,
        password_hash: str,
    ) -> bool:
        user = await self.get_user(db, user_id)
        if user is None:
            return False

        user.password_hash = password_hash
        return await self._flush_update(db, user, "change password")

    async def delete_user(self, db: AsyncSession, user_id: UserId) -> bool:
        uid = parse_user_id(user_id)
        if uid is None:
            return False
        try:
            result = await db.execute(delete(User).where(User.id == uid))
            await db.flush()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting user %s: %s", uid, str(e))
            raise DatabaseError(
                message="Could not delete the user. Please try again.",
                context={"user_id": str(uid)},
            )
        return (result.rowcount or 0) > 0

    async def _flush_update(self, db: AsyncSession, user: User, action: str) -> bool:
        # Rollback expires every loaded attribute; read the id while it is loaded
        user_id = user.id
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning("%s rejected by database constraint for %s", action, user_id)
            return False
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error during %s for %s: %s", action, user_id, str(e))
            raise DatabaseError(
                message="Could not save the user. Please try again.",
                context={"user_id": str(user_id)},
            )
        return True


# ── Singleton Instance ────────────────────────────────────────────────────
users_service = UsersService()
