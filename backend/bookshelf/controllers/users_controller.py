"""
Bookshelf Backend — Users Controller
======================================

What:  The request handlers behind every /users route.
How:   Each handler runs its ordered validation chain, awaits the users
       service and returns a response model. Any failure is raised as a typed
       error for the centralized handlers; nothing is answered ad hoc here.

Validation order (first failure wins):

    create_user                      update_user
    1. email present                 1. user exists
    2. full name present             2. email present
    3. email not registered          3. full name present
    4. password >= 8 chars           4. changed email not registered
    5. password <= 72 bytes
    6. password == confirm

    change_password (when enabled)   login_user
    1. user exists                   1. email present
    2. old password verifies         2. password present
    3. new password >= 8 chars       3. user with that email exists
    4. new password <= 72 bytes      4. password verifies
    5. new != old
    6. new == confirm
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.config import settings
from bookshelf.exceptions import ErrorType, error_responder
from bookshelf.models.user import User
from bookshelf.schemas.common import MessageResponse
from bookshelf.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from bookshelf.services.password import hash_password, password_matched
from bookshelf.services.users_service import users_service
from bookshelf.services.validation import (
    Rule,
    fits_bcrypt,
    is_long_enough,
    is_present,
    max_bytes_message,
    min_length_message,
    validate,
)

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"


async def _require_user(db: AsyncSession, user_id: str) -> User:
    user = await users_service.get_user(db, user_id)
    if user is None:
        raise error_responder(ErrorType.UNPROCESSABLE_ENTITY, USER_NOT_FOUND)
    return user


async def get_users(db: AsyncSession) -> List[UserResponse]:
    users = await users_service.get_users(db)
    return [UserResponse.model_validate(user) for user in users]


async def get_user(db: AsyncSession, user_id: str) -> UserResponse:
    user = await _require_user(db, user_id)
    return UserResponse.model_validate(user)


async def create_user(db: AsyncSession, payload: UserCreateRequest) -> MessageResponse:
    """
    Register a new user.

    The uniqueness check and the insert are separate statements; the unique
    index on users.email is what finally decides a race between two
    concurrent registrations, surfacing as "Failed to create user".

    Raises:
        ValidationError:          missing field, short/long password, mismatch
        EmailAlreadyTakenError:   email belongs to an existing user
        UnprocessableEntityError: the service did not create the row
    """
    email = payload.email
    full_name = payload.full_name
    password = payload.password

    async def email_is_free() -> bool:
        return not await users_service.email_exists(db, email)

    await validate([
        Rule(lambda: is_present(email), ErrorType.VALIDATION_ERROR,
             "Email is required", field="email"),
        Rule(lambda: is_present(full_name), ErrorType.VALIDATION_ERROR,
             "Full name is required", field="full_name"),
        Rule(email_is_free, ErrorType.EMAIL_ALREADY_TAKEN,
             "Email already exists", field="email"),
        Rule(lambda: is_long_enough(password), ErrorType.VALIDATION_ERROR,
             min_length_message(), field="password"),
        Rule(lambda: fits_bcrypt(password), ErrorType.VALIDATION_ERROR,
             max_bytes_message(), field="password"),
        Rule(lambda: password == payload.confirm_password, ErrorType.VALIDATION_ERROR,
             "Password and confirm password do not match", field="confirm_password"),
    ])

    hashed_password = await hash_password(password)

    success = await users_service.create_user(db, email, hashed_password, full_name)
    if not success:
        raise error_responder(ErrorType.UNPROCESSABLE_ENTITY, "Failed to create user")

    logger.info("User registered")
    return MessageResponse(message="User created successfully")


async def update_user(
    db: AsyncSession,
    user_id: str,
    payload: UserUpdateRequest,
) -> MessageResponse:
    """
    Change a user's email and full name.

    Keeping the current email is always allowed: the uniqueness lookup only
    runs when the address actually changes.
    """
    email = payload.email
    full_name = payload.full_name

    user = await _require_user(db, user_id)

    async def email_is_free_or_unchanged() -> bool:
        if email == user.email:
            return True
        return not await users_service.email_exists(db, email)

    await validate([
        Rule(lambda: is_present(email), ErrorType.VALIDATION_ERROR,
             "Email is required", field="email"),
        Rule(lambda: is_present(full_name), ErrorType.VALIDATION_ERROR,
             "Full name is required", field="full_name"),
        Rule(email_is_free_or_unchanged, ErrorType.EMAIL_ALREADY_TAKEN,
             "Email already exists", field="email"),
    ])

    success = await users_service.update_user(db, user_id, email, full_name)
    if not success:
        raise error_responder(ErrorType.UNPROCESSABLE_ENTITY, "Failed to update user")

    logger.info("User %s updated", user.id)
    return MessageResponse(message="User updated successfully")


async def change_password(
    db: AsyncSession,
    user_id: str,
    payload: ChangePasswordRequest,
) -> MessageResponse:
    """
    Replace a user's password.

    Answers NOT_IMPLEMENTED until settings.enable_password_change is turned on.
    """
    if not settings.enable_password_change:
        raise error_responder(ErrorType.NOT_IMPLEMENTED)

    old_password = payload.old_password
    new_password = payload.new_password

    user = await _require_user(db, user_id)

    async def old_password_matches() -> bool:
        return await password_matched(old_password, user.password_hash)

    await validate([
        Rule(old_password_matches, ErrorType.INVALID_PASSWORD,
             "Old password is incorrect", field="old_password"),
        Rule(lambda: is_long_enough(new_password), ErrorType.VALIDATION_ERROR,
             min_length_message("New password"), field="new_password"),
        Rule(lambda: fits_bcrypt(new_password), ErrorType.VALIDATION_ERROR,
             max_bytes_message("New password"), field="new_password"),
        Rule(lambda: new_password != old_password, ErrorType.VALIDATION_ERROR,
             "New password must be different from the old password", field="new_password"),
        Rule(lambda: new_password == payload.confirm_new_password, ErrorType.VALIDATION_ERROR,
             "New password and confirm new password do not match",
             field="confirm_new_password"),
    ])

    hashed_password = await hash_password(new_password)

    success = await users_service.change_password(db, user_id, hashed_password)
    if not success:
        raise error_responder(ErrorType.UNPROCESSABLE_ENTITY, "Failed to change password")

    logger.info("Password changed for user %s", user.id)
    return MessageResponse(message="Password changed successfully")


async def delete_user(db: AsyncSession, user_id: str) -> MessageResponse:
    # No existence pre-check: an unknown id is a failed delete (422), not a 200
    success = await users_service.delete_user(db, user_id)
    if not success:
        raise error_responder(ErrorType.UNPROCESSABLE_ENTITY, "Failed to delete user")

    logger.info("User %s deleted", user_id)
    return MessageResponse(message="User deleted successfully")


async def login_user(db: AsyncSession, payload: LoginRequest) -> MessageResponse:
    """
    Check an email/password pair.

    Raises:
        ValidationError:      email or password missing
        NotFoundError:        no user has that email (404)
        InvalidPasswordError: password does not match the stored hash (403)
    """
    email = payload.email
    password = payload.password

    await validate([
        Rule(lambda: is_present(email), ErrorType.VALIDATION_ERROR,
             "Email is required", field="email"),
        Rule(lambda: is_present(password), ErrorType.VALIDATION_ERROR,
             "Password is required", field="password"),
    ])

    user = await users_service.get_user_by_email(db, email)
    if user is None:
        raise error_responder(ErrorType.NOT_FOUND, USER_NOT_FOUND)

    if not await password_matched(password, user.password_hash):
        logger.warning("Failed login attempt for user %s", user.id)
        raise error_responder(ErrorType.INVALID_PASSWORD, "INVALID_PASSWORD")

    logger.info("User %s logged in", user.id)
    return MessageResponse(message="User successfully logged in")
