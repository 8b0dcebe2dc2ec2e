"""
Bookshelf Backend — Users Route Table
=======================================

What:  Binds the /users endpoints to the users controller.
How:   Each route pulls the path/body values and a per-request session and
       hands them to the controller. Error responses are produced by the
       global exception handlers, so no route catches anything.

Route order matters: POST /users/login is declared before any /users/{user_id}
route so "login" is never captured as an id.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.controllers import users_controller
from bookshelf.database import get_db_session
from bookshelf.schemas.common import ErrorResponse, MessageResponse
from bookshelf.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List all users",
)
async def get_users(db: AsyncSession = Depends(get_db_session)) -> List[UserResponse]:
    return await users_controller.get_users(db)


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing field or invalid password", "model": ErrorResponse},
        422: {"description": "Email already taken or create failed", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def create_user(
    payload: UserCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await users_controller.create_user(db, payload)


@router.post(
    "/login",
    response_model=MessageResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        403: {"description": "Wrong password", "model": ErrorResponse},
        404: {"description": "No user with this email", "model": ErrorResponse},
    },
    summary="Check an email/password pair",
)
async def login_user(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await users_controller.login_user(db, payload)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={422: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a single user by ID",
)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await users_controller.get_user(db, user_id)


@router.put(
    "/{user_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing field", "model": ErrorResponse},
        422: {"description": "Not found, email taken or update failed", "model": ErrorResponse},
    },
    summary="Update a user's email and full name",
)
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await users_controller.update_user(db, user_id, payload)


@router.post(
    "/{user_id}/password",
    response_model=MessageResponse,
    responses={501: {"description": "Password change is not enabled", "model": ErrorResponse}},
    summary="Change a user's password",
)
async def change_password(
    user_id: str,
    payload: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await users_controller.change_password(db, user_id, payload)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    responses={422: {"description": "Delete failed", "model": ErrorResponse}},
    summary="Delete a user",
)
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await users_controller.delete_user(db, user_id)
