"""
Bookshelf Backend — User Request/Response Schemas
===================================================

What:  Pydantic models defining the users API contract.

Design Decision:
    Request fields are all Optional at the schema level. Presence and length
    rules are enforced by the controllers' ordered validation chains so that
    the client always gets the FIRST failing rule's message ("Email is
    required" before "Full name is required", and so on). If FastAPI enforced
    them, it would report every missing field at once with its own 422 shape.

    UserResponse deliberately has no password field: the ORM row carries the
    hash, and from_attributes only copies the fields declared here.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreateRequest(BaseModel):
    email: Optional[str] = Field(default=None, description="Unique email address")
    password: Optional[str] = Field(default=None, description="Plaintext password (min 8 chars)")
    full_name: Optional[str] = Field(default=None, description="Display name")
    confirm_password: Optional[str] = Field(
        default=None, description="Must equal `password` exactly"
    )


class UserUpdateRequest(BaseModel):
    email: Optional[str] = Field(default=None, description="New email address")
    full_name: Optional[str] = Field(default=None, description="New display name")


class ChangePasswordRequest(BaseModel):
    old_password: Optional[str] = Field(default=None, description="Current password")
    new_password: Optional[str] = Field(default=None, description="Replacement password")
    confirm_new_password: Optional[str] = Field(
        default=None, description="Must equal `new_password` exactly"
    )


class LoginRequest(BaseModel):
    email: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """
    What:  Public representation of a user.
    Who:   Returned by GET /users (as array items) and GET /users/{id}.
    """
    id: uuid.UUID = Field(description="Unique user identifier (UUID)")
    email: str = Field(description="Email address")
    full_name: str = Field(description="Display name")
    created_at: datetime = Field(description="When the user registered (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last profile or password change (UTC ISO 8601)")

    model_config = {"from_attributes": True}
